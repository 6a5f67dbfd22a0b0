"""Exceptions raised by the codec."""

from __future__ import annotations


class GmailMimeError(Exception):
    pass


class InvalidAddress(GmailMimeError, ValueError):
    def __init__(self, address: str):
        super().__init__(f"Invalid email address: {address}")
        self.address = address


class DecodeFailure(GmailMimeError, ValueError):
    pass


class AttachmentNotFound(GmailMimeError, FileNotFoundError):
    def __init__(self, path: str):
        super().__init__(f"Attachment file not found: {path}")
        self.path = path


__all__ = ["GmailMimeError", "InvalidAddress", "DecodeFailure", "AttachmentNotFound"]
