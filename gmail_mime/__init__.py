"""Compose and decode Gmail API messages."""

from .composer import create_email_message, load_attachment, validate_email
from .decoder import (
    b64url_decode,
    b64url_decode_string,
    encode_mime_header,
    encode_raw_message,
    find_header,
)
from .errors import AttachmentNotFound, DecodeFailure, GmailMimeError, InvalidAddress
from .parser import extract_attachments, extract_email_content, read_message, summarize_message
from .types import (
    AttachmentData,
    EmailAttachment,
    EmailContent,
    EmailParams,
    Header,
    MessagePart,
    MessagePartBody,
    MessageSummary,
    MimeType,
    ReadMessageResult,
)

__all__ = [
    "AttachmentData",
    "AttachmentNotFound",
    "DecodeFailure",
    "EmailAttachment",
    "EmailContent",
    "EmailParams",
    "GmailMimeError",
    "Header",
    "InvalidAddress",
    "MessagePart",
    "MessagePartBody",
    "MessageSummary",
    "MimeType",
    "ReadMessageResult",
    "b64url_decode",
    "b64url_decode_string",
    "create_email_message",
    "encode_mime_header",
    "encode_raw_message",
    "extract_attachments",
    "extract_email_content",
    "find_header",
    "load_attachment",
    "read_message",
    "summarize_message",
    "validate_email",
]
