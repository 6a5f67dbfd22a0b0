"""Helpers for encoding and decoding Gmail payloads and headers."""

from __future__ import annotations

import base64
import binascii
from typing import Optional

from .errors import DecodeFailure
from .types import MessagePart

_URLSAFE_TO_STANDARD = bytes.maketrans(b"-_", b"+/")


def encode_raw_message(message: str | bytes) -> str:
    """
    Encode a composed RFC 822 message for the Gmail API `raw` field
    (URL-safe base64, no padding).
    """
    if isinstance(message, str):
        message = message.encode("utf-8")
    return base64.urlsafe_b64encode(message).decode("ascii").rstrip("=")


def _decode_urlsafe_nopad(raw: bytes) -> bytes:
    if b"=" in raw:
        raise binascii.Error("unexpected padding")
    raw += b"=" * ((-len(raw)) % 4)
    return _decode_canonical(raw.translate(_URLSAFE_TO_STANDARD))


def _decode_urlsafe(raw: bytes) -> bytes:
    return _decode_canonical(raw.translate(_URLSAFE_TO_STANDARD))


def _decode_standard(raw: bytes) -> bytes:
    return _decode_canonical(raw)


def _decode_canonical(raw: bytes) -> bytes:
    """Strict standard-alphabet decode; unused trailing bits must be zero."""
    decoded = base64.b64decode(raw, validate=True)
    if base64.b64encode(decoded) != raw:
        raise binascii.Error("non-canonical base64 encoding")
    return decoded


# Gmail almost always sends the first form.
_DECODERS = (_decode_urlsafe_nopad, _decode_urlsafe, _decode_standard)


def b64url_decode(data: str | bytes) -> bytes:
    """
    Decode the base64 blobs Gmail returns.

    Tries URL-safe without padding, URL-safe with padding, then standard
    base64, and returns the first that succeeds. Raises DecodeFailure if
    none do.
    """
    raw = data.encode("ascii", "replace") if isinstance(data, str) else bytes(data)
    last_error: Optional[Exception] = None
    for decoder in _DECODERS:
        try:
            return decoder(raw)
        except (binascii.Error, ValueError) as e:
            last_error = e
    raise DecodeFailure(f"Invalid base64 data: {last_error}") from last_error


def b64url_decode_string(data: str | bytes) -> str:
    """Decode base64 data and require the result to be valid UTF-8."""
    decoded = b64url_decode(data)
    try:
        return decoded.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeFailure(f"Invalid UTF-8 content: {e}") from e


def encode_mime_header(text: str) -> str:
    """
    Make a header value safe for a single header line. Plain ASCII passes
    through untouched; anything else becomes an RFC 2047 encoded word.
    """
    if all(ord(c) < 128 and c not in "\r\n" for c in text):
        return text
    encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
    return f"=?UTF-8?B?{encoded}?="


def find_header(part: MessagePart, name: str) -> Optional[str]:
    """
    Return the value of the first header called `name` (any case) on this
    part. Child parts are not searched.
    """
    wanted = name.lower()
    for header in part.headers:
        if header.name.lower() == wanted:
            return header.value
    return None


__all__ = [
    "b64url_decode",
    "b64url_decode_string",
    "encode_mime_header",
    "encode_raw_message",
    "find_header",
]
