"""Build RFC 822 messages for the Gmail API from EmailParams."""

from __future__ import annotations

import base64
import mimetypes
import time
from pathlib import Path
from typing import List

from .decoder import encode_mime_header
from .errors import AttachmentNotFound, InvalidAddress
from .types import AttachmentData, EmailParams, MimeType

CRLF = "\r\n"
BASE64_LINE_LENGTH = 76

# ------------------ Public API ------------------

def validate_email(email: str) -> bool:
    """Cheap structural check: local@domain.tld, no spaces."""
    parts = email.split("@")
    if len(parts) != 2:
        return False
    local, domain = parts
    return (
        bool(local)
        and bool(domain)
        and " " not in local
        and " " not in domain
        and "." in domain
        and not domain.startswith(".")
        and not domain.endswith(".")
    )


def load_attachment(path: str | Path) -> AttachmentData:
    """
    Read a file from disk into an AttachmentData, guessing its MIME type from
    the extension.
    """
    path = Path(path)
    if not path.exists():
        raise AttachmentNotFound(str(path))
    mime_type, _ = mimetypes.guess_type(path.name)
    return AttachmentData(
        filename=path.name or "attachment",
        mime_type=mime_type or "application/octet-stream",
        data=path.read_bytes(),
    )


def create_email_message(params: EmailParams) -> str:
    """
    Compose a complete message. Raises InvalidAddress on the first bad `to`
    address; nothing is produced in that case.
    """
    for email in params.to:
        if not validate_email(email):
            raise InvalidAddress(email)

    encoded_subject = encode_mime_header(params.subject)
    has_attachments = bool(params.attachments)
    hint = params.mime_type or MimeType.TEXT_PLAIN
    use_html = params.html_body is not None and hint != MimeType.TEXT_PLAIN
    html = params.html_body if params.html_body is not None else params.body

    lines: List[str] = ["From: me", f"To: {', '.join(params.to)}"]
    if params.cc:
        lines.append(f"Cc: {', '.join(params.cc)}")
    if params.bcc:
        lines.append(f"Bcc: {', '.join(params.bcc)}")
    lines.append(f"Subject: {encoded_subject}")
    if params.in_reply_to is not None:
        lines.append(f"In-Reply-To: {params.in_reply_to}")
        lines.append(f"References: {params.in_reply_to}")
    lines.append("MIME-Version: 1.0")

    if has_attachments:
        mixed_boundary = f"----=_MixedPart_{_generate_boundary()}"
        lines.append(f'Content-Type: multipart/mixed; boundary="{mixed_boundary}"')
        lines.append("")
        lines.append(f"--{mixed_boundary}")

        if use_html:
            alt_boundary = f"----=_AltPart_{_generate_boundary()}"
            lines.extend(_alternative_section(alt_boundary, params.body, html))
        elif hint == MimeType.TEXT_HTML:
            lines.extend(_text_part("text/html", html))
        else:
            lines.extend(_text_part("text/plain", params.body))
        lines.append("")

        for attachment in params.attachments or []:
            lines.append(f"--{mixed_boundary}")
            lines.extend(_attachment_part(attachment))
            lines.append("")

        lines.append(f"--{mixed_boundary}--")
    elif use_html:
        boundary = f"----=_NextPart_{_generate_boundary()}"
        lines.extend(_alternative_section(boundary, params.body, html))
    elif hint == MimeType.TEXT_HTML:
        lines.extend(_text_part("text/html", html))
    else:
        lines.extend(_text_part("text/plain", params.body))

    return CRLF.join(lines)

# ------------------ utilities ------------------

def _generate_boundary() -> str:
    return format(time.time_ns(), "x")


def _text_part(mime_type: str, content: str) -> List[str]:
    return [
        f"Content-Type: {mime_type}; charset=UTF-8",
        "Content-Transfer-Encoding: 7bit",
        "",
        content,
    ]


def _alternative_section(boundary: str, text: str, html: str) -> List[str]:
    """multipart/alternative header plus plain and HTML renderings, closed."""
    lines = [f'Content-Type: multipart/alternative; boundary="{boundary}"', ""]
    lines.append(f"--{boundary}")
    lines.extend(_text_part("text/plain", text))
    lines.append("")
    lines.append(f"--{boundary}")
    lines.extend(_text_part("text/html", html))
    lines.append("")
    lines.append(f"--{boundary}--")
    return lines


def _attachment_part(attachment: AttachmentData) -> List[str]:
    filename = encode_mime_header(attachment.filename)
    lines = [
        f'Content-Type: {attachment.mime_type}; name="{filename}"',
        "Content-Transfer-Encoding: base64",
        f'Content-Disposition: attachment; filename="{filename}"',
        "",
    ]
    encoded = base64.b64encode(attachment.data).decode("ascii")
    lines.extend(
        encoded[i:i + BASE64_LINE_LENGTH]
        for i in range(0, len(encoded), BASE64_LINE_LENGTH)
    )
    return lines


__all__ = ["create_email_message", "load_attachment", "validate_email"]
