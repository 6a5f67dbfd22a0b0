from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from .decoder import b64url_decode_string, find_header
from .errors import DecodeFailure
from .types import (
    EmailAttachment,
    EmailContent,
    MessagePart,
    MessageSummary,
    ReadMessageResult,
)

logger = logging.getLogger(__name__)

# ------------------ Public API ------------------

def read_message(msg: Dict[str, Any]) -> ReadMessageResult:
    """
    Turn a Gmail API message dict returned by:
      gmail.users().messages().get(userId="me", id=..., format="full")
    into a display-ready result.
    """
    message_id = msg.get("id", "")
    payload = _payload(msg)

    if payload is not None:
        content = extract_email_content(payload)
        attachments = extract_attachments(payload)
    else:
        content, attachments = EmailContent(), []

    is_html_only = not content.text and bool(content.html)
    html_body: Optional[str] = None
    if content.text:
        body = content.text
        html_body = content.html or None
    elif content.html:
        # No plain-text part: the HTML markup is used as the body verbatim.
        body = content.html
        html_body = content.html
    else:
        body = msg.get("snippet") or ""
        logger.debug(f"Email {message_id} body extraction returned empty, using snippet fallback")

    return ReadMessageResult(
        id=message_id,
        thread_id=msg.get("threadId") or "",
        subject=_header(payload, "subject"),
        from_=_header(payload, "from"),
        to=_header(payload, "to"),
        date=_header(payload, "date"),
        body=body,
        html_body=html_body,
        is_html_only=is_html_only,
        attachments=attachments,
    )

def summarize_message(msg: Dict[str, Any]) -> MessageSummary:
    """Header-only view of a message, as used for search listings."""
    payload = _payload(msg)
    return MessageSummary(
        id=msg.get("id", ""),
        thread_id=msg.get("threadId") or "",
        subject=_header(payload, "subject"),
        from_=_header(payload, "from"),
        date=_header(payload, "date"),
    )

def extract_email_content(part: MessagePart) -> EmailContent:
    """
    Walk the MIME tree (pre-order) collecting text/plain and text/html bodies.
    Text from several parts is concatenated in traversal order. A part whose
    payload cannot be decoded is skipped; the rest of the tree still counts.
    """
    content = EmailContent()
    mime = part.mime_type or ""

    if part.body is not None and part.body.data and mime.startswith("text/"):
        try:
            decoded = b64url_decode_string(part.body.data)
        except DecodeFailure as e:
            logger.debug(f"Failed to decode {mime} part: {e}")
        else:
            if mime == "text/plain":
                content.text = decoded
            elif mime == "text/html":
                content.html = decoded

    # multipart/alternative, multipart/mixed, multipart/related, ...
    for child in part.parts:
        nested = extract_email_content(child)
        if nested.text:
            content.text += nested.text
        if nested.html:
            content.html += nested.html

    return content

def extract_attachments(part: MessagePart) -> List[EmailAttachment]:
    """
    List every part that Gmail stores separately (has body.attachmentId).
    """
    out: List[EmailAttachment] = []
    stack = [part]
    while stack:
        p = stack.pop()
        body = p.body
        if body is not None and body.attachment_id is not None:
            out.append(EmailAttachment(
                id=body.attachment_id,
                filename=p.filename or f"attachment-{body.attachment_id}",
                mime_type=p.mime_type or "application/octet-stream",
                size=body.size or 0,
            ))
        # reversed so siblings come out in document order
        stack.extend(reversed(p.parts))
    return out

# ------------------ utilities ------------------

def _payload(msg: Dict[str, Any]) -> Optional[MessagePart]:
    payload = msg.get("payload")
    if payload is None:
        return None
    if isinstance(payload, MessagePart):
        return payload
    return MessagePart.from_api(payload)

def _header(payload: Optional[MessagePart], name: str) -> str:
    if payload is None:
        return ""
    return find_header(payload, name) or ""
