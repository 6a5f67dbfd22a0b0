from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class MimeType(str, Enum):
    """Content-type hints understood by the composer."""
    TEXT_PLAIN = "text/plain"
    TEXT_HTML = "text/html"
    MULTIPART_ALTERNATIVE = "multipart/alternative"
    MULTIPART_MIXED = "multipart/mixed"

    @classmethod
    def from_hint(cls, value: Optional[str]) -> Optional["MimeType"]:
        """
        Map a tool argument to a hint. Only the two values callers may ask for
        are recognised; anything else means "no hint" (plain text).
        """
        if value == cls.TEXT_HTML.value:
            return cls.TEXT_HTML
        if value == cls.MULTIPART_ALTERNATIVE.value:
            return cls.MULTIPART_ALTERNATIVE
        return None


@dataclass(frozen=True)
class AttachmentData:
    """A file to be attached to an outgoing message."""
    filename: str
    mime_type: str
    data: bytes = field(repr=False)


@dataclass(frozen=True)
class EmailParams:
    """
    Everything needed to compose one outgoing message.
    Only `to` is validated when composing; cc/bcc are passed through.
    """
    to: List[str]
    subject: str
    body: str
    html_body: Optional[str] = None
    mime_type: Optional[MimeType] = None
    cc: Optional[List[str]] = None
    bcc: Optional[List[str]] = None
    thread_id: Optional[str] = None
    in_reply_to: Optional[str] = None
    attachments: Optional[List[AttachmentData]] = None


@dataclass
class Header:
    name: str
    value: str


@dataclass
class MessagePartBody:
    attachment_id: Optional[str] = None       # Gmail body.attachmentId when data omitted
    size: int = 0
    data: Optional[str] = None                # base64url payload, if inlined


@dataclass
class MessagePart:
    """
    One node of the MIME tree the Gmail API returns for format="full".
    """
    part_id: Optional[str] = None
    mime_type: Optional[str] = None
    filename: Optional[str] = None
    headers: List[Header] = field(default_factory=list)
    body: Optional[MessagePartBody] = None
    parts: List["MessagePart"] = field(default_factory=list)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "MessagePart":
        """Build the tree from the API's camelCase JSON."""
        body = payload.get("body")
        part_body = None
        if body is not None:
            part_body = MessagePartBody(
                attachment_id=body.get("attachmentId"),
                size=body.get("size") or 0,
                data=body.get("data"),
            )
        return cls(
            part_id=payload.get("partId"),
            mime_type=payload.get("mimeType"),
            # Gmail sends "" for parts that are not files
            filename=payload.get("filename") or None,
            headers=[
                Header(name=h.get("name", "") or "", value=h.get("value", "") or "")
                for h in payload.get("headers") or []
            ],
            body=part_body,
            parts=[cls.from_api(p) for p in payload.get("parts") or []],
        )


@dataclass
class EmailContent:
    text: str = ""
    html: str = ""


@dataclass(frozen=True)
class EmailAttachment:
    """
    Metadata for an attachment found in a message.
    Use the `id` with the attachments endpoint to download the bytes.
    """
    id: str
    filename: str
    mime_type: str = "application/octet-stream"
    size: int = 0


@dataclass
class ReadMessageResult:
    """
    Display-ready view of a message.
    `body` is always populated when anything could be recovered: plain text,
    then HTML markup as-is, then the API snippet.
    """
    id: str
    thread_id: str
    subject: str
    from_: str
    to: str
    date: str
    body: str
    html_body: Optional[str] = None
    is_html_only: bool = False
    attachments: List[EmailAttachment] = field(default_factory=list)


@dataclass
class MessageSummary:
    id: str
    thread_id: str
    subject: str
    from_: str
    date: str
