"""Thin helpers that wire the codec to a Gmail API client for agent tooling."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .composer import create_email_message
from .decoder import b64url_decode, encode_raw_message
from .parser import read_message, summarize_message
from .types import EmailParams, MessageSummary, ReadMessageResult

logger = logging.getLogger(__name__)

SCOPES: Sequence[str] = (
    "https://www.googleapis.com/auth/gmail.modify",
    "https://www.googleapis.com/auth/gmail.settings.basic",
)

HTML_ONLY_NOTE = "[Note: This email is HTML-formatted. Plain text version not available.]"


def format_size(size: int) -> str:
    """Human-readable byte count, e.g. 1536 -> '2 KB'."""
    kb = 1024
    mb = kb * 1024
    gb = mb * 1024
    if size >= gb:
        return f"{size / gb:.1f} GB"
    if size >= mb:
        return f"{size / mb:.1f} MB"
    if size >= kb:
        return f"{size / kb:.0f} KB"
    return f"{size} bytes"


def render_read_result(result: ReadMessageResult) -> str:
    """
    Format a ReadMessageResult the way the read_email tool reports it.
    """
    text = (
        f"Thread ID: {result.thread_id}\n"
        f"Subject: {result.subject}\n"
        f"From: {result.from_}\n"
        f"To: {result.to}\n"
        f"Date: {result.date}\n\n"
    )
    if result.is_html_only:
        text += HTML_ONLY_NOTE + "\n\n"
    text += result.body

    if result.attachments:
        text += f"\n\nAttachments ({len(result.attachments)}):\n"
        for a in result.attachments:
            text += f"- {a.filename} ({a.mime_type}, {format_size(a.size)}, ID: {a.id})\n"
    return text


def render_search_results(summaries: Iterable[MessageSummary]) -> str:
    """One block per hit, separated by blank lines."""
    return "\n".join(
        f"ID: {s.id}\nSubject: {s.subject}\nFrom: {s.from_}\nDate: {s.date}\n"
        for s in summaries
    )


def _raw_message_body(params: EmailParams) -> Dict[str, Any]:
    raw = create_email_message(params)
    try:
        encoded = encode_raw_message(raw)
    except UnicodeEncodeError as encode_error:
        logger.error(f"Error encoding message: {encode_error}", exc_info=True)
        raise ValueError("Failed to encode message content.") from encode_error

    body: Dict[str, Any] = {"raw": encoded}
    if params.thread_id:
        body["threadId"] = params.thread_id
    return body


def send_email(gmail_service, params: EmailParams) -> Dict[str, Any]:
    """
    Compose and send a message. Raises InvalidAddress before anything is sent.
    """
    return (
        gmail_service.users()
        .messages()
        .send(userId="me", body=_raw_message_body(params))
        .execute()
    )


def create_draft(gmail_service, params: EmailParams) -> Dict[str, Any]:
    """Compose a message and save it as a draft."""
    return (
        gmail_service.users()
        .drafts()
        .create(userId="me", body={"message": _raw_message_body(params)})
        .execute()
    )


def list_message_ids(
    gmail_service,
    *,
    max_results: int = 10,
    label_ids: Iterable[str] | None = None,
    query: str | None = None,
) -> List[str]:
    """
    Return the most recent Gmail message IDs, optionally filtered by label or
    search query.
    """
    kwargs: Dict[str, Any] = {"userId": "me", "maxResults": max_results}
    if label_ids:
        kwargs["labelIds"] = list(label_ids)
    if query:
        kwargs["q"] = query
    resp = gmail_service.users().messages().list(**kwargs).execute()
    return [m["id"] for m in resp.get("messages", [])]


def fetch_message_json(
    gmail_service,
    message_id: str,
    *,
    format: str = "full",
) -> Dict[str, Any]:
    """
    Download a single Gmail message as a JSON dict.
    """
    return (
        gmail_service.users()
        .messages()
        .get(userId="me", id=message_id, format=format)
        .execute()
    )


def read_email(gmail_service, message_id: str) -> ReadMessageResult:
    """Fetch a message and extract its content and attachments."""
    return read_message(fetch_message_json(gmail_service, message_id))


def search_emails(gmail_service, query: str, *, max_results: int = 10) -> List[MessageSummary]:
    """Search the mailbox and return subject/from/date for each hit."""
    summaries: List[MessageSummary] = []
    for mid in list_message_ids(gmail_service, max_results=max_results, query=query):
        msg = fetch_message_json(gmail_service, mid, format="metadata")
        summaries.append(summarize_message(msg))
    return summaries


def fetch_attachment_bytes(gmail_service, message_id: str, attachment_id: str) -> bytes:
    """
    Download attachment bytes for a part that only carries body.attachmentId.
    Raises DecodeFailure if the returned data is not valid base64.
    """
    resp = (
        gmail_service.users()
        .messages()
        .attachments()
        .get(userId="me", messageId=message_id, id=attachment_id)
        .execute()
    )
    return b64url_decode(resp.get("data", ""))


def download_attachment(
    gmail_service,
    message_id: str,
    attachment_id: str,
    *,
    filename: str | None = None,
    save_path: str | Path = ".",
) -> Path:
    """
    Save an attachment to `save_path/filename` (default `attachment-<id>`),
    creating the directory if needed. Returns the written path.
    """
    data = fetch_attachment_bytes(gmail_service, message_id, attachment_id)
    target = Path(save_path) / (filename or f"attachment-{attachment_id}")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)
    logger.info(f"Saved attachment {attachment_id} ({len(data)} bytes) to {target}")
    return target


def _ensure_google_imports():
    from google.auth.transport.requests import Request
    from google.oauth2.credentials import Credentials
    from google_auth_oauthlib.flow import InstalledAppFlow
    from googleapiclient.discovery import build

    return Request, Credentials, InstalledAppFlow, build


def build_gmail_service(
    *,
    token_path: str | Path = "token.json",
    client_secret_path: str | Path = "client_secret.json",
    scopes: Sequence[str] = SCOPES,
    cache_discovery: bool = False,
):
    """
    Create an authenticated Gmail API client, prompting the user if needed.
    Requires the `gmail` extra.
    """
    Request, Credentials, InstalledAppFlow, build = _ensure_google_imports()

    token_path = Path(token_path)
    client_secret_path = Path(client_secret_path)

    creds: Optional[Credentials] = None
    if token_path.exists():
        creds = Credentials.from_authorized_user_file(str(token_path), scopes)
    if not creds or not creds.valid:
        if creds and creds.expired and creds.refresh_token:
            creds.refresh(Request())
        else:
            if not client_secret_path.exists():
                raise FileNotFoundError(
                    f"client_secret file not found at {client_secret_path}. "
                    "Download it from Google Cloud Console."
                )
            flow = InstalledAppFlow.from_client_secrets_file(str(client_secret_path), scopes)
            creds = flow.run_local_server(port=0)
        token_path.write_text(creds.to_json())

    return build("gmail", "v1", credentials=creds, cache_discovery=cache_discovery)


__all__ = [
    "SCOPES",
    "build_gmail_service",
    "create_draft",
    "download_attachment",
    "fetch_attachment_bytes",
    "fetch_message_json",
    "format_size",
    "list_message_ids",
    "read_email",
    "render_read_result",
    "render_search_results",
    "search_emails",
    "send_email",
]
