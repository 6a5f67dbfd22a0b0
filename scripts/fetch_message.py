# scripts/fetch_message.py
"""List, read, or download Gmail API messages from the command line."""

from __future__ import annotations

import argparse
import json
import logging
import os
from pathlib import Path
import sys

from gmail_mime.parser import read_message
from gmail_mime.tool import (
    build_gmail_service,
    fetch_message_json,
    list_message_ids,
    render_read_result,
)

TOKEN = Path(os.environ.get("GMAIL_CREDENTIALS_PATH", "token.json"))
SECRET = Path(os.environ.get("GMAIL_OAUTH_PATH", "client_secret.json"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch Gmail messages via the Gmail API.")
    parser.add_argument(
        "--message-id",
        help="Explicit message ID to fetch. If omitted, uses the newest message.",
    )
    parser.add_argument(
        "--output",
        "-o",
        default="-",
        help="Where to store the downloaded JSON with --save (use '-' for stdout; default: %(default)s).",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Write the raw API JSON instead of the rendered message.",
    )
    parser.add_argument(
        "--labels",
        nargs="*",
        default=None,
        help="Optional list of label IDs to filter when picking the newest message.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List recent message IDs instead of reading (honors --max-results/--labels).",
    )
    parser.add_argument(
        "--max-results",
        type=int,
        default=5,
        help="How many IDs to list when using --list (default: %(default)s).",
    )
    parser.add_argument("--token", type=Path, default=TOKEN, help="OAuth token file (default: %(default)s).")
    parser.add_argument("--secret", type=Path, default=SECRET, help="OAuth client secret file (default: %(default)s).")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: list[str] | None = None) -> int:
    argp = build_parser()
    args = argp.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    gmail = build_gmail_service(token_path=args.token, client_secret_path=args.secret)

    if args.list:
        ids = list_message_ids(gmail, max_results=args.max_results, label_ids=args.labels)
        if not ids:
            print("No messages returned.")
            return 0
        print("Recent message IDs:")
        for mid in ids:
            print(f"  {mid}")
        return 0

    message_id = args.message_id
    if not message_id:
        ids = list_message_ids(gmail, max_results=1, label_ids=args.labels)
        if not ids:
            raise SystemExit("No messages found. Try adjusting labels or mailbox contents.")
        message_id = ids[0]
        print(f"No --message-id provided; using newest message {message_id}.", file=sys.stderr)

    message = fetch_message_json(gmail, message_id)
    if not args.save:
        print(render_read_result(read_message(message)))
        return 0

    if args.output == "-":
        json.dump(message, sys.stdout)
        sys.stdout.flush()
        return 0

    Path(args.output).write_text(json.dumps(message, indent=2))
    print(f"Saved message to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
