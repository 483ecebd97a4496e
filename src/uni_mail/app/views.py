# src/uni_mail/app/views.py
from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from uni_mail.config.logging_setup import setup_logging
from uni_mail.config.paths import load_gmail_config
from uni_mail.gmail.client import GmailClient
from uni_mail.models import Draft, Message, Thread
from uni_mail.parsing.parser import resolve_body

_MESSAGE_ID = re.compile(r"[a-f0-9]{16,}", re.IGNORECASE)


def connect_gmail(secrets: Optional[Path] = None) -> GmailClient:
    """
    Set up logging and return a connected client.
    Entry point for the mail commands before any view is rendered.
    """
    setup_logging()
    client = GmailClient(load_gmail_config(secrets))
    client.connect()
    return client


def looks_like_message_id(value: str) -> bool:
    # Gmail IDs are hex strings, anything else is treated as a search query.
    return bool(_MESSAGE_ID.fullmatch(value))


def build_list_query(
    query: Optional[str] = None, *, unread: bool = False, include_all: bool = False
) -> str:
    terms: List[str] = []
    if query:
        terms.append(query)
    # Default to the primary inbox (no promotions, social, updates).
    if not include_all:
        terms.append("category:primary")
    if unread:
        terms.append("is:unread")
    return " ".join(terms)


def message_view(message: Message, *, subject_fallback: str = "(no subject)") -> Dict[str, Any]:
    return {
        "id": message.id,
        "thread_id": message.thread_id,
        "from": message.header("From") or "Unknown",
        "to": message.header("To") or "",
        "subject": message.header("Subject") or subject_fallback,
        "date": message.header("Date") or "",
        "unread": message.is_unread,
        "snippet": message.snippet,
        "body": resolve_body(message),
    }


def fetch_message(client: GmailClient, message_id: str) -> Message:
    return Message.from_api(client.get_message(message_id, fmt="full"))


def read_message(client: GmailClient, query: str) -> Optional[Dict[str, Any]]:
    """
    Read one email by ID or by search query.

    A query is resolved to its first hit. Returns None if nothing matches.
    """
    if looks_like_message_id(query):
        message_id = query
    else:
        hits = client.list_messages(query=query, max_results=1)
        if not hits:
            return None
        message_id = hits[0]

    return message_view(fetch_message(client, message_id))


def list_messages(
    client: GmailClient,
    *,
    limit: int = 10,
    query: Optional[str] = None,
    unread: bool = False,
    include_all: bool = False,
) -> List[Dict[str, Any]]:
    q = build_list_query(query, unread=unread, include_all=include_all)
    message_ids = client.list_messages(query=q, max_results=limit)
    return [message_view(fetch_message(client, mid)) for mid in message_ids[:limit]]


def view_thread(client: GmailClient, thread_id: str) -> Dict[str, Any]:
    thread = Thread.from_api(client.get_thread(thread_id))
    return {
        "id": thread.id,
        "messages": [message_view(m, subject_fallback="No Subject") for m in thread.messages],
    }


def list_threads(
    client: GmailClient, *, limit: int = 20, query: Optional[str] = None
) -> List[Dict[str, Any]]:
    threads = client.list_threads(query=query or "", max_results=limit)
    return [{"id": t.get("id", ""), "snippet": t.get("snippet", "")} for t in threads]


def view_draft(client: GmailClient, draft_id: str) -> Dict[str, Any]:
    draft = Draft.from_api(client.get_draft(draft_id))
    return {
        "id": draft.id,
        "to": draft.message.header("To") or "Unknown",
        "subject": draft.message.header("Subject") or "No Subject",
        "body": resolve_body(draft.message),
    }


def list_drafts(client: GmailClient, *, limit: int = 10) -> List[Dict[str, Any]]:
    # drafts.list only returns ids, so each draft is fetched for its headers.
    return [view_draft(client, d["id"]) for d in client.list_drafts(max_results=limit)]
