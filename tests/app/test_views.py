from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from uni_mail.app import views as views_module
from uni_mail.app.views import (
    build_list_query,
    connect_gmail,
    list_drafts,
    list_messages,
    list_threads,
    looks_like_message_id,
    read_message,
    view_draft,
    view_thread,
)


def encode(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def api_message(
    message_id: str,
    *,
    body: str = "Body",
    mime_type: str = "text/plain",
    headers: Optional[Dict[str, str]] = None,
    label_ids: Optional[List[str]] = None,
) -> Dict[str, Any]:
    return {
        "id": message_id,
        "threadId": f"thread-{message_id}",
        "snippet": f"snippet {message_id}",
        "labelIds": label_ids or ["INBOX"],
        "payload": {
            "mimeType": mime_type,
            "headers": [{"name": k, "value": v} for k, v in (headers or {}).items()],
            "body": {"data": encode(body)},
        },
    }


class FakeGmailClient:
    def __init__(
        self,
        messages: Optional[Dict[str, Dict[str, Any]]] = None,
        threads: Optional[Dict[str, Dict[str, Any]]] = None,
        drafts: Optional[Dict[str, Dict[str, Any]]] = None,
    ) -> None:
        self.messages = messages or {}
        self.threads = threads or {}
        self.drafts = drafts or {}
        self.queries: List[Dict[str, Any]] = []

    def list_messages(self, query: str = "", max_results: int = 20, label_ids=None) -> List[str]:
        self.queries.append({"query": query, "max_results": max_results})
        return list(self.messages)[:max_results]

    def get_message(self, message_id: str, fmt: str = "full") -> Dict[str, Any]:
        return self.messages[message_id]

    def list_threads(self, query: str = "", max_results: int = 20) -> List[Dict[str, Any]]:
        self.queries.append({"query": query, "max_results": max_results})
        return [{"id": t["id"], "snippet": t.get("snippet", "")} for t in self.threads.values()]

    def get_thread(self, thread_id: str) -> Dict[str, Any]:
        return self.threads[thread_id]

    def list_drafts(self, max_results: int = 10) -> List[Dict[str, Any]]:
        return [{"id": d["id"]} for d in self.drafts.values()][:max_results]

    def get_draft(self, draft_id: str) -> Dict[str, Any]:
        return self.drafts[draft_id]


def test_looks_like_message_id() -> None:
    assert looks_like_message_id("19b637d54e3f3c51")
    assert looks_like_message_id("19B637D54E3F3C51AB")
    assert not looks_like_message_id("19b637d54e3f")
    assert not looks_like_message_id("Your Booking is Ticketed")
    assert not looks_like_message_id("19b637d54e3f3c51\n")


def test_build_list_query_defaults_to_primary_inbox() -> None:
    assert build_list_query() == "category:primary"
    assert build_list_query("from:github.com") == "from:github.com category:primary"
    assert build_list_query(unread=True) == "category:primary is:unread"
    assert build_list_query("from:x", include_all=True) == "from:x"
    assert build_list_query(include_all=True) == ""


def test_read_message_by_id_skips_search() -> None:
    mid = "19b637d54e3f3c51"
    client = FakeGmailClient(
        {mid: api_message(mid, body="Hello", headers={"From": "a@example.com", "Subject": "Hi"})}
    )

    view = read_message(client, mid)

    assert client.queries == []
    assert view is not None
    assert view["body"] == "Hello"
    assert view["from"] == "a@example.com"
    assert view["subject"] == "Hi"
    assert view["to"] == ""


def test_read_message_by_query_uses_first_hit() -> None:
    client = FakeGmailClient(
        {
            "m1": api_message("m1", body="<p>Ticketed</p>", mime_type="text/html"),
            "m2": api_message("m2", body="second"),
        }
    )

    view = read_message(client, "Your Booking is Ticketed")

    assert client.queries == [{"query": "Your Booking is Ticketed", "max_results": 1}]
    assert view is not None
    assert view["id"] == "m1"
    assert view["body"] == "Ticketed"
    assert view["from"] == "Unknown"
    assert view["subject"] == "(no subject)"


def test_read_message_returns_none_when_search_finds_nothing() -> None:
    assert read_message(FakeGmailClient(), "nothing matches") is None


def test_list_messages_resolves_bodies_and_flags_unread() -> None:
    client = FakeGmailClient(
        {
            "m1": api_message("m1", body="one", label_ids=["INBOX", "UNREAD"]),
            "m2": api_message("m2", body="two"),
            "m3": api_message("m3", body="three"),
        }
    )

    views = list_messages(client, limit=2, unread=True)

    assert client.queries == [{"query": "category:primary is:unread", "max_results": 2}]
    assert [v["body"] for v in views] == ["one", "two"]
    assert [v["unread"] for v in views] == [True, False]
    assert views[0]["snippet"] == "snippet m1"


def test_view_thread_keeps_message_order() -> None:
    client = FakeGmailClient(
        threads={
            "t1": {
                "id": "t1",
                "messages": [
                    api_message("a", body="first", headers={"Subject": "Re: plan"}),
                    api_message("b", body="<p>second</p>", mime_type="text/html"),
                ],
            }
        }
    )

    view = view_thread(client, "t1")

    assert view["id"] == "t1"
    assert [m["body"] for m in view["messages"]] == ["first", "second"]
    assert [m["subject"] for m in view["messages"]] == ["Re: plan", "No Subject"]


def test_list_threads_passes_query() -> None:
    client = FakeGmailClient(threads={"t1": {"id": "t1", "snippet": "hello"}})

    assert list_threads(client, limit=5, query="from:boss@company.com") == [{"id": "t1", "snippet": "hello"}]
    assert client.queries == [{"query": "from:boss@company.com", "max_results": 5}]


def test_view_draft_uses_fallbacks() -> None:
    client = FakeGmailClient(
        drafts={"d1": {"id": "d1", "message": api_message("m", body="Draft body", headers={"To": "x@example.com"})}}
    )

    view = view_draft(client, "d1")

    assert view == {"id": "d1", "to": "x@example.com", "subject": "No Subject", "body": "Draft body"}


def test_list_drafts_fetches_each_draft() -> None:
    client = FakeGmailClient(
        drafts={
            "d1": {"id": "d1", "message": api_message("m1", body="one")},
            "d2": {"id": "d2", "message": api_message("m2", body="two", headers={"Subject": "S"})},
        }
    )

    views = list_drafts(client, limit=10)

    assert [v["id"] for v in views] == ["d1", "d2"]
    assert [v["subject"] for v in views] == ["No Subject", "S"]
    assert views[0]["to"] == "Unknown"


def test_connect_gmail_configures_logging_and_connects(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "credentials.json").write_text("{}", encoding="utf-8")
    monkeypatch.setenv("UNI_MAIL_LOG_LEVEL", "WARNING")
    connected: List[Path] = []
    monkeypatch.setattr(
        views_module.GmailClient, "connect", lambda self: connected.append(self._cfg.token_path)
    )
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        client = connect_gmail(tmp_path)

        assert isinstance(client, views_module.GmailClient)
        assert connected == [tmp_path / "gmail_token.json"]
        assert root.level == logging.WARNING
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)


def test_connect_gmail_fails_without_credentials(tmp_path: Path) -> None:
    with pytest.raises(RuntimeError, match="Missing Gmail credentials"):
        connect_gmail(tmp_path)
