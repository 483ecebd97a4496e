from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Part:
    """
    One node of a message's MIME tree.

    Leaves carry a base64url payload, containers carry children.
    A part with neither is treated as an empty leaf.
    """
    content_type: str
    payload: Optional[str] = None
    children: Tuple["Part", ...] = ()

    @property
    def is_container(self) -> bool:
        return bool(self.children)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def has_payload(self) -> bool:
        return bool(self.payload)

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "Part":
        """Build a part tree from a Gmail payload object (mimeType, body.data, parts)."""
        data = data or {}
        body = data.get("body") or {}
        return cls(
            content_type=data.get("mimeType", "") or "",
            # Gmail sends body.size=0 without data on containers; treat "" as absent.
            payload=body.get("data") or None,
            children=tuple(cls.from_api(child) for child in (data.get("parts") or [])),
        )


@dataclass(frozen=True)
class Message:
    id: str
    snippet: str
    payload: Part
    thread_id: Optional[str] = None
    label_ids: Tuple[str, ...] = ()
    # Ordered (name, value) pairs; names may repeat.
    headers: Tuple[Tuple[str, str], ...] = ()
    internal_date_ms: int = 0

    def header(self, name: str) -> Optional[str]:
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return None

    @property
    def is_unread(self) -> bool:
        return "UNREAD" in self.label_ids

    @classmethod
    def from_api(cls, msg: Dict[str, Any]) -> "Message":
        payload = msg.get("payload") or {}
        headers = tuple(
            (h.get("name", ""), h.get("value", "")) for h in payload.get("headers", []) or []
        )
        return cls(
            id=msg.get("id", ""),
            snippet=msg.get("snippet", "") or "",
            payload=Part.from_api(payload),
            thread_id=msg.get("threadId"),
            label_ids=tuple(str(x) for x in (msg.get("labelIds") or [])),
            headers=headers,
            internal_date_ms=int(msg.get("internalDate") or 0),
        )


@dataclass(frozen=True)
class Thread:
    id: str
    snippet: str = ""
    messages: Tuple[Message, ...] = ()

    @classmethod
    def from_api(cls, thread: Dict[str, Any]) -> "Thread":
        return cls(
            id=thread.get("id", ""),
            snippet=thread.get("snippet", "") or "",
            messages=tuple(Message.from_api(m) for m in thread.get("messages", []) or []),
        )


@dataclass(frozen=True)
class Draft:
    id: str
    message: Message

    @classmethod
    def from_api(cls, draft: Dict[str, Any]) -> "Draft":
        return cls(id=draft.get("id", ""), message=Message.from_api(draft.get("message") or {}))
