from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from uni_mail.models import Message, Part
from uni_mail.parsing.decoder import decode_base64url
from uni_mail.parsing.finder import find_part
from uni_mail.parsing.html import html_to_text

logger = logging.getLogger(__name__)

BodyStrategy = Callable[[Message], Optional[str]]


def direct_payload(message: Message) -> Optional[str]:
    # Single-part message: the root itself carries the body.
    root = message.payload
    if not (root.has_payload and root.is_leaf):
        return None
    text = decode_base64url(root.payload)
    if root.content_type == "text/html":
        return html_to_text(text)
    return text


def first_plain_text(message: Message) -> Optional[str]:
    part = find_part(message.payload, "text/plain")
    if part is None:
        return None
    return decode_base64url(part.payload)


def first_html(message: Message) -> Optional[str]:
    part = find_part(message.payload, "text/html")
    if part is None:
        return None
    return html_to_text(decode_base64url(part.payload))


def message_snippet(message: Message) -> Optional[str]:
    return message.snippet or None


# Tried in order; the first strategy returning a string wins.
# text/plain is searched over the whole tree before text/html is considered.
BODY_STRATEGIES: Tuple[Tuple[str, BodyStrategy], ...] = (
    ("direct_payload", direct_payload),
    ("text/plain", first_plain_text),
    ("text/html", first_html),
    ("snippet", message_snippet),
)


def resolve_body(message: Message) -> str:
    """
    Best plain-text rendering of a message body.

    Returns "" when the message has no textual body and no snippet
    (e.g. attachment-only mail). Only a malformed payload raises.
    """
    for name, strategy in BODY_STRATEGIES:
        body = strategy(message)
        if body is not None:
            logger.debug("Resolved body of message %s via %s", message.id, name)
            return body
    logger.debug("No body found for message %s", message.id)
    return ""


def extract_body_from_payload(payload: Dict[str, Any], snippet: str = "") -> str:
    """Resolve a raw Gmail payload dict when no full message resource is at hand."""
    return resolve_body(Message(id="", snippet=snippet, payload=Part.from_api(payload)))
