from __future__ import annotations

import re
from typing import List, Tuple

BULLET = "• "

_HIDDEN_ELEMENTS = re.compile(r"<(style|script)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)

# Structural tags become whitespace before the generic tag strip runs.
_STRUCTURAL: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"<br\b[^>]*>", re.IGNORECASE), "\n"),
    (re.compile(r"</p\s*>", re.IGNORECASE), "\n\n"),
    (re.compile(r"</(?:div|tr)\s*>", re.IGNORECASE), "\n"),
    (re.compile(r"</(?:td|th)\s*>", re.IGNORECASE), " | "),
    (re.compile(r"<li\b[^>]*>", re.IGNORECASE), BULLET),
    (re.compile(r"</li\s*>", re.IGNORECASE), "\n"),
]

_ANY_TAG = re.compile(r"<[^>]*>")

# &amp; is handled last so "&amp;lt;" stays a literal "&lt;".
ENTITIES: List[Tuple[str, str]] = [
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&rsquo;", "'"),
    ("&lsquo;", "'"),
    ("&rdquo;", '"'),
    ("&ldquo;", '"'),
    ("&hellip;", "..."),
]

_NUMERIC_ENTITY = re.compile(r"&#(?:\d+|[xX][0-9a-fA-F]+);")

_LINE_BREAK = re.compile(r"\r\n?")
_HORIZONTAL_WS = re.compile(r"[ \t]+")
_TRAILING_WS = re.compile(r"[ \t]+\n")
_BLANK_LINES = re.compile(r"\n{3,}")


def _decode_entities(text: str) -> str:
    for entity, replacement in ENTITIES:
        text = text.replace(entity, replacement)
    # Numeric entities outside the table (decimal or hex) are dropped, not decoded.
    text = _NUMERIC_ENTITY.sub("", text)
    return text.replace("&amp;", "&")


def html_to_text(html: str) -> str:
    """
    Render an HTML fragment as plain text for terminal display.

    Steps run in a fixed order: drop style/script blocks, map structural
    tags to whitespace, strip remaining tags, decode entities, then
    normalize whitespace.
    """
    text = _HIDDEN_ELEMENTS.sub("", html)

    for pattern, replacement in _STRUCTURAL:
        text = pattern.sub(replacement, text)

    text = _ANY_TAG.sub("", text)
    text = _decode_entities(text)

    text = _LINE_BREAK.sub("\n", text)
    text = _HORIZONTAL_WS.sub(" ", text)
    text = _TRAILING_WS.sub("\n", text)
    text = _BLANK_LINES.sub("\n\n", text)
    return text.strip()
