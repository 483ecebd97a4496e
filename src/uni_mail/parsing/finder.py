from __future__ import annotations

from typing import Iterable, List, Optional, Union

from uni_mail.models import Part


def find_part(parts: Union[Part, Iterable[Part]], content_type: str) -> Optional[Part]:
    """
    Return the first part of `content_type` that carries a payload.

    Depth-first, pre-order, children in order. Works at any depth:
    multipart/mixed -> multipart/alternative -> text/html is found the same
    way as a top-level text/html part.
    """
    roots = [parts] if isinstance(parts, Part) else list(parts)
    # Explicit stack, reversed so the leftmost subtree is visited first.
    stack: List[Part] = roots[::-1]
    while stack:
        part = stack.pop()
        if part.content_type == content_type and part.has_payload:
            return part
        stack.extend(reversed(part.children))
    return None
