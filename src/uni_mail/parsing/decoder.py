from __future__ import annotations

import base64
import binascii
import re

_BASE64URL = re.compile(r"[A-Za-z0-9_-]*")


class PayloadDecodeError(ValueError):
    """Raised when a message part carries data that is not valid base64url."""


def _invalid(data: str) -> PayloadDecodeError:
    context = data[:24].replace("\n", " ").replace("\r", " ")
    return PayloadDecodeError(f"invalid base64url data near {context!r}")


def decode_base64url(data: str) -> str:
    """
    Decode a Gmail body payload to text.

    Gmail uses the URL-safe alphabet without padding. Padding is restored
    before decoding; anything outside the alphabet is rejected, including
    the standard "+" and "/".
    """
    stripped = data.rstrip("=")
    if not _BASE64URL.fullmatch(stripped):
        raise _invalid(data)
    padded = stripped + "=" * (-len(stripped) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except binascii.Error as exc:
        raise _invalid(data) from exc
    return raw.decode("utf-8", errors="replace")
