"""Encoding applied to token strings on their way into and out of a store.

``plain`` stores tokens verbatim. ``percent`` percent-encodes every character
outside the unreserved set on write and decodes on read, which round-trips any
string exactly. Tokens in a ``percent`` store must all have been written
through :func:`encode_token`; decoding a verbatim token that happens to
contain ``%`` would corrupt it.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote, unquote

PLAIN = "plain"
PERCENT = "percent"
SUPPORTED_ENCODINGS = (PLAIN, PERCENT)


def _check(encoding: str) -> None:
    if encoding not in SUPPORTED_ENCODINGS:
        raise ValueError(f"Unsupported token storage encoding: {encoding!r}")


def encode_token(token: str, encoding: str = PLAIN) -> str:
    _check(encoding)
    if encoding == PERCENT:
        return quote(token, safe="")
    return token


def decode_token(stored: Optional[str], encoding: str = PLAIN) -> str:
    """Return the token as the caller originally wrote it; ``""`` when absent."""
    _check(encoding)
    if not stored:
        return ""
    if encoding == PERCENT:
        return unquote(stored)
    return stored


__all__ = ["PLAIN", "PERCENT", "SUPPORTED_ENCODINGS", "encode_token", "decode_token"]
