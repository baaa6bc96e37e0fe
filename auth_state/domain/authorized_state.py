"""Tri-valued belief about session validity."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class AuthorizedState(str, Enum):
    """Authorization status tracked for a client session.

    The string value doubles as the persisted representation.
    """

    Unknown = "Unknown"
    Authorized = "Authorized"
    Unauthorized = "Unauthorized"

    @classmethod
    def from_persisted(cls, raw: object) -> Optional["AuthorizedState"]:
        """Map a stored value back onto the enum, ``None`` when unrecognised."""

        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw)
        except ValueError:
            return None


__all__ = ["AuthorizedState"]
