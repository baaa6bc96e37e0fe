"""Custom exception hierarchy for the auth-state manager."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class AuthStateError(Exception):
    """Base exception for auth-state failures."""


class TokenStoreError(AuthStateError):
    """Raised when the token store medium cannot be read or written."""

    def __init__(self, message: str, *, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


__all__ = [
    "AuthStateError",
    "TokenStoreError",
]
