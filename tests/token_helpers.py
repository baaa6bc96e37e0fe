"""Shared helpers for minting tokens and recording log output in tests."""

from __future__ import annotations

from datetime import datetime, timezone

import jwt

SIGNING_KEY = "unit-test-signing-key-0123456789abcdef"
FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class RecordingLogger:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def debug(self, msg, *args, **kwargs):
        self.messages.append(msg)


def mint_token(expires_at: datetime | None, **claims) -> str:
    payload = dict(claims)
    if expires_at is not None:
        payload["exp"] = int(expires_at.timestamp())
    return jwt.encode(payload, SIGNING_KEY, algorithm="HS256")
