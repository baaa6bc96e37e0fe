"""Expiry checks for JWT session tokens.

Only the ``exp`` claim is inspected; signatures are not verified here because
the tokens were already validated when they were acquired.

Expiry fails closed: a missing token, a token that cannot be decoded, or one
without a numeric ``exp`` claim is reported as expired.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt

from auth_state.domain import logging as domain_logging

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_token_expiration_date(token: Optional[str]) -> Optional[datetime]:
    """Return the UTC expiry instant encoded in ``token``, or ``None``."""

    if not token:
        return None
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError as exc:
        domain_logging.debug(f"Token could not be decoded: {type(exc).__name__}", tag="EXPIRY")
        return None

    exp = claims.get("exp")
    # bool is an int subclass but never a meaningful timestamp
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return None
    try:
        return datetime.fromtimestamp(exp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


class TokenValidationService:
    """Checks token expiry against a clock, with an early-expiry offset."""

    def __init__(self, clock: Clock = _utcnow) -> None:
        self._clock = clock

    def seconds_until_expiry(self, token: Optional[str], offset_seconds: float = 0) -> Optional[float]:
        """Seconds left before ``token`` counts as expired; negative once past it."""
        expires_at = get_token_expiration_date(token)
        if expires_at is None:
            return None
        adjusted = expires_at - timedelta(seconds=offset_seconds or 0)
        return (adjusted - self._clock()).total_seconds()

    def is_token_expired(self, token: Optional[str], offset_seconds: float = 0) -> bool:
        remaining = self.seconds_until_expiry(token, offset_seconds)
        if remaining is None:
            return True
        return remaining <= 0


_default_service = TokenValidationService()


def is_token_expired(token: Optional[str], offset_seconds: float = 0) -> bool:
    """Wall-clock shortcut for :meth:`TokenValidationService.is_token_expired`."""
    return _default_service.is_token_expired(token, offset_seconds)


__all__ = [
    "Clock",
    "TokenValidationService",
    "get_token_expiration_date",
    "is_token_expired",
]
