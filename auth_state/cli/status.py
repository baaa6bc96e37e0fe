"""Session status report for the auth-state CLI."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from auth_state.domain.authorized_state import AuthorizedState
from auth_state.domain.token_encoding import decode_token
from auth_state.domain.token_storage import TokenStore
from auth_state.domain.token_validation import TokenValidationService, get_token_expiration_date


@dataclass
class TokenReport:
    """Presence and expiry of a single stored token."""

    name: str
    present: bool
    expires_at: Optional[datetime] = None
    expired: Optional[bool] = None

    def format_line(self) -> str:
        if not self.present:
            return f"{self.name:<14} absent"
        if self.expired is None:
            return f"{self.name:<14} present"
        if self.expires_at is None:
            return f"{self.name:<14} present  expiry unknown (treated as expired)"
        label = "EXPIRED" if self.expired else "valid"
        stamp = self.expires_at.strftime("%Y-%m-%d %H:%M:%S UTC")
        return f"{self.name:<14} present  {label:<7} expires {stamp}"


@dataclass
class SessionReport:
    persisted_state: Optional[AuthorizedState]
    tokens: List[TokenReport]

    @property
    def state_label(self) -> str:
        return self.persisted_state.value if self.persisted_state else "cleared"


def _token_report(
    name: str,
    stored: Optional[str],
    *,
    encoding: str,
    offset_seconds: int,
    validator: TokenValidationService,
    check_expiry: bool,
) -> TokenReport:
    token = decode_token(stored, encoding)
    if not token:
        return TokenReport(name=name, present=False)
    if not check_expiry:
        return TokenReport(name=name, present=True)
    return TokenReport(
        name=name,
        present=True,
        expires_at=get_token_expiration_date(token),
        expired=validator.is_token_expired(token, offset_seconds),
    )


def build_session_report(
    store: TokenStore,
    *,
    encoding: str,
    offset_seconds: int,
    validator: Optional[TokenValidationService] = None,
) -> SessionReport:
    """Summarise what ``store`` holds without changing it."""

    validator = validator or TokenValidationService()
    tokens = [
        _token_report("id_token", store.get_id_token(), encoding=encoding,
                      offset_seconds=offset_seconds, validator=validator, check_expiry=True),
        _token_report("access_token", store.get_access_token(), encoding=encoding,
                      offset_seconds=offset_seconds, validator=validator, check_expiry=True),
        # refresh tokens are usually opaque
        _token_report("refresh_token", store.get_refresh_token(), encoding=encoding,
                      offset_seconds=offset_seconds, validator=validator, check_expiry=False),
    ]
    return SessionReport(persisted_state=store.get_persisted_auth_state(), tokens=tokens)


def render_report(report: SessionReport) -> str:
    lines: List[str] = [f"{'state':<14} {report.state_label}"]
    lines.extend(token.format_line() for token in report.tokens)
    return "\n".join(lines)
