"""Domain-level protocol for persisting session tokens and authorization state."""

from __future__ import annotations

from typing import Any, Optional, Protocol

from auth_state.domain.authorized_state import AuthorizedState


class TokenStore(Protocol):
    """Abstraction over the medium holding a session's tokens.

    Implementations return token strings exactly as they were written; any
    encoding is applied by the caller (see :mod:`auth_state.domain.token_encoding`).
    """

    def get_access_token(self) -> Optional[str]:
        """Return the stored access token, or ``None`` when absent."""

    def set_access_token(self, token: str) -> None:
        """Persist the access token."""

    def get_id_token(self) -> Optional[str]:
        """Return the stored id token, or ``None`` when absent."""

    def set_id_token(self, token: str) -> None:
        """Persist the id token."""

    def get_refresh_token(self) -> Optional[str]:
        """Return the stored refresh token, or ``None`` when absent."""

    def get_persisted_auth_state(self) -> Optional[AuthorizedState]:
        """Return the persisted authorization state, ``None`` when cleared."""

    def set_persisted_auth_state(self, state: AuthorizedState) -> None:
        """Persist the authorization state."""

    def reset_auth_state(self) -> None:
        """Clear tokens, auth result and persisted state in one step.

        A subsequent :meth:`get_persisted_auth_state` must not report
        ``AuthorizedState.Authorized``.
        """

    def set_auth_result(self, payload: Any) -> None:
        """Persist the raw result of the last token exchange."""


__all__ = ["TokenStore"]
