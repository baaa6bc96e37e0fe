"""Authorization state machine for a client session.

The :class:`AuthStateService` keeps the session's current
:class:`~auth_state.domain.authorized_state.AuthorizedState` in memory,
mirrors it into a :class:`~auth_state.domain.token_storage.TokenStore`, and
publishes changes on two replay-latest channels:

* ``auth_state`` carries the full enum.
* ``authorized`` carries ``True`` iff the state is ``Authorized``.

Token reads are gated on the in-memory state, never on the persisted one.
Storage always happens before the corresponding publish.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol

from auth_state.config import Settings
from auth_state.domain.authorized_state import AuthorizedState
from auth_state.domain.event_channel import ReplayChannel
from auth_state.domain.token_encoding import PLAIN, SUPPORTED_ENCODINGS, decode_token, encode_token
from auth_state.domain.token_storage import TokenStore
from auth_state.domain.token_validation import TokenValidationService
from auth_state.logging_setup import get_logger


class DebugLogger(Protocol):
    def debug(self, msg: str, *args: Any, **kwargs: Any) -> Any:
        ...


@dataclass(frozen=True)
class AuthStateOptions:
    """Configuration consumed by :class:`AuthStateService`."""

    silent_renew_offset_in_seconds: int = 0
    token_storage_encoding: str = PLAIN

    def __post_init__(self) -> None:
        if self.silent_renew_offset_in_seconds < 0:
            raise ValueError("silent_renew_offset_in_seconds must be >= 0")
        if self.token_storage_encoding not in SUPPORTED_ENCODINGS:
            raise ValueError(
                f"Unsupported token storage encoding {self.token_storage_encoding!r}; "
                f"expected one of {', '.join(SUPPORTED_ENCODINGS)}"
            )

    @classmethod
    def from_settings(cls, app_settings: Settings) -> "AuthStateOptions":
        return cls(
            silent_renew_offset_in_seconds=app_settings.SILENT_RENEW_OFFSET_IN_SECONDS,
            token_storage_encoding=app_settings.TOKEN_STORAGE_ENCODING,
        )


class AuthStateService:
    """Tracks, persists and broadcasts a session's authorization state."""

    def __init__(
        self,
        token_store: TokenStore,
        *,
        options: Optional[AuthStateOptions] = None,
        token_validator: Optional[TokenValidationService] = None,
        logger: Optional[DebugLogger] = None,
    ) -> None:
        self._store = token_store
        self._options = options or AuthStateOptions()
        self._validator = token_validator or TokenValidationService()
        self._logger = logger if logger is not None else get_logger("STATE")

        self._state = AuthorizedState.Unknown
        self._auth_state_channel: ReplayChannel[AuthorizedState] = ReplayChannel(
            AuthorizedState.Unknown, name="auth_state"
        )
        self._authorized_channel: ReplayChannel[bool] = ReplayChannel(False, name="authorized")

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def current_state(self) -> AuthorizedState:
        return self._state

    @property
    def auth_state(self) -> ReplayChannel[AuthorizedState]:
        return self._auth_state_channel

    @property
    def authorized(self) -> ReplayChannel[bool]:
        return self._authorized_channel

    def is_authorized(self) -> bool:
        return self._state is AuthorizedState.Authorized

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def set_authorized_and_fire_event(self) -> None:
        # a failed write leaves the in-memory state untouched
        self._store.set_persisted_auth_state(AuthorizedState.Authorized)
        self._state = AuthorizedState.Authorized
        self._publish()

    def set_unauthorized_and_fire_event(self) -> None:
        self._store.reset_auth_state()
        self._state = AuthorizedState.Unauthorized
        self._publish()

    def init_from_storage(self) -> None:
        """Resynchronise the in-memory state from the store without publishing."""
        if self._persisted_state() is AuthorizedState.Authorized:
            self._state = AuthorizedState.Authorized
        else:
            self._state = AuthorizedState.Unknown
        self._log_debug(f"state initialised from storage: {self._state.value}")

    def set_authorization_data(self, access_token: str, id_token: str) -> None:
        """Store fresh access and id tokens and mark the session authorized.

        The refresh token is left as it is.
        """
        self._log_debug("storing access and id token")
        encoding = self._options.token_storage_encoding
        self._store.set_access_token(encode_token(access_token or "", encoding))
        self._store.set_id_token(encode_token(id_token or "", encoding))
        self.set_authorized_and_fire_event()

    def set_auth_result(self, result: Any) -> None:
        self._store.set_auth_result(result)

    # ------------------------------------------------------------------
    # Token queries
    # ------------------------------------------------------------------

    def get_access_token(self) -> str:
        if not self.is_authorized():
            return ""
        return self._decode(self._store.get_access_token())

    def get_id_token(self) -> str:
        if not self.is_authorized():
            return ""
        return self._decode(self._store.get_id_token())

    def get_refresh_token(self) -> str:
        if not self.is_authorized():
            return ""
        return self._decode(self._store.get_refresh_token())

    def validate_storage_auth_tokens(self) -> bool:
        """Re-authorize from storage when the persisted token is still valid.

        Returns ``False`` without touching state when nothing is persisted as
        authorized or when the stored token has expired. On success the
        session is re-published as authorized.
        """
        persisted = self._persisted_state()
        if persisted is not AuthorizedState.Authorized:
            return False

        self._log_debug(f"authorized state in storage is {persisted.value}")

        if self._stored_token_is_expired():
            self._log_debug("persisted token is expired")
            return False

        self._log_debug("persisted token is valid")
        self.set_authorized_and_fire_event()
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _publish(self) -> None:
        self._auth_state_channel.publish(self._state)
        self._authorized_channel.publish(self._state is AuthorizedState.Authorized)

    def _persisted_state(self) -> Optional[AuthorizedState]:
        return AuthorizedState.from_persisted(self._store.get_persisted_auth_state())

    def _decode(self, stored: Optional[str]) -> str:
        return decode_token(stored, self._options.token_storage_encoding)

    def _stored_token_is_expired(self) -> bool:
        # id token wins; only one token is ever checked
        token = self._decode(self._store.get_id_token()) or self._decode(self._store.get_access_token())
        return self._validator.is_token_expired(
            token, self._options.silent_renew_offset_in_seconds
        )

    def _log_debug(self, msg: str) -> None:
        try:
            self._logger.debug(msg)
        except Exception:  # logging must never change the outcome
            return


__all__ = ["AuthStateOptions", "AuthStateService", "DebugLogger"]
