"""Infrastructure implementations of token persistence."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from auth_state.application.exceptions import TokenStoreError
from auth_state.domain.authorized_state import AuthorizedState
from auth_state.domain.token_storage import TokenStore
from auth_state.infrastructure import log_utils

ACCESS_TOKEN_KEY = "access_token"
ID_TOKEN_KEY = "id_token"
REFRESH_TOKEN_KEY = "refresh_token"
AUTH_STATE_KEY = "authorized_state"
AUTH_RESULT_KEY = "auth_result"

_RESET_KEYS = (ACCESS_TOKEN_KEY, ID_TOKEN_KEY, REFRESH_TOKEN_KEY, AUTH_STATE_KEY, AUTH_RESULT_KEY)


class _MappingTokenStore(TokenStore):
    """Shared accessors for stores that keep the session as a flat mapping."""

    def _read(self) -> Dict[str, Any]:
        raise NotImplementedError

    def _write(self, data: Dict[str, Any]) -> None:
        raise NotImplementedError

    def _get_str(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def _set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def get_access_token(self) -> Optional[str]:
        return self._get_str(ACCESS_TOKEN_KEY)

    def set_access_token(self, token: str) -> None:
        self._set(ACCESS_TOKEN_KEY, token)

    def get_id_token(self) -> Optional[str]:
        return self._get_str(ID_TOKEN_KEY)

    def set_id_token(self, token: str) -> None:
        self._set(ID_TOKEN_KEY, token)

    def get_refresh_token(self) -> Optional[str]:
        return self._get_str(REFRESH_TOKEN_KEY)

    def set_refresh_token(self, token: str) -> None:
        self._set(REFRESH_TOKEN_KEY, token)

    def get_persisted_auth_state(self) -> Optional[AuthorizedState]:
        return AuthorizedState.from_persisted(self._read().get(AUTH_STATE_KEY))

    def set_persisted_auth_state(self, state: AuthorizedState) -> None:
        self._set(AUTH_STATE_KEY, AuthorizedState(state).value)

    def get_auth_result(self) -> Any:
        return self._read().get(AUTH_RESULT_KEY)

    def set_auth_result(self, payload: Any) -> None:
        self._set(AUTH_RESULT_KEY, payload)

    def reset_auth_state(self) -> None:
        data = self._read()
        for key in _RESET_KEYS:
            data.pop(key, None)
        self._write(data)


class InMemoryTokenStore(_MappingTokenStore):
    """Keep the session in a dict for the lifetime of the process."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = dict(initial or {})

    def _read(self) -> Dict[str, Any]:
        return dict(self._data)

    def _write(self, data: Dict[str, Any]) -> None:
        self._data = dict(data)

    def snapshot(self) -> Dict[str, Any]:
        return dict(self._data)


class JsonFileTokenStore(_MappingTokenStore):
    """Persist the session to a JSON file on disk.

    Every write replaces the file atomically, so ``reset_auth_state`` clears
    all keys in one step. The file is restricted to its owner.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            log_utils.warn(f"Ignoring unreadable token store {self._path}: {exc}", tag="STORE")
            return {}
        except OSError as exc:
            raise TokenStoreError(f"Cannot read token store {self._path}: {exc}", path=self._path) from exc

        if not isinstance(data, dict):
            log_utils.warn(f"Ignoring token store {self._path}: expected a JSON object", tag="STORE")
            return {}
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as exc:
            raise TokenStoreError(f"Cannot write token store {self._path}: {exc}", path=self._path) from exc

        try:
            os.chmod(self._path, 0o600)
        except OSError as exc:  # pragma: no cover - depends on platform
            log_utils.warn(f"Could not set permissions on {self._path}: {exc}", tag="STORE")


__all__ = ["InMemoryTokenStore", "JsonFileTokenStore"]
