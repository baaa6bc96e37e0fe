"""Wire an :class:`AuthStateService` from explicit collaborators."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from auth_state.application.auth_state_service import (
    AuthStateOptions,
    AuthStateService,
    DebugLogger,
)
from auth_state.config import Settings, settings as app_settings
from auth_state.domain.token_storage import TokenStore
from auth_state.domain.token_validation import TokenValidationService
from auth_state.infrastructure.token_storage import JsonFileTokenStore


def build_auth_state_service(
    *,
    token_store: Optional[TokenStore] = None,
    settings: Optional[Settings] = None,
    store_path: Optional[Path] = None,
    token_validator: Optional[TokenValidationService] = None,
    logger: Optional[DebugLogger] = None,
    init_from_storage: bool = True,
) -> AuthStateService:
    """Return a manager backed by ``token_store`` or a JSON file store.

    When no store is given, the file at ``store_path`` (falling back to
    ``TOKEN_STORE_PATH``) is used. The manager is resynchronised from storage
    unless ``init_from_storage`` is false.
    """
    resolved_settings = settings or app_settings
    store = token_store or JsonFileTokenStore(store_path or resolved_settings.TOKEN_STORE_PATH)

    service = AuthStateService(
        store,
        options=AuthStateOptions.from_settings(resolved_settings),
        token_validator=token_validator,
        logger=logger,
    )
    if init_from_storage:
        service.init_from_storage()
    return service


__all__ = ["build_auth_state_service"]
