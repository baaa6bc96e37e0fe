"""
Centralised config for the auth-state manager.

This module loads tunables from environment variables (and an optional
``.env`` file) and exposes them as typed, validated values through a
singleton `settings` object.
"""

import os
from pathlib import Path
from typing import Any, Callable, Literal, Optional, TypeVar

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_FILE = Path(__file__).resolve()


def _discover_project_root(config_file: Path) -> tuple[Path, Path]:
    """Return a project root and env file path without assuming ``.env`` exists.

    Walks the parents looking for a ``.env`` file and falls back to the
    repository root (detected via common project markers) when it is missing.
    """

    parents = list(config_file.parents)

    for parent in parents:
        env_file = parent / ".env"
        if env_file.exists():
            return parent, env_file

    for marker in ("pyproject.toml", ".git"):
        for parent in parents:
            if (parent / marker).exists():
                return parent, parent / ".env"

    fallback_root = parents[1] if len(parents) > 1 else parents[0]
    return fallback_root, fallback_root / ".env"


PROJECT_ROOT, ENV_FILE_PATH = _discover_project_root(CONFIG_FILE)

DEFAULT_TOKEN_STORE_PATH = Path.home() / ".config" / "auth_state" / "session.json"
DEFAULT_LOG_PATH = Path.home() / ".local" / "state" / "auth_state" / "auth_state.log"

TokenStorageEncoding = Literal["plain", "percent"]

T = TypeVar("T")


class Settings(BaseSettings):
    """
    Centralised and validated application settings.
    """
    model_config = SettingsConfigDict(
        env_file=ENV_FILE_PATH, env_file_encoding="utf-8", extra="ignore", case_sensitive=False
    )

    # --- SESSION STATE ---
    SILENT_RENEW_OFFSET_IN_SECONDS: int = Field(0, ge=0)
    TOKEN_STORAGE_ENCODING: TokenStorageEncoding = "plain"
    TOKEN_STORE_PATH: Path = DEFAULT_TOKEN_STORE_PATH

    # --- LOGGING ---
    AUTH_STATE_LOG_LEVEL: str = "INFO"
    AUTH_STATE_LOG_TO_CONSOLE: bool = True
    AUTH_STATE_LOG_PATH: Optional[Path] = None

    @property
    def log_path(self) -> Path:
        """Path for the rotating history log."""
        if self.AUTH_STATE_LOG_PATH is not None:
            return Path(self.AUTH_STATE_LOG_PATH)
        return DEFAULT_LOG_PATH


# Create a single, importable instance of the settings for the entire application.
settings = Settings()


def _to_bool(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _coerce_type(raw: str, template: Any) -> Any:
    if isinstance(template, bool):
        return _to_bool(raw)
    if isinstance(template, int) and not isinstance(template, bool):
        return int(raw)
    if isinstance(template, float):
        return float(raw)
    if isinstance(template, Path):
        return Path(raw)
    return raw


def get_env(
    name: str,
    default: T | None = None,
    *,
    parser: Callable[[str], T] | None = None,
) -> T | Any | None:
    """Return a configuration value resolving environment overrides consistently.

    The resolution order is:

    1. Explicit environment variable overrides at runtime.
    2. Typed values provided by the Pydantic ``settings`` object.
    3. The supplied ``default`` value.

    When an override is read directly from :mod:`os.environ`, ``parser`` (or the
    inferred type from ``settings``) is used to coerce the string into the
    expected type.
    """

    if name in os.environ:
        raw_value = os.environ[name]
        if parser is not None:
            return parser(raw_value)
        template = getattr(settings, name, None)
        if template is not None:
            try:
                return _coerce_type(raw_value, template)
            except (TypeError, ValueError):
                return template
        return raw_value

    if hasattr(settings, name):
        return getattr(settings, name)

    return default
