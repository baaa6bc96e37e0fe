"""Lightweight logging helpers for domain code without infrastructure coupling."""
from __future__ import annotations

import logging
from typing import Final

# Child of the configured history logger so records reach its handlers once
# ``auth_state.logging_setup.configure_logging`` has run.
DOMAIN_LOGGER_NAME: Final[str] = "auth_state.history.domain"

_LEVEL_MAP: Final[dict[str, int]] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return _LEVEL_MAP.get(str(level).upper(), logging.INFO)


def log_message(message: str, level: str | int = "INFO", tag: str = "DOMAIN", **kwargs) -> None:
    """Log ``message`` using the standard library logger."""

    logging.getLogger(DOMAIN_LOGGER_NAME).log(
        _resolve_level(level), message, extra={"tag": tag}, **kwargs
    )


def debug(message: str, tag: str = "DOMAIN") -> None:
    log_message(message, "DEBUG", tag)


def warn(message: str, tag: str = "DOMAIN", **kwargs) -> None:
    log_message(message, "WARNING", tag, **kwargs)
