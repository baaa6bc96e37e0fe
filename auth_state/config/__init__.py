# Initializes config package (imports Settings instance)

from .config import Settings, TokenStorageEncoding, get_env, settings

__all__ = ["Settings", "TokenStorageEncoding", "settings", "get_env"]
