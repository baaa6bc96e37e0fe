"""Authentication-state manager for OIDC client sessions."""

__version__ = "0.1.0"
