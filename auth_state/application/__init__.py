"""Application services for the auth-state manager."""
