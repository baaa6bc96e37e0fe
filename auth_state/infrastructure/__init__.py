"""Infrastructure adapters: token stores and logging helpers."""
