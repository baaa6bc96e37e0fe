"""Command-line interface for inspecting a stored session."""
