"""Command-line interface for modzyctl."""
