"""CLI for transfertrack."""

from transfertrack.cli.main import app, main


__all__ = ["app", "main"]
