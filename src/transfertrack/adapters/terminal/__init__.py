"""Terminal surface adapters."""

from transfertrack.adapters.terminal.console import TerminalSurface


__all__ = ["TerminalSurface"]
