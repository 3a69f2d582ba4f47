"""Terminal progress tracking for concurrent transfers."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

from transfertrack.progress.manager import StatusHandle, TrackingManager
from transfertrack.progress.printer import StatusPrinter, TextTarget
from transfertrack.progress.reader import TrackedReader
from transfertrack.progress.target import TrackedTarget, wrap


if TYPE_CHECKING:
    from transfertrack.config import TrackingSettings


def new_manager(
    device: TextIO, settings: TrackingSettings | None = None
) -> TrackingManager:
    """Create a tracking manager drawing on a terminal device.

    Raises:
        TerminalUnavailableError: If the device is not an interactive terminal.
    """
    return TrackingManager.for_device(device, settings)


__all__ = [
    "StatusHandle",
    "StatusPrinter",
    "TextTarget",
    "TrackedReader",
    "TrackedTarget",
    "TrackingManager",
    "new_manager",
    "wrap",
]
