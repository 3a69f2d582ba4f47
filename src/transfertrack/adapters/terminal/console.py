"""Terminal surface adapter drawing with ANSI cursor control."""

from __future__ import annotations

import os
import threading
from typing import TYPE_CHECKING, TextIO

from rich.console import Console
from rich.control import Control
from rich.segment import ControlType

from transfertrack.core.exceptions import TerminalUnavailableError
from transfertrack.core.models import TerminalSize


if TYPE_CHECKING:
    from transfertrack.config import TrackingSettings


# DEC save/restore has better compatibility than the SCO variants
SAVE_CURSOR = "\x1b7"
RESTORE_CURSOR = "\x1b8"

_ERASE_TAIL = str(Control((ControlType.ERASE_IN_LINE, 0)))
_ERASE_LINE = str(Control((ControlType.ERASE_IN_LINE, 2)))
_HIDE_CURSOR = str(Control.show_cursor(False))
_SHOW_CURSOR = str(Control.show_cursor(True))


class TerminalSurface:
    """Implements TerminalPort on top of an interactive terminal device.

    Every primitive is composed into a single string and written under a
    lock, so rows reserved by registration and rows painted by the render
    worker never interleave mid-sequence. The lock can be shared with other
    writers of the same device.

    Example:
        surface = TerminalSurface(sys.stderr)
        surface.save()
        surface.new_row()
        surface.output_at(1, "hello")
        surface.restore()
    """

    def __init__(
        self,
        device: TextIO,
        *,
        min_width: int = 80,
        min_height: int = 10,
        lock: threading.Lock | None = None,
    ) -> None:
        """Wrap a terminal device.

        Args:
            device: Text stream connected to the terminal.
            min_width: Width reported when the device reports less.
            min_height: Height reported when the device reports less.
            lock: Exclusive writer lock shared with other device writers.

        Raises:
            TerminalUnavailableError: If the device is not an interactive
                terminal capable of cursor movement.
        """
        console = Console(file=device)
        if not console.is_terminal or console.is_dumb_terminal:
            raise TerminalUnavailableError(getattr(device, "name", repr(device)))
        self._console = console
        self._min_width = min_width
        self._min_height = min_height
        self._lock = lock if lock is not None else threading.Lock()

    @classmethod
    def from_settings(
        cls,
        device: TextIO,
        settings: TrackingSettings,
        lock: threading.Lock | None = None,
    ) -> TerminalSurface:
        """Build a surface using the minimums of a settings object."""
        return cls(
            device,
            min_width=settings.min_width,
            min_height=settings.min_height,
            lock=lock,
        )

    def _write(self, data: str) -> None:
        with self._lock:
            file = self._console.file
            try:
                file.write(data)
                file.flush()
            except ValueError as e:
                # unencodable text or a closed stream
                raise OSError(f"Cannot write to terminal: {e}") from e

    def size(self) -> TerminalSize:
        """Return the terminal size, substituting minimums when unknown."""
        width, height = self._min_width, self._min_height
        try:
            reported = os.get_terminal_size(self._console.file.fileno())
        except (AttributeError, OSError, ValueError):
            # not backed by a real descriptor
            pass
        else:
            width = max(reported.columns, self._min_width)
            height = max(reported.lines, self._min_height)
        return TerminalSize(width=width, height=height)

    def save(self) -> None:
        """Hide the cursor and store the baseline position."""
        self._write(_HIDE_CURSOR + SAVE_CURSOR)

    def new_row(self) -> None:
        """Allocate one row above the baseline, scrolling if needed."""
        self._write(RESTORE_CURSOR + "\n" + SAVE_CURSOR)

    def output_at(self, from_bottom: int, text: str) -> None:
        """Overwrite the row ``from_bottom`` rows above the baseline.

        Raises:
            OSError: If the device rejects the write or cannot encode text.
        """
        move = Control.move_to_column(0, -from_bottom)
        self._write(f"{RESTORE_CURSOR}{move}{text}{_ERASE_TAIL}")

    def restore(self) -> None:
        """Return to the baseline, clear that row and show the cursor."""
        self._write(
            f"{RESTORE_CURSOR}{Control.move_to_column(0)}{_ERASE_LINE}{_SHOW_CURSOR}"
        )
