"""Status line state and its two-row terminal rendering."""

from __future__ import annotations

import dataclasses
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rich.cells import cell_len, set_cell_size
from rich.style import Style

from transfertrack.core.formatting import (
    format_bytes,
    format_duration,
    round_duration,
    spinner_frame,
)
from transfertrack.core.messages import NO_OFFSET, MessageKind


if TYPE_CHECKING:
    from transfertrack.core.messages import StatusMessage
    from transfertrack.core.models import Descriptor


BAR_MAX_LENGTH = 40
DONE_MARK = "✓"
TRUNCATION_MARK = "."
ZERO_DURATION = "0s"
ZERO_STATUS = "loading status..."
ZERO_PROGRESS = "loading progress..."

_BAR_FILLED = Style(reverse=True)


@dataclass(slots=True)
class StatusLine:
    """Transient state of one tracked operation.

    Instances are not thread-safe; the tracking manager serializes every
    update and render behind its slot lock.

    Attributes:
        done: True once an end marker was applied.
        prompt: Verb label shown before the name.
        descriptor: Descriptor of the content in transfer.
        transferred: Cumulative bytes, or NO_OFFSET before any byte marker.
        started_at: Monotonic nanoseconds of the start marker.
        ended_at: Monotonic nanoseconds of the end marker.
    """

    done: bool = False
    prompt: str = ""
    descriptor: Descriptor | None = None
    transferred: int = NO_OFFSET
    started_at: int | None = None
    ended_at: int | None = None

    def is_zero(self) -> bool:
        """True until the first offset or timing marker arrives."""
        return (
            self.transferred < 0 and self.started_at is None and self.ended_at is None
        )

    @property
    def total(self) -> int:
        """Declared size of the content, 0 when unknown."""
        return self.descriptor.size if self.descriptor is not None else 0

    def percent(self) -> float:
        """Fraction transferred, clamped to [0, 1].

        Empty content counts as complete as soon as a byte marker arrives.
        """
        if self.done:
            return 1.0
        if self.transferred < 0:
            return 0.0
        if self.total == 0:
            return 1.0
        return min(max(self.transferred / self.total, 0.0), 1.0)

    def update(self, message: StatusMessage) -> None:
        """Merge a message into the line."""
        if message.kind is MessageKind.PROGRESS:
            # a negative offset is a heartbeat and keeps the current progress
            if message.offset >= 0:
                self.transferred = message.offset
                if message.descriptor is not None:
                    self.descriptor = message.descriptor
            if message.prompt:
                self.prompt = message.prompt
        elif message.kind is MessageKind.START:
            if self.started_at is None:
                self.started_at = message.timestamp
        elif message.kind is MessageKind.END:
            self.ended_at = message.timestamp
            self.done = True

    def copy(self) -> StatusLine:
        """Return an independent copy of the line."""
        return dataclasses.replace(self)

    def duration_string(self, now: int | None = None) -> str:
        """Elapsed time since the start marker, rounded for display."""
        if self.started_at is None:
            return ZERO_DURATION
        if self.ended_at is not None:
            end = self.ended_at
        else:
            end = time.monotonic_ns() if now is None else now
        return format_duration(round_duration(end - self.started_at))

    def render(self, width: int, now: int | None = None) -> tuple[str, str]:
        """Render the header and digest rows for a terminal of ``width`` cells.

        Layout::

            [left----------------------------------][margin][right---------------------]
            mark bar(42) prompt name                         done/total percent% elapsed
              └─ digest

        The name is truncated with a trailing marker when both segments
        cannot fit, so the header never exceeds ``width``.
        """
        if self.is_zero():
            return ZERO_STATUS, ZERO_PROGRESS
        if now is None:
            now = time.monotonic_ns()

        name = self.descriptor.display_name if self.descriptor is not None else ""
        digest = self.descriptor.digest if self.descriptor is not None else ""
        percent = self.percent()
        transferred = self.total if self.done else max(self.transferred, 0)
        right = (
            f" {format_bytes(transferred)}/{format_bytes(self.total)}"
            f" {percent * 100:6.2f}% {self.duration_string(now)}"
        )

        if self.done:
            mark = DONE_MARK
            prefix = f"{mark} "
            len_prefix = cell_len(mark) + 1
        else:
            mark = spinner_frame(now)
            filled = int(percent * BAR_MAX_LENGTH)
            bar = (
                f"[{_BAR_FILLED.render(' ' * filled)}"
                f"{'.' * (BAR_MAX_LENGTH - filled)}]"
            )
            prefix = f"{mark} {bar} "
            # mark + space + bar + brackets(2) + space
            len_prefix = cell_len(mark) + BAR_MAX_LENGTH + 4

        label = f"{self.prompt} {name}"
        len_label = cell_len(label)
        len_margin = width - len_prefix - len_label - cell_len(right)
        if len_margin < 0:
            # keep one cell for the truncation marker
            keep = max(len_label + len_margin - 1, 0)
            label = set_cell_size(label, keep) + TRUNCATION_MARK
            len_margin = 0
        header = f"{prefix}{label}{' ' * len_margin}{right}"
        return header, f"  └─ {digest}"
