"""Messages sent from tracked transfers to their status line.

A message is a tagged variant (progress, start timing, end timing) paired
with a delivery guarantee. Intermediate progress is best effort and may be
dropped when the line's queue is full; timing markers and final progress are
guaranteed and block until queued.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from transfertrack.core.models import Descriptor

NO_OFFSET = -1


class MessageKind(Enum):
    """What a message changes on its status line."""

    PROGRESS = "progress"
    START = "start"
    END = "end"


class Delivery(Enum):
    """How hard a handle tries to enqueue a message."""

    BEST_EFFORT = "best_effort"
    GUARANTEED = "guaranteed"


@dataclass(frozen=True, slots=True)
class StatusMessage:
    """One update for a status line.

    Attributes:
        kind: The variant tag.
        delivery: Whether the message may be dropped under backpressure.
        prompt: Replacement prompt; empty keeps the current one.
        descriptor: Replacement descriptor, applied together with offset.
        offset: Cumulative bytes transferred, or NO_OFFSET.
        timestamp: Monotonic nanoseconds for START and END messages.
    """

    kind: MessageKind
    delivery: Delivery = Delivery.GUARANTEED
    prompt: str = ""
    descriptor: Descriptor | None = None
    offset: int = NO_OFFSET
    timestamp: int | None = None

    @property
    def guaranteed(self) -> bool:
        """True if the message must never be dropped."""
        return self.delivery is Delivery.GUARANTEED


def progress(
    prompt: str,
    descriptor: Descriptor,
    offset: int,
    *,
    final: bool = False,
) -> StatusMessage:
    """Build a progress message.

    Args:
        prompt: Prompt to display.
        descriptor: Descriptor of the content in transfer.
        offset: Cumulative bytes transferred.
        final: True for the last offset of a transfer, which is never dropped.
    """
    return StatusMessage(
        kind=MessageKind.PROGRESS,
        delivery=Delivery.GUARANTEED if final else Delivery.BEST_EFFORT,
        prompt=prompt,
        descriptor=descriptor,
        offset=offset,
    )


def start_timing(now: int | None = None) -> StatusMessage:
    """Build a start marker."""
    return StatusMessage(
        kind=MessageKind.START,
        timestamp=time.monotonic_ns() if now is None else now,
    )


def end_timing(now: int | None = None) -> StatusMessage:
    """Build an end marker, which also marks the line as done."""
    return StatusMessage(
        kind=MessageKind.END,
        timestamp=time.monotonic_ns() if now is None else now,
    )
