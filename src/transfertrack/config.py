"""Configuration for progress tracking.

This module holds tunables for the tracking manager and the prompt presets
used by the push, pull and copy commands.
"""

from __future__ import annotations

from dataclasses import dataclass

from transfertrack.core.models import Prompts


@dataclass(frozen=True, slots=True)
class TrackingSettings:
    """Tunables for a tracking manager.

    Attributes:
        render_interval: Seconds between two render passes.
        queue_capacity: Capacity of each status line's message queue.
        min_width: Smallest terminal width assumed when rendering.
        min_height: Smallest terminal height assumed when rendering.

    Example:
        >>> settings = TrackingSettings(render_interval=0.05)
        >>> settings.queue_capacity
        20
    """

    render_interval: float = 0.1
    queue_capacity: int = 20
    min_width: int = 80
    min_height: int = 10

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.render_interval <= 0:
            raise ValueError("render_interval must be positive")
        if self.queue_capacity < 1:
            raise ValueError("queue_capacity must be at least 1")
        if self.min_width < 1 or self.min_height < 2:
            raise ValueError("terminal minimums must fit at least one status line")


PUSH_PROMPTS = Prompts(action="Uploading", done="Uploaded")
PULL_PROMPTS = Prompts(action="Downloading", done="Downloaded")
COPY_PROMPTS = Prompts(action="Copying", done="Copied")
