"""Port interfaces for hexagonal architecture.

Ports define contracts that adapters must implement. The core domain
depends only on these protocols, never on concrete implementations.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, BinaryIO, Protocol, runtime_checkable


if TYPE_CHECKING:
    from concurrent.futures import Future

    from transfertrack.core.models import Descriptor, TerminalSize


@runtime_checkable
class ReadableStream(Protocol):
    """A binary stream that can be read in chunks."""

    def read(self, size: int = -1) -> bytes:
        """Read up to size bytes; an empty result means end of stream."""
        ...


@runtime_checkable
class TerminalPort(Protocol):
    """Cursor-relative drawing surface over an interactive terminal.

    All rows are addressed relative to a saved baseline that sits just
    below the reserved drawing area.
    """

    def size(self) -> TerminalSize:
        """Usable terminal size, never below the configured minimums."""
        ...

    def save(self) -> None:
        """Store the cursor baseline and hide the cursor."""
        ...

    def new_row(self) -> None:
        """Reserve one row above the baseline, scrolling if needed."""
        ...

    def output_at(self, from_bottom: int, text: str) -> None:
        """Overwrite the row ``from_bottom`` rows above the baseline."""
        ...

    def restore(self) -> None:
        """Return to the baseline, clear it and show the cursor."""
        ...


@runtime_checkable
class TargetPort(Protocol):
    """Content target accepting pushes and tags (registry, layout, memory)."""

    def push(self, descriptor: Descriptor, stream: ReadableStream) -> None:
        """Push content read from stream under the given descriptor.

        Raises:
            ContentExistsError: If the target already holds the content.
        """
        ...

    def exists(self, descriptor: Descriptor) -> bool:
        """Check whether the target already holds the content."""
        ...

    def tag(self, descriptor: Descriptor, reference: str) -> None:
        """Attach a reference to pushed content.

        Raises:
            ContentNotFoundError: If the content was never pushed.
        """
        ...


@runtime_checkable
class ReferencePusherPort(Protocol):
    """Target that can push and tag in a single operation."""

    def push_reference(
        self, descriptor: Descriptor, stream: ReadableStream, reference: str
    ) -> None:
        """Push content and attach a reference to it."""
        ...


@runtime_checkable
class MounterPort(Protocol):
    """Target that can mount content from another repository."""

    def mount(
        self,
        descriptor: Descriptor,
        from_repository: str,
        get_content: Callable[[], BinaryIO] | None = None,
    ) -> None:
        """Mount content, falling back to get_content when mounting fails."""
        ...


@runtime_checkable
class ExecutorPort(Protocol):
    """Executor for parallel task execution.

    Abstracts over concurrent.futures executors to allow dependency injection
    and testing. The core domain uses this protocol instead of directly
    importing ThreadPoolExecutor, maintaining "concurrency at the edges".
    """

    def submit(
        self, fn: Callable[..., object], *args: object, **kwargs: object
    ) -> Future[object]:  # type: ignore[name-defined, unused-ignore]
        """Submit a function for execution."""
        ...

    def __enter__(self) -> ExecutorPort:
        """Enter context manager."""
        ...

    def __exit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> object | None:
        """Exit context manager."""
        ...
