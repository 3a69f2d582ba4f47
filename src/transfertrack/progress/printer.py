"""Plain text status output for non-interactive sessions."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, TextIO

from transfertrack.core.ports import MounterPort, ReferencePusherPort


if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import BinaryIO

    from transfertrack.core.models import Descriptor, Prompts
    from transfertrack.core.ports import ReadableStream, TargetPort


class StatusPrinter:
    """Writes whole lines to a stream, one writer at a time.

    The lock can be shared with a TerminalSurface drawing on the same
    device so direct prints never split an escape sequence.
    """

    def __init__(self, out: TextIO, lock: threading.Lock | None = None) -> None:
        self._out = out
        self._lock = lock if lock is not None else threading.Lock()

    @property
    def lock(self) -> threading.Lock:
        """The exclusive writer lock."""
        return self._lock

    def println(self, *parts: object) -> None:
        """Print space-separated parts followed by a newline."""
        line = " ".join(str(part) for part in parts)
        with self._lock:
            self._out.write(line + "\n")
            self._out.flush()

    def print_status(self, descriptor: Descriptor, status: str, verbose: bool) -> None:
        """Print a status line; untitled content is shown only when verbose."""
        if descriptor.title is None and not verbose:
            return
        self.println(status, descriptor.short_digest, descriptor.display_name)


class TextTarget:
    """Target decorator printing one line per transfer event."""

    def __init__(
        self,
        target: TargetPort,
        printer: StatusPrinter,
        prompts: Prompts,
        verbose: bool = False,
    ) -> None:
        self._target = target
        self._printer = printer
        self._prompts = prompts
        self._verbose = verbose

    def __getattr__(self, name: str) -> Any:
        """Forward unknown attributes to the wrapped target."""
        return getattr(self._target, name)

    def _print(self, descriptor: Descriptor, status: str) -> None:
        self._printer.print_status(descriptor, status, self._verbose)

    def push(self, descriptor: Descriptor, stream: ReadableStream) -> None:
        """Push content, printing before and after the upload."""
        self._print(descriptor, self._prompts.action)
        self._target.push(descriptor, stream)
        self._print(descriptor, self._prompts.done)

    def push_reference(
        self, descriptor: Descriptor, stream: ReadableStream, reference: str
    ) -> None:
        """Push and tag content, printing before and after the upload."""
        self._print(descriptor, self._prompts.action)
        if isinstance(self._target, ReferencePusherPort):
            self._target.push_reference(descriptor, stream, reference)
        else:
            self._target.push(descriptor, stream)
            self._target.tag(descriptor, reference)
        self._print(descriptor, self._prompts.done)

    def exists(self, descriptor: Descriptor) -> bool:
        """Check existence, printing content that is already present."""
        found = self._target.exists(descriptor)
        if found:
            self._print(descriptor, self._prompts.exists)
        return found

    def tag(self, descriptor: Descriptor, reference: str) -> None:
        """Tag content and print the new reference."""
        self._target.tag(descriptor, reference)
        self._print(descriptor, f"{self._prompts.tagged} {reference}")

    def mount(
        self,
        descriptor: Descriptor,
        from_repository: str,
        get_content: Callable[[], BinaryIO] | None = None,
    ) -> None:
        """Mount content from another repository and print it.

        Raises:
            TypeError: If the wrapped target cannot mount.
        """
        if not isinstance(self._target, MounterPort):
            raise TypeError(f"{type(self._target).__name__} does not support mount")
        self._target.mount(descriptor, from_repository, get_content)
        self._print(descriptor, self._prompts.mounted)
