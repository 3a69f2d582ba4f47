"""Target decorator tracking every push on a shared manager."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from transfertrack.core import messages
from transfertrack.core.ports import MounterPort, ReferencePusherPort
from transfertrack.progress.reader import TrackedReader


if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import BinaryIO

    from transfertrack.core.models import Descriptor, Prompts
    from transfertrack.core.ports import ReadableStream, TargetPort
    from transfertrack.progress.manager import TrackingManager


class TrackedTarget:
    """Wraps a target so each pushed blob gets its own status line.

    Payloads are read through a TrackedReader. Metadata-only events
    (exists, tagged, mounted) are reported as zero-byte lines that resolve
    within one render tick. Errors from the wrapped target always
    propagate unchanged before any completion marker is sent, so a failed
    push, including one rejected because the content exists, keeps its last
    progress visible.

    Any attribute not defined here is forwarded to the wrapped target, so a
    tracked target can be used wherever the untracked one was.
    """

    def __init__(
        self, target: TargetPort, manager: TrackingManager, prompts: Prompts
    ) -> None:
        self._target = target
        self._manager = manager
        self._prompts = prompts

    @property
    def target(self) -> TargetPort:
        """The wrapped, untracked target."""
        return self._target

    def __getattr__(self, name: str) -> Any:
        """Forward unknown attributes to the wrapped target."""
        return getattr(self._target, name)

    def _reader(self, descriptor: Descriptor, stream: ReadableStream) -> TrackedReader:
        return TrackedReader(
            stream, descriptor, self._manager.register(), self._prompts
        )

    def push(self, descriptor: Descriptor, stream: ReadableStream) -> None:
        """Push content to the wrapped target with progress tracking."""
        with self._reader(descriptor, stream) as reader:
            reader.start()
            self._target.push(descriptor, reader)
            reader.end()

    def push_reference(
        self, descriptor: Descriptor, stream: ReadableStream, reference: str
    ) -> None:
        """Push content and tag it, tracking the upload."""
        with self._reader(descriptor, stream) as reader:
            reader.start()
            if isinstance(self._target, ReferencePusherPort):
                self._target.push_reference(descriptor, reader, reference)
            else:
                self._target.push(descriptor, reader)
                self._target.tag(descriptor, reference)
            reader.end()

    def exists(self, descriptor: Descriptor) -> bool:
        """Check existence, reporting content that is already present."""
        found = self._target.exists(descriptor)
        if found:
            self.report(descriptor, self._prompts.exists)
        return found

    def tag(self, descriptor: Descriptor, reference: str) -> None:
        """Tag content on the wrapped target and report it."""
        self._target.tag(descriptor, reference)
        self.report(descriptor, f"{self._prompts.tagged} {reference}")

    def mount(
        self,
        descriptor: Descriptor,
        from_repository: str,
        get_content: Callable[[], BinaryIO] | None = None,
    ) -> None:
        """Mount content from another repository and report it.

        Raises:
            TypeError: If the wrapped target cannot mount.
        """
        if not isinstance(self._target, MounterPort):
            raise TypeError(f"{type(self._target).__name__} does not support mount")
        self._target.mount(descriptor, from_repository, get_content)
        self.report(descriptor, self._prompts.mounted)

    def report(self, descriptor: Descriptor, prompt: str) -> None:
        """Show a completed zero-byte line for a metadata-only event."""
        handle = self._manager.register()
        handle.send(messages.progress(prompt, descriptor, descriptor.size, final=True))
        handle.send(messages.end_timing())
        handle.close()


def wrap(target: TargetPort, manager: TrackingManager, prompts: Prompts) -> TrackedTarget:
    """Wrap a target so its pushes are tracked on the manager."""
    return TrackedTarget(target, manager, prompts)
