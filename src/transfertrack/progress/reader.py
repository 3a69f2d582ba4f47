"""Readable stream decorator reporting progress to a status line."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from transfertrack.core import messages
from transfertrack.core.exceptions import UnexpectedEndOfStreamError


if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType

    from transfertrack.core.models import Descriptor, Prompts
    from transfertrack.core.ports import ReadableStream
    from transfertrack.progress.manager import StatusHandle


# Chunk size used when iterating over the stream (64KB)
_CHUNK_SIZE = 64 * 1024


class TrackedReader:
    """Wraps a readable stream and reports bytes read to a status line.

    Intermediate offsets are sent best effort and may be dropped when the
    line's queue is full. The start marker, the final offset at end of
    stream, and the completion markers sent by ``end()`` are guaranteed.

    A reader is consumed by one caller at a time. ``end()`` may race the
    last ``read()``; both only ever send idempotent markers.

    Example:
        reader = TrackedReader(stream, descriptor, manager.register(), PUSH_PROMPTS)
        with reader:
            target.push(descriptor, reader)
            reader.end()
    """

    def __init__(
        self,
        stream: ReadableStream,
        descriptor: Descriptor,
        handle: StatusHandle,
        prompts: Prompts,
    ) -> None:
        self._stream = stream
        self._descriptor = descriptor
        self._handle = handle
        self._prompts = prompts
        self._offset = 0
        self._started = False
        self._ended = False
        self._lock = threading.Lock()

    @property
    def descriptor(self) -> Descriptor:
        """Descriptor of the content being read."""
        return self._descriptor

    @property
    def offset(self) -> int:
        """Number of bytes read so far."""
        return self._offset

    def start(self) -> None:
        """Send the start marker once."""
        with self._lock:
            if self._started:
                return
            self._started = True
        self._handle.send(messages.start_timing())

    def read(self, size: int = -1) -> bytes:
        """Read from the wrapped stream and report the new offset.

        Raises:
            UnexpectedEndOfStreamError: If the stream ends at an offset
                other than the declared size.
        """
        self.start()
        data = self._stream.read(size)
        self._offset += len(data)
        # read(-1) consumes the whole stream in one call
        if size < 0 or (not data and size != 0):
            self._finish()
        elif data:
            self._handle.send(
                messages.progress(self._prompts.action, self._descriptor, self._offset)
            )
        return data

    def readinto(self, buffer: bytearray | memoryview) -> int:
        """Read into a pre-allocated buffer."""
        view = memoryview(buffer).cast("B")
        data = self.read(len(view))
        view[: len(data)] = data
        return len(data)

    def readable(self) -> bool:
        """Tracked readers are always readable."""
        return True

    def __iter__(self) -> Iterator[bytes]:
        """Iterate over the stream in chunks."""
        return iter(lambda: self.read(_CHUNK_SIZE), b"")

    def _finish(self) -> None:
        if self._offset != self._descriptor.size:
            raise UnexpectedEndOfStreamError(self._descriptor, self._offset)
        self._handle.send(
            messages.progress(
                self._prompts.action, self._descriptor, self._offset, final=True
            )
        )

    def end(self) -> None:
        """Mark the transfer complete and release the status line."""
        with self._lock:
            if self._ended:
                return
            self._ended = True
        self._handle.send(
            messages.progress(
                self._prompts.done,
                self._descriptor,
                self._descriptor.size,
                final=True,
            )
        )
        self._handle.send(messages.end_timing())
        self._handle.close()

    def close(self) -> None:
        """Release the status line, leaving its last progress visible."""
        self._handle.close()

    def __enter__(self) -> TrackedReader:
        """Return the reader."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Release the status line."""
        self.close()
