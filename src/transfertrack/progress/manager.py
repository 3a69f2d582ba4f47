"""Tracking manager rendering many status lines onto one terminal."""

from __future__ import annotations

import logging
import queue
import threading
from typing import TYPE_CHECKING, TextIO

from transfertrack.config import TrackingSettings
from transfertrack.core.exceptions import ManagerStoppedError, TerminalWriteError
from transfertrack.core.status import StatusLine
from transfertrack.progress.locks import ReadWriteLock


if TYPE_CHECKING:
    from types import TracebackType

    from transfertrack.core.messages import StatusMessage
    from transfertrack.core.ports import TerminalPort


logger = logging.getLogger(__name__)

# header row and digest row
ROWS_PER_SLOT = 2

_CLOSE = object()


class StatusHandle:
    """Write end of one status line's message queue.

    The handle is owned by exactly one producer. Guaranteed messages block
    until queued; best effort messages are dropped when the queue is full.
    """

    def __init__(self, index: int, capacity: int) -> None:
        self.index = index
        self._queue: queue.Queue[object] = queue.Queue(maxsize=capacity)
        self._closed = False
        self._close_lock = threading.Lock()

    @property
    def closed(self) -> bool:
        """True once close() was called."""
        return self._closed

    def send(self, message: StatusMessage) -> bool:
        """Queue a message according to its delivery guarantee.

        Returns:
            True if the message was queued, False if it was dropped.
        """
        # nothing may be queued behind the close sentinel
        with self._close_lock:
            if self._closed:
                logger.debug(
                    "Dropping %s for closed line %d", message.kind, self.index
                )
                return False
            if message.guaranteed:
                self._queue.put(message)
                return True
            try:
                self._queue.put_nowait(message)
            except queue.Full:
                return False
            return True

    def close(self) -> None:
        """Signal that no more messages will be sent. Idempotent.

        Waits for a guaranteed send in progress, so the sentinel is always
        the last queued item.
        """
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        self._queue.put(_CLOSE)

    def _receive(self) -> object:
        return self._queue.get()


class TrackingManager:
    """Owns the terminal and every tracked status line.

    Each registered line gets a private bounded queue drained by its own
    update worker. A single render worker repaints every visible line on a
    fixed interval, and ``stop()`` guarantees one final paint of fully
    drained state before the terminal is restored.

    Example:
        with TrackingManager.for_device(sys.stderr) as manager:
            handle = manager.register()
            handle.send(progress("Uploading", descriptor, 0, final=True))
            handle.close()
    """

    def __init__(
        self, surface: TerminalPort, settings: TrackingSettings | None = None
    ) -> None:
        """Take ownership of a terminal surface and start rendering.

        Args:
            surface: The terminal to draw on.
            settings: Tunables; defaults to TrackingSettings().

        Raises:
            TerminalWriteError: If the terminal rejects the initial write.
        """
        self._surface = surface
        self._settings = settings if settings is not None else TrackingSettings()
        self._slots: list[StatusLine] = []
        self._handles: list[StatusHandle] = []
        self._workers: list[threading.Thread] = []
        self._state_lock = ReadWriteLock()
        self._register_lock = threading.Lock()
        # row reservation and render passes must not interleave
        self._draw_lock = threading.Lock()
        self._stop_lock = threading.Lock()
        self._stopped = False
        self._stop_requested = threading.Event()
        self._updates_drained = threading.Event()
        self._render_error: Exception | None = None

        try:
            self._surface.save()
        except OSError as e:
            raise TerminalWriteError("Cannot prepare terminal", cause=e) from e
        self._renderer = threading.Thread(
            target=self._render_loop, name="transfertrack-render", daemon=True
        )
        self._renderer.start()

    @classmethod
    def for_device(
        cls, device: TextIO, settings: TrackingSettings | None = None
    ) -> TrackingManager:
        """Create a manager drawing on a terminal device.

        Raises:
            TerminalUnavailableError: If the device is not interactive.
        """
        from transfertrack.adapters.terminal import TerminalSurface

        settings = settings if settings is not None else TrackingSettings()
        return cls(TerminalSurface.from_settings(device, settings), settings)

    def __enter__(self) -> TrackingManager:
        """Return the running manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Stop the manager."""
        self.stop()

    @property
    def stopped(self) -> bool:
        """True once stop() was called."""
        return self._stopped

    def register(self) -> StatusHandle:
        """Allocate a status line and return the handle feeding it.

        Raises:
            ManagerStoppedError: If the manager was stopped.
            TerminalWriteError: If the rows cannot be reserved.
        """
        with self._register_lock:
            if self._stopped:
                raise ManagerStoppedError()
            with self._draw_lock:
                # rows are reserved before the slot becomes visible to render
                try:
                    for _ in range(ROWS_PER_SLOT):
                        self._surface.new_row()
                except OSError as e:
                    raise TerminalWriteError(
                        "Cannot reserve terminal rows", cause=e
                    ) from e
                with self._state_lock.write_locked():
                    index = len(self._slots)
                    self._slots.append(StatusLine())
            handle = StatusHandle(index, self._settings.queue_capacity)
            worker = threading.Thread(
                target=self._update_loop,
                args=(handle,),
                name=f"transfertrack-update-{index}",
                daemon=True,
            )
            self._handles.append(handle)
            self._workers.append(worker)
            worker.start()
        logger.debug("Registered status line %d", index)
        return handle

    def _update_loop(self, handle: StatusHandle) -> None:
        while True:
            message = handle._receive()
            if message is _CLOSE:
                return
            with self._state_lock.write_locked():
                self._slots[handle.index].update(message)  # type: ignore[arg-type]

    def _render_loop(self) -> None:
        interval = self._settings.render_interval
        while not self._stop_requested.wait(interval):
            self._render()
        # final pass only once every update worker has drained
        self._updates_drained.wait()
        self._render()

    def _render(self) -> None:
        # a failed pass must never end the render thread before the final pass
        with self._draw_lock:
            try:
                self._render_visible()
            except Exception as e:
                logger.warning("Failed to render progress: %s", e)
                self._render_error = e

    def _render_visible(self) -> None:
        size = self._surface.size()
        with self._state_lock.read_locked():
            slots = list(self._slots)
        count = len(slots)
        visible = size.height // ROWS_PER_SLOT
        first = max(count - visible, 0)
        for index in range(first, count):
            with self._state_lock.read_locked():
                header, sub = slots[index].render(size.width)
            from_bottom = (count - index) * ROWS_PER_SLOT
            self._surface.output_at(from_bottom, header)
            self._surface.output_at(from_bottom - 1, sub)

    def snapshot(self) -> list[StatusLine]:
        """Return copies of every status line in registration order."""
        with self._state_lock.read_locked():
            return [slot.copy() for slot in self._slots]

    def stop(self) -> None:
        """Render the final state and restore the terminal.

        Call once, after every handle was closed. Handles still open are
        closed here, so messages sent afterwards are dropped.

        Raises:
            ManagerStoppedError: If the manager was already stopped.
            TerminalWriteError: If the terminal rejected a write while
                rendering or restoring.
        """
        with self._stop_lock:
            if self._stopped:
                raise ManagerStoppedError()
            self._stopped = True

        # 1. stop periodic rendering; the worker now waits for drained state
        self._stop_requested.set()
        # 2. wait for every update worker to apply its queued messages
        with self._register_lock:
            handles = list(self._handles)
            workers = list(self._workers)
        for handle in handles:
            handle.close()
        for worker in workers:
            worker.join()
        # 3. release the final render and wait for it
        self._updates_drained.set()
        self._renderer.join()
        # 4. restore the cursor below the rendered lines
        try:
            self._surface.restore()
        except OSError as e:
            raise TerminalWriteError("Cannot restore terminal", cause=e) from e
        logger.debug("Stopped tracking %d status lines", len(handles))
        if self._render_error is not None:
            raise TerminalWriteError(
                "Terminal rejected progress output", cause=self._render_error
            ) from self._render_error
