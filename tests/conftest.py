"""Pytest configuration and shared fixtures.

This module registers custom markers for CI job separation and provides
shared fixtures for the test suite.
"""

from __future__ import annotations

import io
import threading
from collections.abc import Callable
from concurrent.futures import Future
from typing import TYPE_CHECKING

import pytest

from transfertrack.core.exceptions import ContentExistsError, ContentNotFoundError
from transfertrack.core.models import Descriptor, TerminalSize


if TYPE_CHECKING:
    from transfertrack.core.ports import ReadableStream


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "core: Core models, messages, and services")
    config.addinivalue_line("markers", "progress: Tracking manager and decorators")
    config.addinivalue_line("markers", "terminal: Terminal surface adapter")
    config.addinivalue_line("markers", "storage: Storage adapters (filesystem)")
    config.addinivalue_line("markers", "cli: CLI tests")
    config.addinivalue_line(
        "markers", "tra: Test Responsibility Anchor (TRA) - namespace.Anchor format"
    )
    config.addinivalue_line(
        "markers",
        "tier: Test tier for CI job separation (0=instant, 1=fast, 2=standard, 3=slow, 4=manual)",
    )


class FakeTTY(io.StringIO):
    """In-memory text stream that claims to be an interactive terminal."""

    name = "<fake tty>"

    def isatty(self) -> bool:
        return True


class AsciiTTY(io.TextIOWrapper):
    """Interactive terminal whose encoding cannot represent box drawing glyphs."""

    def isatty(self) -> bool:
        return True


class RecordingSurface:
    """TerminalPort fake keeping the latest text of every reserved row.

    Rows are numbered from the top in reservation order, so tests can read
    the final screen without decoding escape sequences.
    """

    def __init__(self, width: int = 120, height: int = 200) -> None:
        self.width = width
        self.height = height
        self.rows: list[str] = []
        self.saved = False
        self.restored = False
        self.fail_output = False
        self.fail_new_row = False
        self.fail_restore = False
        self.output_errors: list[Exception] = []
        self._lock = threading.Lock()

    def size(self) -> TerminalSize:
        return TerminalSize(width=self.width, height=self.height)

    def save(self) -> None:
        self.saved = True

    def new_row(self) -> None:
        if self.fail_new_row:
            raise OSError("new_row failed")
        with self._lock:
            self.rows.append("")

    def output_at(self, from_bottom: int, text: str) -> None:
        if self.fail_output:
            raise OSError("output failed")
        if self.output_errors:
            raise self.output_errors.pop(0)
        with self._lock:
            self.rows[len(self.rows) - from_bottom] = text

    def restore(self) -> None:
        if self.fail_restore:
            raise OSError("restore failed")
        self.restored = True

    @property
    def headers(self) -> list[str]:
        """Header rows of every slot, in registration order."""
        return self.rows[0::2]


class MemoryTarget:
    """In-memory TargetPort storing blobs by digest."""

    def __init__(self, chunk_size: int = 4) -> None:
        self.chunk_size = chunk_size
        self.blobs: dict[str, bytes] = {}
        self.tags: dict[str, str] = {}
        self._lock = threading.Lock()

    def push(self, descriptor: Descriptor, stream: ReadableStream) -> None:
        if descriptor.digest in self.blobs:
            raise ContentExistsError(
                f"Content already exists: {descriptor.digest}",
                source=descriptor.digest,
            )
        chunks = []
        while chunk := stream.read(self.chunk_size):
            chunks.append(chunk)
        with self._lock:
            self.blobs[descriptor.digest] = b"".join(chunks)

    def exists(self, descriptor: Descriptor) -> bool:
        return descriptor.digest in self.blobs

    def tag(self, descriptor: Descriptor, reference: str) -> None:
        if descriptor.digest not in self.blobs:
            raise ContentNotFoundError(
                f"Content not found: {descriptor.digest}", source=descriptor.digest
            )
        self.tags[reference] = descriptor.digest


class SyncExecutor:
    """ExecutorPort running every task inline."""

    def submit(
        self, fn: Callable[..., object], *args: object, **kwargs: object
    ) -> Future[object]:
        future: Future[object] = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future

    def __enter__(self) -> SyncExecutor:
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        return None


@pytest.fixture
def tty_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Environment in which rich trusts isatty() for terminal detection."""
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.delenv("TTY_COMPATIBLE", raising=False)
    monkeypatch.setenv("TERM", "xterm-256color")


@pytest.fixture
def fake_tty(tty_env: None) -> FakeTTY:
    """A fresh in-memory interactive terminal."""
    return FakeTTY()


@pytest.fixture
def ascii_tty(tty_env: None) -> AsciiTTY:
    """An ASCII-only interactive terminal backed by memory."""
    return AsciiTTY(io.BytesIO(), encoding="ascii")


@pytest.fixture
def make_surface() -> Callable[..., RecordingSurface]:
    """Factory for recording surfaces of a given size."""
    return RecordingSurface


@pytest.fixture
def surface() -> RecordingSurface:
    """A tall recording surface that shows every slot."""
    return RecordingSurface()


@pytest.fixture
def memory_target() -> MemoryTarget:
    """An empty in-memory target."""
    return MemoryTarget()


@pytest.fixture
def sync_executor() -> SyncExecutor:
    """Executor running submitted tasks inline."""
    return SyncExecutor()


@pytest.fixture
def descriptor() -> Descriptor:
    """Descriptor of a small titled payload."""
    return Descriptor.from_bytes(b"hello world", "text/plain", title="hello.txt")
