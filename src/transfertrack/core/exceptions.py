"""Domain exceptions for transfertrack.

All library errors inherit from TransferTrackError, allowing users to catch
any library exception with a single except clause. Each exception provides
a recovery_hint property with guidance on resolving the error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from transfertrack.core.models import Descriptor


class TransferTrackError(Exception):
    """Base class for all transfertrack exceptions.

    Catch this to handle any error from the library.
    """

    @property
    def recovery_hint(self) -> str | None:
        """Optional guidance on how to resolve this error."""
        return None


class TerminalUnavailableError(TransferTrackError):
    """Raised when the output device is not an interactive terminal.

    Attributes:
        device: Name of the device that was rejected.
    """

    def __init__(self, device: str) -> None:
        self.device = device
        super().__init__(f"Output device {device} is not an interactive terminal")

    @property
    def recovery_hint(self) -> str:
        """Suggest the plain text output path."""
        return "Run without progress tracking (e.g. --no-tty) when output is redirected"


class TerminalWriteError(TransferTrackError):
    """Raised when the terminal rejects a write.

    Attributes:
        cause: The underlying OSError.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class ManagerStoppedError(TransferTrackError):
    """Raised when a stopped tracking manager is used again."""

    def __init__(self) -> None:
        super().__init__("Progress manager has already been stopped")

    @property
    def recovery_hint(self) -> str:
        """Suggest creating a new manager."""
        return "Create a new manager for each batch of tracked transfers"


class UnexpectedEndOfStreamError(TransferTrackError, EOFError):
    """Raised when a stream ends at a different offset than its declared size.

    Attributes:
        descriptor: The descriptor of the content being read.
        expected: The declared size in bytes.
        actual: The number of bytes actually read.
    """

    def __init__(self, descriptor: Descriptor, actual: int) -> None:
        self.descriptor = descriptor
        self.expected = descriptor.size
        self.actual = actual
        super().__init__(
            f"Unexpected end of stream for {descriptor.digest}: "
            f"read {actual} of {descriptor.size} bytes"
        )

    @property
    def recovery_hint(self) -> str:
        """Suggest checking the content against its descriptor."""
        return "Verify the content was not modified after its descriptor was created"


class StorageError(TransferTrackError):
    """Base class for storage-related errors.

    Attributes:
        source: The digest, reference or path that caused the error.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        source: str,
        cause: Exception | None = None,
    ) -> None:
        self.source = source
        self.cause = cause
        super().__init__(message)


class ContentExistsError(StorageError):
    """Raised when pushed content is already present in the target."""


class ContentNotFoundError(StorageError):
    """Raised when referenced content does not exist in the target."""

    @property
    def recovery_hint(self) -> str:
        """Suggest pushing the content first."""
        return f"Push {self.source} before referencing it"


class DigestMismatchError(StorageError):
    """Raised when pushed content does not hash to its declared digest."""

    @property
    def recovery_hint(self) -> str:
        """Suggest recomputing the descriptor."""
        return "Recompute the descriptor from the exact bytes being pushed"


class InvalidReferenceError(StorageError, ValueError):
    """Raised when a reference cannot name a tag in the target."""

    @property
    def recovery_hint(self) -> str:
        """Describe valid references."""
        return "Use a non-empty reference without '/' that does not start with '.'"
