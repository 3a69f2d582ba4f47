"""transfertrack - Terminal progress tracking for concurrent content transfers.

This library renders one live status line per transfer on an interactive
terminal while many uploads progress concurrently, and restores the
terminal cleanly once every transfer is done.

Example:
    >>> import sys
    >>> from transfertrack import PUSH_PROMPTS, FilesystemStore, new_manager, wrap
    >>> manager = new_manager(sys.stderr)  # doctest: +SKIP
    >>> target = wrap(FilesystemStore(root), manager, PUSH_PROMPTS)  # doctest: +SKIP
    >>> target.push(descriptor, stream)  # doctest: +SKIP
    >>> manager.stop()  # doctest: +SKIP
"""

from transfertrack.adapters.storage import FilesystemStore
from transfertrack.adapters.terminal import TerminalSurface
from transfertrack.config import (
    COPY_PROMPTS,
    PULL_PROMPTS,
    PUSH_PROMPTS,
    TrackingSettings,
)
from transfertrack.core.exceptions import (
    ContentExistsError,
    ContentNotFoundError,
    DigestMismatchError,
    InvalidReferenceError,
    ManagerStoppedError,
    StorageError,
    TerminalUnavailableError,
    TerminalWriteError,
    TransferTrackError,
    UnexpectedEndOfStreamError,
)
from transfertrack.core.models import Descriptor, Prompts, TerminalSize
from transfertrack.core.ports import TargetPort, TerminalPort
from transfertrack.core.services import PushReport, describe_file, push_files
from transfertrack.core.status import StatusLine
from transfertrack.progress import (
    StatusHandle,
    StatusPrinter,
    TextTarget,
    TrackedReader,
    TrackedTarget,
    TrackingManager,
    new_manager,
    wrap,
)


__version__ = "0.1.0"

__all__ = [
    "COPY_PROMPTS",
    "PULL_PROMPTS",
    "PUSH_PROMPTS",
    "ContentExistsError",
    "ContentNotFoundError",
    "Descriptor",
    "DigestMismatchError",
    "FilesystemStore",
    "InvalidReferenceError",
    "ManagerStoppedError",
    "Prompts",
    "PushReport",
    "StatusHandle",
    "StatusLine",
    "StatusPrinter",
    "StorageError",
    "TargetPort",
    "TerminalPort",
    "TerminalSize",
    "TerminalSurface",
    "TerminalUnavailableError",
    "TerminalWriteError",
    "TextTarget",
    "TrackedReader",
    "TrackedTarget",
    "TrackingManager",
    "TrackingSettings",
    "TransferTrackError",
    "UnexpectedEndOfStreamError",
    "__version__",
    "describe_file",
    "new_manager",
    "push_files",
    "wrap",
]
