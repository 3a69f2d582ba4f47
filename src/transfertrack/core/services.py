"""Push operations composing a target with an executor."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from transfertrack.core.models import DIGEST_ALGORITHM, Descriptor


if TYPE_CHECKING:
    from concurrent.futures import Future

    from transfertrack.core.ports import ExecutorPort, TargetPort


logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = "application/octet-stream"

# Chunk size for hashing files (64KB)
_CHUNK_SIZE = 64 * 1024


def describe_file(path: Path, media_type: str = DEFAULT_MEDIA_TYPE) -> Descriptor:
    """Build a descriptor for a local file, titled with its name."""
    hasher = hashlib.new(DIGEST_ALGORITHM)
    size = 0
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            hasher.update(chunk)
            size += len(chunk)
    return Descriptor(
        media_type=media_type,
        digest=f"{DIGEST_ALGORITHM}:{hasher.hexdigest()}",
        size=size,
        title=path.name,
    )


@dataclass(frozen=True, slots=True)
class PushReport:
    """Outcome of a push_files() call.

    Attributes:
        descriptors: Descriptors of every input file, in input order.
        skipped: Descriptors of files whose content the target already held.
    """

    descriptors: tuple[Descriptor, ...]
    skipped: tuple[Descriptor, ...] = ()

    @property
    def pushed(self) -> int:
        """Number of files actually pushed."""
        return len(self.descriptors) - len(self.skipped)


def _push_file(target: TargetPort, path: Path, descriptor: Descriptor) -> bool:
    if target.exists(descriptor):
        logger.info("Skipping %s, content already exists", path)
        return False
    with path.open("rb") as f:
        target.push(descriptor, f)
    return True


def push_files(
    target: TargetPort,
    paths: list[Path],
    *,
    executor: ExecutorPort,
    media_type: str = DEFAULT_MEDIA_TYPE,
    reference: str | None = None,
) -> PushReport:
    """Push files concurrently, skipping content the target already holds.

    Args:
        target: Target receiving the files, tracked or not.
        paths: Local files to push.
        executor: Executor running one push per file.
        media_type: Media type recorded in every descriptor.
        reference: Optional reference attached to the last file.

    Returns:
        Descriptors of every file in input order, and those skipped.

    Raises:
        Exception: The first error raised by any push, after every
            submitted push finished.
    """
    descriptors = [describe_file(path, media_type) for path in paths]
    with executor:
        futures: list[Future[bool]] = [
            executor.submit(_push_file, target, path, descriptor)
            for path, descriptor in zip(paths, descriptors, strict=True)
        ]
    errors = [e for e in (future.exception() for future in futures) if e is not None]
    if errors:
        raise errors[0]

    if reference is not None and descriptors:
        target.tag(descriptors[-1], reference)
    skipped = tuple(
        descriptor
        for descriptor, future in zip(descriptors, futures, strict=True)
        if not future.result()
    )
    return PushReport(descriptors=tuple(descriptors), skipped=skipped)
