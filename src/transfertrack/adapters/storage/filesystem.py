"""Filesystem content store for local development and testing."""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from transfertrack.core.exceptions import (
    ContentExistsError,
    ContentNotFoundError,
    DigestMismatchError,
    InvalidReferenceError,
    StorageError,
)
from transfertrack.core.models import Descriptor


if TYPE_CHECKING:
    from transfertrack.core.ports import ReadableStream


logger = logging.getLogger(__name__)

# Chunk size for reading pushed content (64KB)
_CHUNK_SIZE = 64 * 1024


class FilesystemStore:
    """Content-addressable store rooted at a local directory.

    Implements TargetPort and ReferencePusherPort. Blobs live under
    ``blobs/<algorithm>/<hex>`` and each tag is a file under ``refs/``
    holding the media type, size and digest of the tagged content.

    Example:
        store = FilesystemStore(Path("./store"))
        store.push(descriptor, open("layer.tar", "rb"))
        store.tag(descriptor, "v1")
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        """Directory holding the store."""
        return self._root

    def _blob_path(self, descriptor: Descriptor) -> Path:
        return self._root / "blobs" / descriptor.algorithm / descriptor.encoded

    def _ref_path(self, reference: str) -> Path:
        if not reference or "/" in reference or reference.startswith("."):
            raise InvalidReferenceError(
                f"Invalid reference: {reference!r}", source=reference
            )
        return self._root / "refs" / reference

    def exists(self, descriptor: Descriptor) -> bool:
        """Check whether the blob for a descriptor is stored."""
        return self._blob_path(descriptor).is_file()

    def push(self, descriptor: Descriptor, stream: ReadableStream) -> None:
        """Store content read from stream after verifying it.

        Raises:
            ContentExistsError: If the blob is already stored.
            DigestMismatchError: If size or digest differ from the descriptor.
            StorageError: If the blob cannot be written.
        """
        dest = self._blob_path(descriptor)
        if dest.is_file():
            raise ContentExistsError(
                f"Content already exists: {descriptor.digest}",
                source=descriptor.digest,
            )
        try:
            hasher = hashlib.new(descriptor.algorithm)
        except ValueError as e:
            raise StorageError(
                f"Unsupported digest algorithm: {descriptor.algorithm}",
                source=descriptor.digest,
                cause=e,
            ) from e

        dest.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=dest.parent, prefix=".push-")
        tmp_path = Path(tmp_name)
        size = 0
        try:
            with os.fdopen(fd, "wb") as dst:
                for chunk in iter(lambda: stream.read(_CHUNK_SIZE), b""):
                    dst.write(chunk)
                    hasher.update(chunk)
                    size += len(chunk)
            actual = f"{descriptor.algorithm}:{hasher.hexdigest()}"
            if size != descriptor.size or actual != descriptor.digest:
                raise DigestMismatchError(
                    f"Content mismatch for {descriptor.digest}: "
                    f"got {actual} ({size} bytes)",
                    source=descriptor.digest,
                )
            tmp_path.replace(dest)
        except OSError as e:
            raise StorageError(
                f"Cannot store {descriptor.digest}",
                source=descriptor.digest,
                cause=e,
            ) from e
        finally:
            tmp_path.unlink(missing_ok=True)
        logger.debug("Stored %s (%d bytes)", descriptor.digest, size)

    def tag(self, descriptor: Descriptor, reference: str) -> None:
        """Point a reference at stored content.

        Raises:
            ContentNotFoundError: If the content is not stored.
        """
        if not self.exists(descriptor):
            raise ContentNotFoundError(
                f"Content not found: {descriptor.digest}",
                source=descriptor.digest,
            )
        path = self._ref_path(reference)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"{descriptor.media_type} {descriptor.size} {descriptor.digest}\n")

    def push_reference(
        self, descriptor: Descriptor, stream: ReadableStream, reference: str
    ) -> None:
        """Store content and tag it."""
        self.push(descriptor, stream)
        self.tag(descriptor, reference)

    def resolve(self, reference: str) -> Descriptor:
        """Return the descriptor a reference points at.

        Raises:
            ContentNotFoundError: If the reference does not exist.
        """
        path = self._ref_path(reference)
        try:
            media_type, size, digest = path.read_text().split()
        except FileNotFoundError as e:
            raise ContentNotFoundError(
                f"Reference not found: {reference}",
                source=reference,
                cause=e,
            ) from e
        return Descriptor(media_type=media_type, digest=digest, size=int(size))
