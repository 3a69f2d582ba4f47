"""Core domain models for transfertrack.

These models are pure Python dataclasses with no I/O dependencies.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass


DIGEST_ALGORITHM = "sha256"


@dataclass(frozen=True, slots=True)
class Descriptor:
    """A content-addressing record for one transferred unit.

    Attributes:
        media_type: Media type of the content.
        digest: Content digest in ``algorithm:hex`` form.
        size: Declared size in bytes.
        title: Optional human-readable name (usually a file name).

    Example:
        >>> desc = Descriptor.from_bytes(b"hello", "text/plain", title="hello.txt")
        >>> desc.size
        5
    """

    media_type: str
    digest: str
    size: int
    title: str | None = None

    def __post_init__(self) -> None:
        """Validate descriptor fields after initialization."""
        if not self.media_type:
            raise ValueError("Descriptor media type cannot be empty")
        if self.size < 0:
            raise ValueError(f"Descriptor size cannot be negative: {self.size}")

    @classmethod
    def from_bytes(
        cls, data: bytes, media_type: str, title: str | None = None
    ) -> Descriptor:
        """Build a descriptor for an in-memory payload."""
        digest = hashlib.new(DIGEST_ALGORITHM, data).hexdigest()
        return cls(
            media_type=media_type,
            digest=f"{DIGEST_ALGORITHM}:{digest}",
            size=len(data),
            title=title,
        )

    @property
    def display_name(self) -> str:
        """Title if present, else the media type."""
        return self.title or self.media_type

    @property
    def algorithm(self) -> str:
        """Algorithm part of the digest."""
        return self.digest.partition(":")[0]

    @property
    def encoded(self) -> str:
        """Hex part of the digest."""
        algorithm, sep, encoded = self.digest.partition(":")
        return encoded if sep else algorithm

    @property
    def short_digest(self) -> str:
        """First 12 characters of the encoded digest."""
        return self.encoded[:12]


@dataclass(frozen=True, slots=True)
class TerminalSize:
    """Usable size of a terminal in character cells."""

    width: int
    height: int


@dataclass(frozen=True, slots=True)
class Prompts:
    """Verb labels shown next to each tracked line.

    Attributes:
        action: Shown while content is transferring.
        done: Shown once the transfer completed.
        exists: Shown when the target already holds the content.
        mounted: Shown when the content was mounted from another repository.
        tagged: Shown when a reference was attached to the content.
    """

    action: str
    done: str
    exists: str = "Exists"
    mounted: str = "Mounted"
    tagged: str = "Tagged"
