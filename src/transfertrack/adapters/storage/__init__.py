"""Content store adapters."""

from transfertrack.adapters.storage.filesystem import FilesystemStore


__all__ = ["FilesystemStore"]
