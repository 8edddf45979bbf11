"""File storage adapters."""

from .files import FileStorage, FileStorageError, LocalFileStorage

__all__ = ["FileStorage", "FileStorageError", "LocalFileStorage"]
