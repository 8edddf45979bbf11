"""File storage sinks for uploaded assets."""

from __future__ import annotations

import logging
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO

from devcamper.errors import UpstreamFailure

logger = logging.getLogger(__name__)


class FileStorageError(UpstreamFailure):
    """Raised when an uploaded file cannot be written."""

    collaborator = "file_storage"


class FileStorage(ABC):
    @abstractmethod
    def save(self, name: str, source: BinaryIO) -> str:
        """Copy ``source`` to ``name`` (replacing any previous file) and return the stored name."""


class LocalFileStorage(FileStorage):
    """Writes files into a single directory on the local filesystem."""

    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def save(self, name: str, source: BinaryIO) -> str:
        target = self._root / Path(name).name
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            with target.open("wb") as sink:
                shutil.copyfileobj(source, sink)
        except OSError as exc:
            logger.error("upload.write_failed name=%s error=%s", target.name, type(exc).__name__)
            raise FileStorageError("Problem with file upload") from exc
        return target.name


__all__ = ["FileStorage", "FileStorageError", "LocalFileStorage"]
