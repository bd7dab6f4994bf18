from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class IBlobStore(ABC):
    """Durable named blob storage with whole-blob replacement semantics."""

    @abstractmethod
    def write(self, name: str, data: bytes) -> int:
        """Atomically replace the blob and return the committed size in bytes."""

    @abstractmethod
    def read(self, name: str) -> bytes:
        """Return the blob contents or raise BlobNotFound."""

    @abstractmethod
    def exists(self, name: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def delete(self, name: str) -> None:
        """Remove the blob if present."""

    def local_path(self, name: str) -> Path | None:
        """Filesystem path of the blob when the store is disk-backed."""

        return None
