from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from src.app.ports.output import IBlobStore
from src.domain.exceptions import (
    BlobNotFound,
    BlobStoreError,
    IncompleteWrite,
    StorageUnsupported,
)


@dataclass(slots=True)
class LocalBlobStore(IBlobStore):
    """Stores blobs as files in a single directory.

    Env vars:
      - FEED_CACHE_DIR: directory holding the blobs (default: data/feed_cache)

    Writes go to a temp file in the same directory, are fsynced, then renamed
    over the target, so readers see either the old or the new blob.
    """

    base_path: str | Path | None = None

    def __post_init__(self) -> None:
        base = self._base()
        try:
            base.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageUnsupported(
                f"Cannot create blob directory {base}: {exc}"
            ) from exc
        if not os.access(base, os.W_OK):
            raise StorageUnsupported(f"Blob directory is not writable: {base}")

    def _base(self) -> Path:
        value = self.base_path or os.getenv("FEED_CACHE_DIR") or "data/feed_cache"
        return Path(value)

    def _path(self, name: str) -> Path:
        if not name or "/" in name or "\\" in name or name in {".", ".."}:
            raise ValueError(f"Invalid blob name: {name!r}")
        return self._base() / name

    def write(self, name: str, data: bytes) -> int:
        target = self._path(name)
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{name}.", suffix=".tmp", dir=target.parent
            )
        except OSError as exc:
            raise BlobStoreError(f"Failed to write blob {name}: {exc}") from exc

        try:
            with os.fdopen(fd, "wb") as fp:
                written = fp.write(data)
                fp.flush()
                os.fsync(fp.fileno())
            if written != len(data):
                raise IncompleteWrite(name, expected=len(data), committed=written)
            os.replace(tmp_name, target)
            committed = target.stat().st_size
        except OSError as exc:
            raise BlobStoreError(f"Failed to write blob {name}: {exc}") from exc
        finally:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)

        return committed

    def read(self, name: str) -> bytes:
        path = self._path(name)
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise BlobNotFound(name) from exc
        except OSError as exc:
            raise BlobStoreError(f"Failed to read blob {name}: {exc}") from exc

    def exists(self, name: str) -> bool:
        return self._path(name).is_file()

    def delete(self, name: str) -> None:
        try:
            self._path(name).unlink(missing_ok=True)
        except OSError as exc:
            raise BlobStoreError(f"Failed to delete blob {name}: {exc}") from exc

    def local_path(self, name: str) -> Path | None:
        return self._path(name)
