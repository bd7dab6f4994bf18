from __future__ import annotations

import os
from dataclasses import dataclass

from botocore.exceptions import BotoCoreError, ClientError

from src.adapters.aws import s3_client
from src.app.ports.output import IBlobStore
from src.domain.exceptions import (
    BlobNotFound,
    BlobStoreError,
    IncompleteWrite,
    StorageUnsupported,
)

_MISSING_CODES = {"NoSuchKey", "404", "NotFound"}


def _error_code(exc: ClientError) -> str | None:
    response = getattr(exc, "response", None)
    if not isinstance(response, dict):
        return None
    return response.get("Error", {}).get("Code")


@dataclass(slots=True)
class S3BlobStore(IBlobStore):
    """Stores blobs as S3 objects (supports LocalStack via env).

    Env vars:
      - FEED_CACHE_BUCKET (required)
      - FEED_CACHE_PREFIX (default: feed-cache)
      - ENDPOINT_URL (preferred for LocalStack)

    A PUT replaces the object atomically; the committed size is read back with
    a HEAD request.
    """

    bucket: str | None = None
    prefix: str | None = None

    def _bucket(self) -> str:
        value = self.bucket or os.getenv("FEED_CACHE_BUCKET")
        if not value:
            raise StorageUnsupported("Missing FEED_CACHE_BUCKET")
        return value

    def _prefix(self) -> str:
        return (self.prefix or os.getenv("FEED_CACHE_PREFIX") or "feed-cache").strip(
            "/"
        )

    def _key(self, name: str) -> str:
        return f"{self._prefix()}/{name}"

    def write(self, name: str, data: bytes) -> int:
        s3 = s3_client()
        bucket = self._bucket()
        key = self._key(name)
        try:
            s3.put_object(Bucket=bucket, Key=key, Body=data)
            head = s3.head_object(Bucket=bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise BlobStoreError(f"Failed to write blob {name}: {exc}") from exc

        committed = int(head.get("ContentLength", -1))
        if committed != len(data):
            raise IncompleteWrite(name, expected=len(data), committed=committed)
        return committed

    def read(self, name: str) -> bytes:
        s3 = s3_client()
        try:
            obj = s3.get_object(Bucket=self._bucket(), Key=self._key(name))
            return obj["Body"].read()
        except ClientError as exc:
            if _error_code(exc) in _MISSING_CODES:
                raise BlobNotFound(name) from exc
            raise BlobStoreError(f"Failed to read blob {name}: {exc}") from exc
        except BotoCoreError as exc:
            raise BlobStoreError(f"Failed to read blob {name}: {exc}") from exc

    def exists(self, name: str) -> bool:
        s3 = s3_client()
        try:
            s3.head_object(Bucket=self._bucket(), Key=self._key(name))
        except ClientError as exc:
            if _error_code(exc) in _MISSING_CODES:
                return False
            raise BlobStoreError(f"Failed to stat blob {name}: {exc}") from exc
        except BotoCoreError as exc:
            raise BlobStoreError(f"Failed to stat blob {name}: {exc}") from exc
        return True

    def delete(self, name: str) -> None:
        s3 = s3_client()
        try:
            s3.delete_object(Bucket=self._bucket(), Key=self._key(name))
        except (BotoCoreError, ClientError) as exc:
            raise BlobStoreError(f"Failed to delete blob {name}: {exc}") from exc
