from __future__ import annotations

import logging
from dataclasses import dataclass

from src.app.ports.output import FeedArtifact, IBlobStore, IFeedOrigin
from src.domain.exceptions import BlobNotFound, IncompleteTransfer, IncompleteWrite
from src.domain.models import SyncResult, SyncStatus

logger = logging.getLogger(__name__)

# Data blobs first, hash last: a crash mid-update leaves the local hash stale.
UPDATE_ORDER = (FeedArtifact.DATABASE, FeedArtifact.GEOJSON, FeedArtifact.HASH)

_PROGRESS = {
    FeedArtifact.DATABASE: "Updating database",
    FeedArtifact.GEOJSON: "Updating geojson",
    FeedArtifact.HASH: "Updating hash",
}


def pending_marker_name(key: str) -> str:
    return f"{key}.pending"


def _display(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


@dataclass(slots=True)
class SyncManager:
    """Keeps the local blobs of a dataset in step with the origin.

    - The local ``<key>.hash`` blob is compared with the origin's hash; equal
      hashes mean nothing else is transferred.
    - Otherwise the database, geojson and hash blobs are replaced in that order.
    - A ``<key>.pending`` marker brackets the update, so an update interrupted
      between the two data blobs is redone in full on the next call.

    No retries happen here; failures propagate to the caller.
    """

    blob_store: IBlobStore
    origin: IFeedOrigin
    use_pending_marker: bool = True

    def local_hash(self, key: str) -> str:
        return _display(self._local_hash_bytes(key))

    def _local_hash_bytes(self, key: str) -> bytes:
        try:
            return self.blob_store.read(FeedArtifact.HASH.blob_name(key))
        except BlobNotFound:
            return b""

    def has_pending_update(self, key: str) -> bool:
        return self.use_pending_marker and self.blob_store.exists(
            pending_marker_name(key)
        )

    async def ensure_current(self, key: str) -> SyncResult:
        # Hashes are compared as raw bytes; decoding is only for reporting.
        local = self._local_hash_bytes(key)
        interrupted = self.has_pending_update(key)
        if interrupted:
            logger.warning("Previous update of %s was interrupted; resyncing", key)

        remote = await self.origin.fetch(key, FeedArtifact.HASH)
        content_hash = _display(remote)
        if local == remote and not interrupted:
            logger.info("Dataset %s is up to date (%s)", key, content_hash.strip())
            return SyncResult(
                key=key, status=SyncStatus.UP_TO_DATE, content_hash=content_hash
            )

        if self.use_pending_marker:
            self.blob_store.write(pending_marker_name(key), remote)

        for artifact in UPDATE_ORDER:
            logger.info("%s for %s", _PROGRESS[artifact], key)
            payload = await self.origin.fetch(key, artifact)
            if artifact is FeedArtifact.HASH and payload != remote:
                logger.warning(
                    "Origin hash for %s changed during update; keeping %s",
                    key,
                    content_hash.strip(),
                )
                payload = remote
            self._store(key, artifact, payload)

        if self.use_pending_marker:
            self.blob_store.delete(pending_marker_name(key))

        return SyncResult(
            key=key, status=SyncStatus.UPDATED, content_hash=content_hash
        )

    def _store(self, key: str, artifact: FeedArtifact, payload: bytes) -> None:
        name = artifact.blob_name(key)
        try:
            committed = self.blob_store.write(name, payload)
        except IncompleteWrite as exc:
            raise IncompleteTransfer(artifact.value, str(exc)) from exc

        if committed != len(payload):
            raise IncompleteTransfer(
                artifact.value, f"{committed} of {len(payload)} bytes stored"
            )
