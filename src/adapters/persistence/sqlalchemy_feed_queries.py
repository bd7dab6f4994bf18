from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from src.app.ports.output import (
    FeedArtifact,
    IBlobStore,
    IFeedQueries,
    IQueryEngineFactory,
)
from src.domain.exceptions import BlobStoreError, QueryEngineUnavailable
from src.domain.models import Agency, AgencyList, FeedInfo

logger = logging.getLogger(__name__)


def sqlite_readonly_url(path: Path) -> str:
    return f"sqlite:///file:{path.resolve().as_posix()}?mode=ro&uri=true"


@dataclass(slots=True)
class SqlAlchemyFeedQueries(IFeedQueries):
    """Read-only queries over a GTFS SQLite database."""

    engine: Engine
    temp_path: Path | None = None

    def _first(self, sql: str) -> Mapping[str, Any] | None:
        try:
            with self.engine.connect() as conn:
                return conn.execute(text(sql)).mappings().first()
        except SQLAlchemyError as exc:
            raise QueryEngineUnavailable(str(exc)) from exc

    def feed_info(self) -> FeedInfo | None:
        row = self._first("SELECT * FROM feed_info LIMIT 1")
        return FeedInfo.from_row(row) if row is not None else None

    def primary_agency(self) -> Agency | None:
        row = self._first("SELECT * FROM agency ORDER BY rowid LIMIT 1")
        return Agency.from_row(row) if row is not None else None

    def agencies(self) -> AgencyList:
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(text("SELECT * FROM agency ORDER BY rowid"))
                agencies = [Agency.from_row(row) for row in rows.mappings()]
        except SQLAlchemyError as exc:
            raise QueryEngineUnavailable(str(exc)) from exc
        return AgencyList.build(agencies)

    def close(self) -> None:
        self.engine.dispose()
        if self.temp_path is not None:
            self.temp_path.unlink(missing_ok=True)
            self.temp_path = None


@dataclass(slots=True)
class SqlAlchemyQueryEngineFactory(IQueryEngineFactory):
    """Opens the ``<key>.db`` blob as a read-only SQLite database.

    Disk-backed stores are opened in place; other stores are copied into a
    temporary file first.
    """

    def open(self, blob_store: IBlobStore, key: str) -> SqlAlchemyFeedQueries:
        name = FeedArtifact.DATABASE.blob_name(key)
        temp_path: Path | None = None
        try:
            if not blob_store.exists(name):
                raise QueryEngineUnavailable(f"Relational blob missing: {name}")

            path = blob_store.local_path(name)
            if path is None:
                temp_path = self._materialize(blob_store.read(name), key)
                path = temp_path
        except BlobStoreError as exc:
            raise QueryEngineUnavailable(f"Cannot open {name}: {exc}") from exc

        engine = create_engine(sqlite_readonly_url(path))
        try:
            with engine.connect() as conn:
                # Forces SQLite to read the header; corrupt files fail here.
                conn.execute(text("SELECT count(*) FROM sqlite_master")).scalar()
        except SQLAlchemyError as exc:
            engine.dispose()
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            raise QueryEngineUnavailable(f"Cannot open {name}: {exc}") from exc

        logger.debug("Opened relational blob %s at %s", name, path)
        return SqlAlchemyFeedQueries(engine=engine, temp_path=temp_path)

    def _materialize(self, data: bytes, key: str) -> Path:
        tmp_name: str | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f"{key}.", suffix=".db")
            with os.fdopen(fd, "wb") as fp:
                fp.write(data)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise QueryEngineUnavailable(
                f"Cannot materialize relational blob for {key}: {exc}"
            ) from exc
        return Path(tmp_name)
