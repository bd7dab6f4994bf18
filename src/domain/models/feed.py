from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Iterable, Mapping

DatasetKey = str
ContentHash = str


class SyncStatus(str, Enum):
    UP_TO_DATE = "up_to_date"
    UPDATED = "updated"


@dataclass(frozen=True, slots=True)
class SyncResult:
    key: DatasetKey
    status: SyncStatus
    content_hash: ContentHash


def _text(value: Any) -> str | None:
    # Stored text is kept verbatim; only empty cells become None.
    if value is None or value == "":
        return None
    return value if isinstance(value, str) else str(value)


def _split_row(
    cls: type, row: Mapping[str, Any]
) -> tuple[dict[str, Any], dict[str, Any]]:
    known = {f.name for f in fields(cls)} - {"extra"}
    values = {k: _text(v) for k, v in row.items() if k in known}
    extra = {k: v for k, v in row.items() if k not in known}
    return values, extra


@dataclass(frozen=True, slots=True)
class FeedInfo:
    """Single row of GTFS feed_info.txt."""

    feed_publisher_name: str | None = None
    feed_publisher_url: str | None = None
    feed_lang: str | None = None
    default_lang: str | None = None
    feed_start_date: str | None = None
    feed_end_date: str | None = None
    feed_version: str | None = None
    feed_contact_email: str | None = None
    feed_contact_url: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_row(row: Mapping[str, Any]) -> "FeedInfo":
        values, extra = _split_row(FeedInfo, row)
        return FeedInfo(**values, extra=extra)


@dataclass(frozen=True, slots=True)
class Agency:
    """Row of GTFS agency.txt."""

    agency_id: str | None = None
    agency_name: str | None = None
    agency_url: str | None = None
    agency_timezone: str | None = None
    agency_lang: str | None = None
    agency_phone: str | None = None
    agency_fare_url: str | None = None
    agency_email: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_row(row: Mapping[str, Any]) -> "Agency":
        values, extra = _split_row(Agency, row)
        return Agency(**values, extra=extra)


@dataclass(frozen=True, slots=True)
class AgencyList:
    """Agencies sorted by name, plus an id index.

    Agencies without an ``agency_id`` are listed but not indexed.
    """

    list: tuple[Agency, ...]
    map: Mapping[str, Agency]

    @staticmethod
    def build(agencies: Iterable[Agency]) -> "AgencyList":
        ordered = tuple(sorted(agencies, key=lambda a: a.agency_name or ""))
        by_id = {a.agency_id: a for a in ordered if a.agency_id}
        return AgencyList(list=ordered, map=by_id)
