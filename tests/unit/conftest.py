from __future__ import annotations

from pathlib import Path

import pytest

from feed_builders import build_gtfs_db


@pytest.fixture
def gtfs_db_bytes(tmp_path: Path) -> bytes:
    path = build_gtfs_db(
        tmp_path / "source.db",
        agencies=[
            {"agency_id": "VTA", "agency_name": "VTA"},
            {"agency_id": "CT", "agency_name": "Caltrain"},
        ],
        feed_info=[
            {
                "feed_publisher_name": "OnTime",
                "feed_publisher_url": "https://example.org",
                "feed_lang": "en",
                "feed_version": "2026-10-01",
            }
        ],
    )
    return path.read_bytes()
