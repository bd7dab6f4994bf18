from __future__ import annotations

import os
from dataclasses import dataclass

import httpx

from src.app.ports.output import FeedArtifact, IFeedOrigin
from src.domain.exceptions import IncompleteTransfer, NetworkError

DEFAULT_ORIGIN_URL = "https://ontime-feeds.brianhuyvo.com"


def artifact_path(key: str, artifact: FeedArtifact) -> str:
    if artifact is FeedArtifact.HASH:
        return f"/hashes/{key}.hash"
    if artifact is FeedArtifact.DATABASE:
        return f"/feeds/{key}.db"
    return f"/geojson/{key}/{key}.geojson"


def parse_headers(raw: str | None) -> dict[str, str]:
    """Parse 'Key:Value;Key2:Value2' into a header dict."""

    headers: dict[str, str] = {}
    for part in (raw or "").split(";"):
        part = part.strip()
        if not part or ":" not in part:
            continue
        k, v = part.split(":", 1)
        k = k.strip()
        if k:
            headers[k] = v.strip()
    return headers


@dataclass(slots=True)
class HttpFeedOrigin(IFeedOrigin):
    """Fetches feed artifacts from the static feed origin over HTTP.

    Env vars:
      - FEED_ORIGIN_URL: base URL (default: https://ontime-feeds.brianhuyvo.com)
      - FEED_HTTP_HEADERS: optional headers, as 'Key:Value;Key2:Value2'
      - FEED_HTTP_TIMEOUT_S: request timeout (default 60)

    Notes:
      - Non-2xx responses and transport errors raise NetworkError.
      - A body shorter or longer than the advertised Content-Length raises
        IncompleteTransfer.
    """

    base_url: str | None = None
    headers_raw: str | None = None
    timeout_s: float = 60.0
    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        if self.base_url is None:
            self.base_url = os.getenv("FEED_ORIGIN_URL") or DEFAULT_ORIGIN_URL
        if self.headers_raw is None:
            self.headers_raw = os.getenv("FEED_HTTP_HEADERS")
        if os.getenv("FEED_HTTP_TIMEOUT_S"):
            self.timeout_s = float(os.environ["FEED_HTTP_TIMEOUT_S"])

    def url_for(self, key: str, artifact: FeedArtifact) -> str:
        return (self.base_url or DEFAULT_ORIGIN_URL).rstrip("/") + artifact_path(
            key, artifact
        )

    async def fetch(self, key: str, artifact: FeedArtifact) -> bytes:
        url = self.url_for(key, artifact)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s,
                transport=self.transport,
                follow_redirects=True,
            ) as client:
                resp = await client.get(url, headers=parse_headers(self.headers_raw))
                resp.raise_for_status()
                content = resp.content
        except httpx.HTTPStatusError as exc:
            raise NetworkError(
                f"Origin answered {exc.response.status_code} for {url}"
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"Origin unreachable for {url}: {exc}") from exc

        expected = resp.headers.get("content-length")
        encoded = resp.headers.get("content-encoding")
        if expected is not None and not encoded and int(expected) != len(content):
            raise IncompleteTransfer(
                artifact.value, f"received {len(content)} of {expected} bytes"
            )
        return content
