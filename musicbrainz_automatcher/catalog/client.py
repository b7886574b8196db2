"""MusicBrainz WS/2 HTTP client.

Each method makes exactly one request and maps every failure to a
CatalogError subclass. Retrying is the job of ResilientLookup.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any

import requests

from musicbrainz_automatcher import __version__
from musicbrainz_automatcher.catalog.parser import (
    parse_artist,
    parse_artist_results,
    parse_recording_results,
)
from musicbrainz_automatcher.exceptions import (
    CatalogConnectionError,
    CatalogError,
    CatalogParseError,
    CatalogRateLimitError,
)
from musicbrainz_automatcher.models import Artist, SearchResult
from musicbrainz_automatcher.utils.names import escape_query

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"musicbrainz-automatcher/{__version__}"
DEFAULT_HOST = "musicbrainz.org"
DEFAULT_TIMEOUT = 15.0
SEARCH_LIMIT = 20


class _RateLimiter:
    """Keeps at least ``interval`` seconds between consecutive requests.

    MusicBrainz allows roughly one request per second per client. The
    limiter may be shared between threads; waiting callers are served
    one at a time.
    """

    def __init__(self, interval: float) -> None:
        self._interval = interval
        self._last_request = 0.0
        self._lock = threading.Lock()

    def wait(self) -> None:
        """Sleep if needed to respect the minimum interval."""
        with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_request
            if self._last_request > 0 and elapsed < self._interval:
                time.sleep(self._interval - elapsed)
            self._last_request = time.monotonic()


def build_track_query(artist: str, title: str) -> str:
    """Lucene query for recordings by an artist with a given title."""
    return f"artist:({escape_query(artist)}) recording:({escape_query(title)})"


def _base_url(host: str) -> str:
    if "://" in host:
        return host.rstrip("/")
    return f"https://{host}/ws/2"


class MusicBrainzClient:
    """HTTP client for the MusicBrainz web service.

    Args:
        host: Web service host, or a full base URL including scheme.
        timeout: Connect/read timeout in seconds.
        proxy: Optional proxy URL used for both http and https.
        rate_limit_interval: Minimum seconds between requests.
        user_agent: User-Agent header. MusicBrainz asks clients to
            include contact details here.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        timeout: float = DEFAULT_TIMEOUT,
        proxy: str | None = None,
        rate_limit_interval: float = 1.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.base_url = _base_url(host)
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"User-Agent": user_agent, "Accept": "application/json"})
        if proxy:
            self._session.proxies.update({"http": proxy, "https": proxy})
        self._limiter = _RateLimiter(rate_limit_interval)

    def _get_json(
        self,
        path: str,
        params: dict[str, Any],
        allow_missing: bool = False,
    ) -> tuple[dict[str, Any] | None, str]:
        """Make one GET request and decode the JSON body.

        Args:
            path: Path below the WS/2 base URL.
            params: Query parameters (``fmt=json`` is added).
            allow_missing: Return None instead of raising on HTTP 404.

        Returns:
            Tuple of (decoded JSON object or None, request URL).

        Raises:
            CatalogConnectionError: On network failure or timeout.
            CatalogRateLimitError: On HTTP 429 or 503.
            CatalogParseError: If the body isn't a JSON object.
            CatalogError: On any other HTTP error status.
        """
        url = f"{self.base_url}/{path}"
        self._limiter.wait()

        try:
            resp = self._session.get(url, params={**params, "fmt": "json"}, timeout=self.timeout)
        except requests.RequestException as e:
            raise CatalogConnectionError(f"Request to {url} failed: {e}") from e

        if allow_missing and resp.status_code == 404:
            return None, url
        if resp.status_code in (429, 503):
            raise CatalogRateLimitError(url, resp.status_code)
        try:
            resp.raise_for_status()
        except requests.HTTPError as e:
            raise CatalogError(f"Request to {url} failed: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise CatalogParseError(url, f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise CatalogParseError(url, "expected a JSON object")
        return data, url

    def search_tracks(self, query: str, limit: int = SEARCH_LIMIT) -> list[SearchResult]:
        """Search recordings with a raw Lucene query (see build_track_query).

        Returns:
            Results in the service's ranking order (highest score first).
        """
        logger.debug("Recording search: %s", query)
        data, url = self._get_json("recording", {"query": query, "limit": limit})
        return parse_recording_results(data, url)

    def search_artists(self, name: str, limit: int = SEARCH_LIMIT) -> list[SearchResult]:
        """Search artists by name (also matches aliases and sort names)."""
        logger.debug("Artist search: %s", name)
        data, url = self._get_json("artist", {"query": escape_query(name), "limit": limit})
        return parse_artist_results(data, url)

    def get_artist(self, artist_id: str) -> Artist | None:
        """Fetch an artist with its aliases, or None if the id is unknown."""
        data, url = self._get_json(f"artist/{artist_id}", {"inc": "aliases"}, allow_missing=True)
        if data is None:
            return None
        return parse_artist(data, url)
