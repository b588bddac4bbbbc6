"""
Fetches documentation that is missing from a local docset.

Apple serves the same DocC JSON the docset embeds:
``ls/documentation/photos/phvideorequestoptions`` ->
``https://developer.apple.com/tutorials/data/documentation/photos/phvideorequestoptions.json``.
"""

import re
from typing import Any, NamedTuple

import requests

API_BASE_URL = "https://developer.apple.com/tutorials/data"

KEY_PATTERN = re.compile(r"^l[sc]/(.+)$")


class DownloadStats(NamedTuple):
    """Counters for remote retrieval."""
    attempted: int = 0
    successful: int = 0
    failed: int = 0
    cached: int = 0


def api_url(request_key: str) -> str | None:
    """Map a request key to its JSON URL, or None for keys without a language prefix."""
    match = KEY_PATTERN.match(request_key)
    if match is None:
        return None
    return f"{API_BASE_URL}/{match.group(1)}.json"


def is_document(data: Any) -> bool:
    """Minimal structural check for a DocC document."""
    return isinstance(data, dict) and ("metadata" in data or "schemaVersion" in data)


class RemoteFetcher:
    """
    Downloads DocC JSON documents by request key.

    Results, including misses, are memoized per request key so a key is
    requested at most once per run.
    """

    def __init__(self, timeout: float = 30.0, session: requests.Session | None = None) -> None:
        self.timeout = timeout
        self.session = session
        self._cache: dict[str, dict | None] = {}
        self._stats = DownloadStats()

    def _get(self, url: str) -> requests.Response:
        if self.session is not None:
            return self.session.get(url, timeout=self.timeout)
        return requests.get(url, timeout=self.timeout)

    def _count(self, **increments: int) -> None:
        fields = self._stats._asdict()
        for name, amount in increments.items():
            fields[name] += amount
        self._stats = DownloadStats(**fields)

    def fetch(self, request_key: str) -> dict | None:
        """Return the document for a request key, or None if it cannot be retrieved."""
        if request_key in self._cache:
            self._count(cached=1)
            return self._cache[request_key]

        url = api_url(request_key)
        if url is None:
            self._count(failed=1)
            self._cache[request_key] = None
            return None

        self._count(attempted=1)
        try:
            resp = self._get(url)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError):
            data = None

        if not is_document(data):
            self._count(failed=1)
            self._cache[request_key] = None
            return None

        self._count(successful=1)
        self._cache[request_key] = data
        return data

    def is_cached(self, request_key: str) -> bool:
        return request_key in self._cache

    def download_count(self) -> int:
        """Number of documents successfully retrieved."""
        return sum(1 for doc in self._cache.values() if doc is not None)

    @property
    def stats(self) -> DownloadStats:
        return self._stats

    def reset_stats(self) -> None:
        self._stats = DownloadStats()

    def clear(self) -> None:
        self._cache.clear()
