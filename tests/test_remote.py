"""Tests for docset_to_md.remote module."""

import pytest
import requests

from docset_to_md import remote
from docset_to_md.remote import DownloadStats, RemoteFetcher


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, invalid_json: bool = False):
        self.status_code = status_code
        self.payload = payload
        self.invalid_json = invalid_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self.invalid_json:
            raise ValueError("No JSON object could be decoded")
        return self.payload


@pytest.fixture
def calls(monkeypatch):
    """Record requests.get calls and answer from a url -> response table."""
    responses: dict[str, FakeResponse] = {}
    seen: list[tuple[str, float]] = []

    def fake_get(url, timeout=None):
        seen.append((url, timeout))
        if url not in responses:
            raise requests.ConnectionError("offline")
        return responses[url]

    monkeypatch.setattr(remote.requests, "get", fake_get)
    return responses, seen


class TestApiUrl:
    """Tests for api_url function."""

    def test_swift_key(self):
        assert remote.api_url("ls/documentation/photos/phvideorequestoptions") == (
            "https://developer.apple.com/tutorials/data/documentation/photos/phvideorequestoptions.json"
        )

    def test_objc_key(self):
        assert remote.api_url("lc/documentation/uikit").endswith("/documentation/uikit.json")

    def test_invalid_key(self):
        assert remote.api_url("documentation/uikit") is None


class TestRemoteFetcher:
    """Tests for RemoteFetcher."""

    def test_fetch_success(self, calls):
        responses, seen = calls
        doc = {"schemaVersion": {"major": 0}, "metadata": {"title": "UIKit"}}
        responses[remote.api_url("ls/documentation/uikit")] = FakeResponse(payload=doc)

        fetcher = RemoteFetcher(timeout=5)
        assert fetcher.fetch("ls/documentation/uikit") == doc
        assert seen[0][1] == 5
        assert fetcher.stats == DownloadStats(attempted=1, successful=1)
        assert fetcher.download_count() == 1

    def test_hits_are_memoized(self, calls):
        responses, seen = calls
        doc = {"metadata": {"title": "UIKit"}}
        responses[remote.api_url("ls/documentation/uikit")] = FakeResponse(payload=doc)

        fetcher = RemoteFetcher()
        fetcher.fetch("ls/documentation/uikit")
        fetcher.fetch("ls/documentation/uikit")
        assert len(seen) == 1
        assert fetcher.stats.cached == 1
        assert fetcher.is_cached("ls/documentation/uikit")

    def test_misses_are_memoized(self, calls):
        _, seen = calls
        fetcher = RemoteFetcher()
        assert fetcher.fetch("ls/documentation/nothing") is None
        assert fetcher.fetch("ls/documentation/nothing") is None
        assert len(seen) == 1
        assert fetcher.stats.failed == 1

    def test_http_error(self, calls):
        responses, _ = calls
        responses[remote.api_url("ls/documentation/gone")] = FakeResponse(status_code=404)
        assert RemoteFetcher().fetch("ls/documentation/gone") is None

    def test_invalid_json(self, calls):
        responses, _ = calls
        responses[remote.api_url("ls/documentation/bad")] = FakeResponse(invalid_json=True)
        assert RemoteFetcher().fetch("ls/documentation/bad") is None

    def test_not_a_document(self, calls):
        responses, _ = calls
        responses[remote.api_url("ls/documentation/odd")] = FakeResponse(payload={"kind": "symbol"})
        assert RemoteFetcher().fetch("ls/documentation/odd") is None

    def test_invalid_key_not_requested(self, calls):
        _, seen = calls
        assert RemoteFetcher().fetch("documentation/uikit") is None
        assert seen == []

    def test_reset_and_clear(self, calls):
        fetcher = RemoteFetcher()
        fetcher.fetch("ls/documentation/nothing")
        fetcher.reset_stats()
        fetcher.clear()
        assert fetcher.stats == DownloadStats()
        assert not fetcher.is_cached("ls/documentation/nothing")

    def test_uses_session(self):
        doc = {"metadata": {"title": "UIKit"}}

        class FakeSession:
            def __init__(self):
                self.urls = []

            def get(self, url, timeout=None):
                self.urls.append(url)
                return FakeResponse(payload=doc)

        session = FakeSession()
        fetcher = RemoteFetcher(session=session)
        assert fetcher.fetch("lc/documentation/uikit") == doc
        assert session.urls == [remote.api_url("lc/documentation/uikit")]
