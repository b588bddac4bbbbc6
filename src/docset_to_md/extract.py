"""
Recovers DocC JSON documents from a docset.

request key -> token -> (container, offset, length) -> decompressed container
-> JSON slice. A miss at any step returns None.
"""

import json
from pathlib import Path
from typing import Any

from docset_to_md import keys
from docset_to_md.blobs import CacheDb, ContainerStore
from docset_to_md.remote import RemoteFetcher, is_document

RESOURCES = Path("Contents") / "Resources"
DSIDX_PATH = RESOURCES / "docSet.dsidx"
DOCUMENTS_PATH = RESOURCES / "Documents"
CACHE_DB_PATH = DOCUMENTS_PATH / "cache.db"
FS_PATH = DOCUMENTS_PATH / "fs"


def is_docc_docset(docset_path: Path) -> bool:
    """True if the directory has the DocC layout: search index, cache.db and fs/."""
    return (
        (docset_path / DSIDX_PATH).is_file()
        and (docset_path / CACHE_DB_PATH).is_file()
        and (docset_path / FS_PATH).is_dir()
    )


def extract(container: bytes, offset: int, length: int) -> dict[str, Any] | None:
    """
    Parse the JSON document stored at ``[offset, offset + length)``.

    Slices that do not decode, are not JSON objects, or carry neither
    ``metadata`` nor ``schemaVersion`` yield None.
    """
    if offset < 0 or length <= 0 or offset + length > len(container):
        return None
    chunk = container[offset:offset + length]
    try:
        data = json.loads(chunk.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError):
        return None
    if not is_document(data):
        return None
    return data


class ContentExtractor:
    """Looks up and extracts documents by request key or token."""

    def __init__(
        self,
        cache_db: CacheDb,
        store: ContainerStore,
        fetcher: RemoteFetcher | None = None,
    ) -> None:
        self.cache_db = cache_db
        self.store = store
        self.fetcher = fetcher

    @classmethod
    def from_docset(cls, docset_path: Path, download: bool = False) -> "ContentExtractor":
        """Open the cache.db and fs/ directory of a DocC docset."""
        return cls(
            CacheDb(docset_path / CACHE_DB_PATH),
            ContainerStore(docset_path / FS_PATH),
            RemoteFetcher() if download else None,
        )

    def extract_by_token(self, lookup_token: str) -> dict[str, Any] | None:
        ref = self.cache_db.locate(lookup_token)
        if ref is None:
            return None
        container = self.store.materialize(ref.container_id)
        if container is None:
            return None
        return extract(container, ref.offset, ref.length)

    def extract_local(self, request_key: str) -> dict[str, Any] | None:
        """Extract from the docset only. Raises InvalidKeyFormat for bad keys."""
        return self.extract_by_token(keys.token(request_key))

    def extract_by_request_key(self, request_key: str) -> dict[str, Any] | None:
        """Extract locally, then fall back to the remote fetcher if one is configured."""
        data = self.extract_local(request_key)
        if data is None and self.fetcher is not None:
            data = self.fetcher.fetch(request_key)
        return data

    def has_content(self, request_key: str) -> bool:
        """True if the docset has a cache entry for the key."""
        try:
            return self.cache_db.has_ref(keys.token(request_key))
        except keys.InvalidKeyFormat:
            return False

    def download_count(self) -> int:
        if self.fetcher is None:
            return 0
        return self.fetcher.download_count()

    def clear_cache(self) -> None:
        """Drop decompressed containers."""
        self.store.clear()

    def close(self) -> None:
        self.store.clear()
        self.cache_db.close()

    def __enter__(self) -> "ContentExtractor":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
