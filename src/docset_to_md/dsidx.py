"""
Reader for the ``searchIndex`` table of docSet.dsidx.

Each row's ``path`` is a URL like
``dash-apple-api://load?request_key=ls/documentation/uikit/uiwindow#<meta>``;
the request key in it is what the content extractor looks documents up by.
"""

import re
from pathlib import Path
from typing import Iterator, NamedTuple
from urllib.parse import unquote

from docset_to_md.blobs import connect_readonly
from docset_to_md.keys import LANGUAGE_PREFIXES, PREFIX_FOR_LANGUAGE
from docset_to_md.links import LanguageAvailabilityIndex

REQUEST_KEY_PATTERN = re.compile(r"request_key=(l[sc]/[^#]+)")

# Entry types that get listed on framework index pages
TOP_LEVEL_TYPES = ("Class", "Struct", "Protocol", "Enum")


class IndexEntry(NamedTuple):
    id: int
    name: str
    type: str
    path: str
    request_key: str
    language: str


class EntryFilter(NamedTuple):
    """Filters for ``SearchIndex.iter_entries``; empty means no filter."""
    types: tuple = ()
    frameworks: tuple = ()
    languages: tuple = ()
    limit: int | None = None


def parse_request_key(path: str) -> str | None:
    match = REQUEST_KEY_PATTERN.search(path)
    if match is None:
        return None
    return unquote(match.group(1))


def parse_entry(row) -> IndexEntry | None:
    """Build an entry from a searchIndex row; rows without a request key are skipped."""
    request_key = parse_request_key(row["path"])
    if request_key is None:
        return None
    return IndexEntry(
        id=row["id"],
        name=row["name"],
        type=row["type"],
        path=row["path"],
        request_key=request_key,
        language=LANGUAGE_PREFIXES[request_key[:2]],
    )


def build_where(filters: EntryFilter | None) -> tuple[str, list]:
    if filters is None:
        return "", []

    conditions = []
    params: list = []

    if filters.types:
        conditions.append(f"type IN ({', '.join('?' for _ in filters.types)})")
        params.extend(filters.types)

    if filters.languages:
        conditions.append("(" + " OR ".join("path LIKE ?" for _ in filters.languages) + ")")
        params.extend(f"%request_key={PREFIX_FOR_LANGUAGE[lang]}/%" for lang in filters.languages)

    if filters.frameworks:
        conditions.append("(" + " OR ".join("path LIKE ?" for _ in filters.frameworks) + ")")
        params.extend(f"%/documentation/{fw.lower()}%" for fw in filters.frameworks)

    where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
    return where, params


class SearchIndex:
    """Read-only access to docSet.dsidx."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.conn = connect_readonly(db_path)

    def types(self) -> list[str]:
        rows = self.conn.execute("SELECT DISTINCT type FROM searchIndex ORDER BY type")
        return [row["type"] for row in rows]

    def frameworks(self) -> list[str]:
        rows = self.conn.execute(
            "SELECT DISTINCT name FROM searchIndex WHERE type = 'Framework' ORDER BY name"
        )
        return [row["name"] for row in rows]

    def count(self, filters: EntryFilter | None = None) -> int:
        where, params = build_where(filters)
        row = self.conn.execute(f"SELECT COUNT(*) AS count FROM searchIndex {where}", params).fetchone()
        return row["count"]

    def iter_entries(self, filters: EntryFilter | None = None) -> Iterator[IndexEntry]:
        """Yield entries ordered by type and name."""
        where, params = build_where(filters)
        sql = f"SELECT id, name, type, path FROM searchIndex {where} ORDER BY type, name"
        if filters is not None and filters.limit:
            sql += " LIMIT ?"
            params.append(filters.limit)

        for row in self.conn.execute(sql, params):
            entry = parse_entry(row)
            if entry is not None:
                yield entry

    def entries(self, filters: EntryFilter | None = None) -> list[IndexEntry]:
        return list(self.iter_entries(filters))

    def build_language_availability(self) -> LanguageAvailabilityIndex:
        """Map every documentation path in the index to the languages it exists in."""
        request_keys = (
            parse_request_key(row["path"])
            for row in self.conn.execute("SELECT path FROM searchIndex")
        )
        return LanguageAvailabilityIndex.from_request_keys(key for key in request_keys if key)

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "SearchIndex":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
