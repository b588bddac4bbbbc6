"""
Locates and decompresses the content containers of a DocC docset.

cache.db maps a lookup token to (data_id, offset, length). The JSON for a
document lives at that offset inside ``fs/<data_id>`` once the file has been
brotli-decompressed. Decompressed containers are kept in memory until the
caller clears them.
"""

import shutil
import sqlite3
import subprocess
from functools import partial
from pathlib import Path
from typing import Callable, Iterable, NamedTuple


class ContainerRef(NamedTuple):
    """Location of one document inside a decompressed container."""
    container_id: int
    offset: int
    length: int


def connect_readonly(db_path: Path) -> sqlite3.Connection:
    """Open a SQLite database read-only."""
    conn = sqlite3.connect(f"{db_path.resolve().as_uri()}?mode=ro", uri=True)
    conn.row_factory = sqlite3.Row
    return conn


class CacheDb:
    """Point lookups against the ``refs`` table of cache.db."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.conn = connect_readonly(db_path)

    def locate(self, lookup_token: str) -> ContainerRef | None:
        """Return where the document for a token lives, or None on a miss."""
        row = self.conn.execute(
            "SELECT data_id, offset, length FROM refs WHERE uuid = ?",
            (lookup_token,),
        ).fetchone()
        if row is None:
            return None
        return ContainerRef(row["data_id"], row["offset"], row["length"])

    def has_ref(self, lookup_token: str) -> bool:
        return self.locate(lookup_token) is not None

    def data_ids(self) -> list[int]:
        """All distinct container ids referenced by the cache."""
        rows = self.conn.execute("SELECT DISTINCT data_id FROM refs ORDER BY data_id")
        return [row["data_id"] for row in rows]

    def metadata(self, key: str) -> str | None:
        """Read a value from the optional ``metadata`` table."""
        try:
            row = self.conn.execute("SELECT value FROM metadata WHERE key = ?", (key,)).fetchone()
        except sqlite3.OperationalError:
            return None
        return row["value"] if row is not None else None

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "CacheDb":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def find_brotli() -> str | None:
    """Locate the brotli command line tool."""
    return shutil.which("brotli")


def brotli_decompress(path: Path, brotli_path: str | None) -> bytes | None:
    """
    Decompress a file with the brotli CLI.

    Returns None when the tool is unavailable or the file is not a brotli
    stream (embedded images are stored raw).
    """
    if brotli_path is None:
        return None
    result = subprocess.run(
        [brotli_path, "-d", "-c", str(path)],
        capture_output=True,
        check=False,
    )
    if result.returncode != 0:
        return None
    return result.stdout


class ContainerStore:
    """
    Memoized access to decompressed ``fs/`` containers.

    The cache grows without bound; call ``clear()`` between batches.
    """

    def __init__(
        self,
        fs_dir: Path,
        decompress: Callable[[Path], bytes | None] | None = None,
    ) -> None:
        self.fs_dir = fs_dir
        if decompress is None:
            decompress = partial(brotli_decompress, brotli_path=find_brotli())
        self._decompress = decompress
        self._cache: dict[int, bytes] = {}

    def container_path(self, container_id: int) -> Path:
        return self.fs_dir / str(container_id)

    def materialize(self, container_id: int) -> bytes | None:
        """
        Return the decompressed bytes of a container.

        The first call decompresses and caches; later calls hit the cache.
        A missing container file yields None. Read errors on a file that
        exists are not swallowed.
        """
        cached = self._cache.get(container_id)
        if cached is not None:
            return cached

        path = self.container_path(container_id)
        if not path.is_file():
            return None

        data = self._decompress(path)
        if data is None:
            data = path.read_bytes()
        self._cache[container_id] = data
        return data

    def preload(self, container_ids: Iterable[int]) -> int:
        """Warm the cache for several containers. Returns how many were loaded."""
        loaded = 0
        for container_id in container_ids:
            if container_id in self._cache:
                continue
            if self.materialize(container_id) is not None:
                loaded += 1
        return loaded

    def is_cached(self, container_id: int) -> bool:
        return container_id in self._cache

    def cache_size(self) -> int:
        """Total bytes held by the cache."""
        return sum(len(data) for data in self._cache.values())

    def clear(self) -> None:
        """Evict every cached container."""
        self._cache.clear()
