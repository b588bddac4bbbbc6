"""Shared pytest fixtures for docset_to_md tests."""

import json
import sqlite3
from pathlib import Path
from urllib.parse import quote

import pytest

from docset_to_md import blobs, keys
from docset_to_md.extract import CACHE_DB_PATH, DSIDX_PATH, FS_PATH


@pytest.fixture(autouse=True)
def no_brotli(monkeypatch):
    """Containers written by the tests are raw JSON; never shell out to brotli."""
    monkeypatch.setattr(blobs, "find_brotli", lambda: None)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def uiwindow_json(fixtures_dir: Path) -> dict:
    """Load uiwindow.json fixture."""
    return json.loads((fixtures_dir / "uiwindow.json").read_text(encoding="utf-8"))


@pytest.fixture
def uikit_json(fixtures_dir: Path) -> dict:
    """Load uikit.json fixture (framework root)."""
    return json.loads((fixtures_dir / "uikit.json").read_text(encoding="utf-8"))


@pytest.fixture
def os_object_json(fixtures_dir: Path) -> dict:
    """Load os_object.json fixture."""
    return json.loads((fixtures_dir / "os_object.json").read_text(encoding="utf-8"))


def dsidx_path(request_key: str) -> str:
    """searchIndex.path value as Dash stores it."""
    return f"dash-apple-api://load?request_key={quote(request_key, safe='/')}#<dash_entry_language=swift>"


def build_docset(
    root: Path,
    documents: dict[str, dict],
    entries: list[tuple[str, str, str]],
    container_size: int = 2,
) -> Path:
    """
    Write a minimal DocC docset.

    documents: request key -> JSON document, packed ``container_size`` per
    fs/ container with some padding between them.
    entries: (name, type, request key) rows for searchIndex.
    """
    docset = root / "Test.docset"
    (docset / FS_PATH).mkdir(parents=True)

    cache = sqlite3.connect(docset / CACHE_DB_PATH)
    cache.execute("CREATE TABLE refs (uuid TEXT PRIMARY KEY, data_id INTEGER, offset INTEGER, length INTEGER)")
    containers: dict[int, bytes] = {}
    for i, (request_key, document) in enumerate(documents.items()):
        data_id = i // container_size + 1
        payload = json.dumps(document).encode("utf-8")
        buffer = containers.get(data_id, b"") + b"\x00\x00"
        cache.execute(
            "INSERT INTO refs VALUES (?, ?, ?, ?)",
            (keys.token(request_key), data_id, len(buffer), len(payload)),
        )
        containers[data_id] = buffer + payload
    cache.commit()
    cache.close()

    for data_id, buffer in containers.items():
        (docset / FS_PATH / str(data_id)).write_bytes(buffer)

    index = sqlite3.connect(docset / DSIDX_PATH)
    index.execute("CREATE TABLE searchIndex (id INTEGER PRIMARY KEY, name TEXT, type TEXT, path TEXT)")
    index.executemany(
        "INSERT INTO searchIndex (name, type, path) VALUES (?, ?, ?)",
        [(name, entry_type, dsidx_path(request_key)) for name, entry_type, request_key in entries],
    )
    index.commit()
    index.close()
    return docset


@pytest.fixture
def make_docset(tmp_path: Path):
    """Factory for docsets with custom documents and index rows."""
    def make(documents: dict[str, dict], entries: list[tuple[str, str, str]], **kwargs) -> Path:
        return build_docset(tmp_path, documents, entries, **kwargs)
    return make


@pytest.fixture
def docset(tmp_path: Path, uiwindow_json: dict, uikit_json: dict, os_object_json: dict) -> Path:
    """
    Docset with UIKit (Swift and Objective-C), one Swift os page and an
    Objective-C only os_object page.
    """
    os_object_doc = {
        "schemaVersion": {"major": 0, "minor": 3, "patch": 0},
        "identifier": {"url": "doc://com.apple.os/documentation/os/os_object", "interfaceLanguage": "occ"},
        "metadata": {"title": "os_object", "role": "symbol", "modules": [{"name": "os"}]},
        "references": {},
    }
    documents = {
        "ls/documentation/uikit": uikit_json,
        "ls/documentation/uikit/uiwindow": uiwindow_json,
        "lc/documentation/uikit/uiwindow": uiwindow_json,
        "ls/documentation/os/os_log": os_object_json,
        "lc/documentation/os/os_object": os_object_doc,
    }
    entries = [
        ("UIKit", "Framework", "ls/documentation/uikit"),
        ("UIWindow", "Class", "ls/documentation/uikit/uiwindow"),
        ("UIWindow", "Class", "lc/documentation/uikit/uiwindow"),
        ("UIView", "Class", "ls/documentation/uikit/uiview"),
        ("os_log", "Struct", "ls/documentation/os/os_log"),
        ("os_object", "Class", "lc/documentation/os/os_object"),
    ]
    return build_docset(tmp_path, documents, entries)


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Empty directory for conversion output."""
    path = tmp_path / "out"
    path.mkdir()
    return path
