"""
Relative links between converted documents.

A link is computed from the position of the document being rendered
(``SourceContext``) to the file the target document was written to. When
the target exists only in the other language, the link crosses into that
language's tree.
"""

import re
from typing import Iterable, NamedTuple

from docset_to_md import keys
from docset_to_md.paths import (
    INDEX_FILENAME,
    framework_directory,
    language_directory,
    other_language,
    sanitize_filename,
)

DOC_URL_PATTERN = re.compile(r"/documentation/([^/#?]+)((?:/[^#?]*)?)")


class SourceContext(NamedTuple):
    """Position of the document currently being rendered."""
    language: str
    framework: str
    path_segments: tuple = ()

    @classmethod
    def from_request_key(cls, request_key: str) -> "SourceContext":
        return cls(
            language=keys.language_of(request_key),
            framework=keys.framework_of(request_key) or "",
            path_segments=tuple(keys.path_segments(request_key)),
        )

    @property
    def directories(self) -> list[str]:
        """Directories below the framework directory that hold the source file."""
        return [sanitize_filename(segment) for segment in self.path_segments[:-1]]


def normalize_url(url: str) -> str | None:
    """
    Reduce a documentation URL to a lower-cased ``/documentation/...`` path.

    ``doc://com.apple.uikit/documentation/UIKit/UIView#overview`` ->
    ``/documentation/uikit/uiview``.
    """
    index = url.find("/documentation/")
    if index < 0:
        return None
    path = re.split(r"[#?]", url[index:], maxsplit=1)[0]
    return path.rstrip("/").lower()


class LanguageAvailabilityIndex:
    """Which languages each documentation path was published in. Read-only once built."""

    def __init__(self, availability: dict[str, frozenset[str]] | None = None) -> None:
        self._availability = dict(availability or {})

    @classmethod
    def from_request_keys(cls, request_keys: Iterable[str]) -> "LanguageAvailabilityIndex":
        availability: dict[str, set[str]] = {}
        for request_key in request_keys:
            try:
                decoded = keys.decode(request_key)
            except keys.InvalidKeyFormat:
                continue
            path = normalize_url(decoded.canonical_path)
            if path is None:
                continue
            availability.setdefault(path, set()).add(decoded.language)
        return cls({path: frozenset(langs) for path, langs in availability.items()})

    def languages_for(self, url: str) -> frozenset[str] | None:
        path = normalize_url(url)
        if path is None:
            return None
        return self._availability.get(path)

    def __len__(self) -> int:
        return len(self._availability)

    def __contains__(self, url: str) -> bool:
        return self.languages_for(url) is not None


def is_external(url: str) -> bool:
    return url.startswith(("http://", "https://")) or ".html" in url


def parse_target_url(url: str) -> tuple[str, list[str]] | None:
    """Split a documentation URL into its framework and lower-cased path segments."""
    match = DOC_URL_PATTERN.search(url)
    if match is None:
        return None
    segments = [segment.lower() for segment in match.group(2).split("/") if segment]
    return match.group(1).lower(), segments


def _relative(up: int, parts: list[str]) -> str:
    prefix = "../" * up if up else "./"
    return prefix + "/".join(parts)


def resolve_link(
    target_url: str,
    target_title: str | None = None,
    context: SourceContext | None = None,
    index: LanguageAvailabilityIndex | None = None,
    capitalize_frameworks: bool = False,
) -> str | None:
    """
    Relative markdown path from the source document to ``target_url``.

    Returns None for external targets. Never raises: URLs that cannot be
    parsed fall back to ``./{title}.md``.
    """
    if not isinstance(target_url, str) or not target_url:
        return f"./{sanitize_filename(target_title or '')}.md"
    if is_external(target_url):
        return None

    parsed = parse_target_url(target_url)
    if parsed is None:
        return f"./{sanitize_filename(target_title or '')}.md"
    framework, segments = parsed

    if segments:
        filename = f"{sanitize_filename(segments[-1])}.md"
        target_dirs = [sanitize_filename(segment) for segment in segments[:-1]]
    else:
        filename = INDEX_FILENAME
        target_dirs = []

    if context is None:
        return _relative(0, target_dirs + [filename])

    target_language = context.language
    if index is not None:
        languages = index.languages_for(target_url)
        if languages and context.language not in languages:
            target_language = other_language(context.language)

    source_dirs = context.directories
    fw_dir = framework_directory(framework, capitalize_frameworks)

    if target_language != context.language:
        up = len(source_dirs) + 2
        return _relative(up, [language_directory(target_language), fw_dir] + target_dirs + [filename])

    if framework != context.framework.lower():
        up = len(source_dirs) + 1
        return _relative(up, [fw_dir] + target_dirs + [filename])

    common = 0
    for source_dir, target_dir in zip(source_dirs, target_dirs):
        if source_dir != target_dir:
            break
        common += 1
    up = len(source_dirs) - common
    return _relative(up, target_dirs[common:] + [filename])
