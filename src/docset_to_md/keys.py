"""
Request key handling for Apple DocC docsets.

A request key looks like ``ls/documentation/uikit/uiwindow``: a two-letter
language prefix followed by the documentation path. The docset's cache.db
is keyed by a short token derived from that path, so the token scheme here
has to match the one the docset was generated with.
"""

import base64
import hashlib
import re
from typing import NamedTuple

# Two-letter request key prefix -> language
LANGUAGE_PREFIXES = {
    "ls": "swift",
    "lc": "objc",
}

# Language -> request key prefix
PREFIX_FOR_LANGUAGE = {language: prefix for prefix, language in LANGUAGE_PREFIXES.items()}

FRAMEWORK_PATTERN = re.compile(r"documentation/([^/#?]+)")


class InvalidKeyFormat(ValueError):
    """Raised when a request key does not start with a known language prefix."""


class DecodedKey(NamedTuple):
    """Language and canonical documentation path of a request key."""
    language: str
    canonical_path: str


def decode(key: str) -> DecodedKey:
    """
    Split a request key into its language and canonical path.

    The canonical path keeps the leading slash and is lower-cased, e.g.
    ``ls/documentation/UIKit/UIWindow`` -> ``("swift", "/documentation/uikit/uiwindow")``.
    """
    prefix, sep, rest = key.partition("/")
    if not sep or prefix not in LANGUAGE_PREFIXES:
        raise InvalidKeyFormat(f"Invalid request key format: {key!r}")
    return DecodedKey(LANGUAGE_PREFIXES[prefix], "/" + rest.lower())


def token(key: str) -> str:
    """
    Compute the cache.db lookup token for a request key.

    SHA-1 of the canonical path, first 6 bytes, base64url without padding
    (8 characters), prefixed with the 2-character language prefix.
    """
    decoded = decode(key)
    digest = hashlib.sha1(decoded.canonical_path.encode("utf-8")).digest()
    suffix = base64.urlsafe_b64encode(digest[:6]).decode("ascii").rstrip("=")
    return PREFIX_FOR_LANGUAGE[decoded.language] + suffix


def language_of(key: str) -> str:
    """Return the language of a request key."""
    return decode(key).language


def framework_of(key: str) -> str | None:
    """Return the path segment right after ``documentation/``, or None."""
    match = FRAMEWORK_PATTERN.search(key)
    if match is None:
        return None
    return match.group(1).lower()


def doc_path(key: str) -> str:
    """
    Return the documentation path of a key without its language prefix.

    Keys without a prefix are accepted too:
    ``documentation/uikit`` -> ``/documentation/uikit``.
    """
    prefix, sep, rest = key.partition("/")
    if sep and prefix in LANGUAGE_PREFIXES:
        return "/" + rest
    return "/" + key.lstrip("/")


def path_segments(key: str) -> list[str]:
    """Return the lower-cased segments after the framework segment."""
    match = FRAMEWORK_PATTERN.search(key)
    if match is None:
        return []
    rest = key[match.end():].split("#", 1)[0]
    return [segment.lower() for segment in rest.split("/") if segment]


def make_key(language: str, path: str) -> str:
    """Build a request key from a language and a ``/documentation/...`` path."""
    return f"{PREFIX_FOR_LANGUAGE[language]}/{path.lstrip('/')}"
