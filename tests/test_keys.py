"""Tests for docset_to_md.keys module."""

import pytest

from docset_to_md import keys


# ============================================================================
# Decoding
# ============================================================================


class TestDecode:
    """Tests for decode function."""

    def test_swift_key(self):
        decoded = keys.decode("ls/documentation/uikit/uiwindow")
        assert decoded.language == "swift"
        assert decoded.canonical_path == "/documentation/uikit/uiwindow"

    def test_objc_key(self):
        assert keys.decode("lc/documentation/uikit").language == "objc"

    def test_lowercases_path(self):
        assert keys.decode("ls/documentation/UIKit/UIWindow").canonical_path == "/documentation/uikit/uiwindow"

    def test_unknown_prefix_raises(self):
        with pytest.raises(keys.InvalidKeyFormat):
            keys.decode("lx/documentation/uikit")

    def test_missing_separator_raises(self):
        with pytest.raises(keys.InvalidKeyFormat):
            keys.decode("ls")

    def test_invalid_key_is_value_error(self):
        with pytest.raises(ValueError):
            keys.decode("documentation/uikit")


# ============================================================================
# Tokens
# ============================================================================


class TestToken:
    """Tests for token function."""

    def test_golden_swift_token(self):
        assert keys.token("ls/documentation/uikit/uiwindow") == "lsnJNc_kUq"

    def test_golden_objc_token(self):
        assert keys.token("lc/documentation/uikit") == "lcIL-mFdwN"

    def test_length_and_prefix(self):
        value = keys.token("ls/documentation/uikit/uiwindow")
        assert value.startswith("ls")
        assert len(value) == 10

    def test_deterministic(self):
        assert keys.token("ls/documentation/foundation/nsstring") == keys.token(
            "ls/documentation/foundation/nsstring"
        )

    def test_case_insensitive(self):
        assert keys.token("ls/documentation/UIKit/UIWindow") == keys.token("ls/documentation/uikit/uiwindow")

    def test_language_changes_token(self):
        swift = keys.token("ls/documentation/uikit/uiwindow")
        objc = keys.token("lc/documentation/uikit/uiwindow")
        assert swift != objc
        assert swift[2:] == objc[2:]

    def test_no_padding_or_unsafe_chars(self):
        for i in range(200):
            value = keys.token(f"ls/documentation/framework{i}/symbol{i}")
            assert "=" not in value
            assert "+" not in value
            assert "/" not in value

    def test_no_collisions_in_large_corpus(self):
        request_keys = [
            f"{prefix}/documentation/framework{i % 50}/symbol{i}"
            for prefix in ("ls", "lc")
            for i in range(6000)
        ]
        tokens = {keys.token(key) for key in request_keys}
        assert len(tokens) == len(request_keys)

    def test_invalid_prefix_raises(self):
        with pytest.raises(keys.InvalidKeyFormat):
            keys.token("xx/documentation/uikit")


# ============================================================================
# Structure
# ============================================================================


class TestStructure:
    """Tests for framework_of, path_segments, doc_path and make_key."""

    def test_framework_of(self):
        assert keys.framework_of("ls/documentation/UIKit/uiwindow") == "uikit"

    def test_framework_of_root(self):
        assert keys.framework_of("ls/documentation/uikit") == "uikit"

    def test_framework_of_missing(self):
        assert keys.framework_of("ls/tutorials/swiftui") is None

    def test_path_segments(self):
        assert keys.path_segments("ls/documentation/uikit/UIWindow/rootViewController") == [
            "uiwindow",
            "rootviewcontroller",
        ]

    def test_path_segments_root(self):
        assert keys.path_segments("ls/documentation/uikit") == []

    def test_path_segments_strip_fragment(self):
        assert keys.path_segments("ls/documentation/uikit/uiwindow#overview") == ["uiwindow"]

    def test_doc_path(self):
        assert keys.doc_path("lc/documentation/uikit/uiwindow") == "/documentation/uikit/uiwindow"
        assert keys.doc_path("documentation/uikit") == "/documentation/uikit"

    def test_make_key(self):
        assert keys.make_key("objc", "/documentation/uikit") == "lc/documentation/uikit"
        assert keys.language_of(keys.make_key("swift", "/documentation/uikit")) == "swift"
