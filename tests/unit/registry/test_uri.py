"""
Tests for canonical URI handling.

Textual variants of one location must map to the same registry key.
"""
import pytest

from jsonguard.errors import InvalidUriError
from jsonguard.registry import canonicalize_uri, is_valid_uri
from jsonguard.registry.uri import remove_dot_segments


class TestCanonicalizeUri:
    """Test canonical form of absolute URIs."""

    @pytest.mark.parametrize("value,expected", [
        ("urn:example:person", "urn:example:person"),
        ("https://example.com/schemas/a.json", "https://example.com/schemas/a.json"),
        ("HTTP://Example.COM/schemas/./a.json#", "http://example.com/schemas/a.json"),
        ("https://example.com", "https://example.com/"),
        ("https://example.com/a/b/../c.json", "https://example.com/a/c.json"),
        ("https://example.com/a.json#/definitions/x", "https://example.com/a.json"),
        ("https://example.com/a.json?v=1", "https://example.com/a.json?v=1"),
        ("https://User@Example.com:8080/a", "https://User@example.com:8080/a"),
        ("file:///tmp/schema.json", "file:///tmp/schema.json"),
    ])
    def test_canonical_form(self, value, expected):
        assert canonicalize_uri(value) == expected

    def test_variants_share_one_key(self):
        variants = [
            "https://example.com/schemas/person.json",
            "HTTPS://EXAMPLE.COM/schemas/person.json",
            "https://example.com/schemas/./person.json",
            "https://example.com/schemas/x/../person.json#",
        ]
        assert len({canonicalize_uri(v) for v in variants}) == 1

    def test_path_case_is_preserved(self):
        assert canonicalize_uri("https://example.com/Schemas/A.json") == "https://example.com/Schemas/A.json"

    @pytest.mark.parametrize("value", [
        "",
        "person.json",
        "/schemas/person.json",
        "#/definitions/x",
        "not a uri",
        "https://example.com/a b",
        "https://example.com:port/",
        "https://example.com/a#b#c",
        "1http://example.com/",
    ])
    def test_invalid_uris(self, value):
        with pytest.raises(InvalidUriError) as exc_info:
            canonicalize_uri(value)
        assert exc_info.value.value == value

    def test_non_string_rejected(self):
        with pytest.raises(InvalidUriError):
            canonicalize_uri(42)

    def test_is_valid_uri(self):
        assert is_valid_uri("urn:x")
        assert not is_valid_uri("relative/path")


class TestRemoveDotSegments:
    """Test RFC 3986 dot segment removal."""

    @pytest.mark.parametrize("path,expected", [
        ("/a/b/c", "/a/b/c"),
        ("/a/./b", "/a/b"),
        ("/a/b/../c", "/a/c"),
        ("/a/b/..", "/a/"),
        ("/a/b/.", "/a/b/"),
        ("/..", "/"),
        ("/../a", "/a"),
    ])
    def test_remove_dot_segments(self, path, expected):
        assert remove_dot_segments(path) == expected
