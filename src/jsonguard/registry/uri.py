"""
Canonical URI handling for the schema registry.

Every URI that is stored, removed, looked up or requested by the
compiler passes through ``canonicalize_uri`` so that textual variants of
the same location map to one registry key.

Canonical form:
    - absolute URI (a scheme is required)
    - scheme and host lower-cased
    - dot segments removed from hierarchical paths
    - empty path of a URI with an authority becomes "/"
    - fragment dropped (documents are addressed without fragments)

Examples:
    HTTP://Example.COM/schemas/./a.json#  → http://example.com/schemas/a.json
    https://example.com                   → https://example.com/
    urn:example:person                    → urn:example:person
"""
from __future__ import annotations

import re
from urllib.parse import urlsplit, urlunsplit

from jsonguard.errors import InvalidUriError

_SCHEME_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*")
_FORBIDDEN_CHARACTERS = re.compile(r"[\x00-\x20\x7f<>\"{}|\\^`]")


def canonicalize_uri(value: str) -> str:
    """
    Convert URI text into its canonical registry key.

    Args:
        value: URI text

    Returns:
        Canonical URI string

    Raises:
        InvalidUriError: If the text is not an absolute URI
    """
    if not isinstance(value, str) or not value or _FORBIDDEN_CHARACTERS.search(value):
        raise InvalidUriError(str(value))

    try:
        parts = urlsplit(value)
        parts.port  # raises ValueError for a malformed port
    except ValueError:
        raise InvalidUriError(value) from None

    if not parts.scheme or not _SCHEME_PATTERN.fullmatch(parts.scheme):
        raise InvalidUriError(value)
    if value.count("#") > 1:
        raise InvalidUriError(value)

    netloc = _normalize_netloc(parts.netloc)
    path = parts.path
    if path.startswith("/"):
        path = remove_dot_segments(path)
    if netloc and not path:
        path = "/"

    return urlunsplit((parts.scheme.lower(), netloc, path, parts.query, ""))


def is_valid_uri(value: str) -> bool:
    """Check whether text can serve as a registry key."""
    try:
        canonicalize_uri(value)
    except InvalidUriError:
        return False
    return True


def remove_dot_segments(path: str) -> str:
    """Remove "." and ".." segments from an absolute path (RFC 3986, 5.2.4)."""
    if "." not in path:
        return path

    segments = path.split("/")
    resolved: list[str] = []
    for segment in segments:
        if segment == "..":
            if len(resolved) > 1:
                resolved.pop()
        elif segment != ".":
            resolved.append(segment)

    if segments[-1] in (".", ".."):
        resolved.append("")

    return "/".join(resolved)


def _normalize_netloc(netloc: str) -> str:
    """Lower-case the host part, leaving user info untouched."""
    if not netloc:
        return netloc
    userinfo, at, host = netloc.rpartition("@")
    return f"{userinfo}{at}{host.lower()}"
