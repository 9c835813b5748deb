"""In-memory registry of schema documents keyed by canonical URI."""

import copy
import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from referencing import Resource
from referencing.jsonschema import DRAFT202012
from referencing.exceptions import NoSuchResource

from jsonguard.errors import (
    InvalidUriError,
    PropertyIdMissingError,
    PropertyIdNotStringError,
    SchemaNotFoundError,
)
from jsonguard.registry.uri import canonicalize_uri

logger = logging.getLogger(__name__)


def schema_id_of(document: Any) -> str:
    """Return the canonical URI a schema document is registered under.

    Raises:
        PropertyIdMissingError: If the document has no "$id"
        PropertyIdNotStringError: If "$id" is not a string
        InvalidUriError: If "$id" is not an absolute URI
    """
    if not isinstance(document, dict) or "$id" not in document:
        raise PropertyIdMissingError()

    schema_id = document["$id"]
    if not isinstance(schema_id, str):
        raise PropertyIdNotStringError()

    return canonicalize_uri(schema_id)


class RegistrySnapshot(Mapping):
    """Immutable copy of the registry contents taken at one point in time."""

    def __init__(self, documents: Mapping[str, Any]):
        self._documents = MappingProxyType(copy.deepcopy(dict(documents)))

    def __getitem__(self, uri: str) -> Any:
        return self._documents[uri]

    def __iter__(self) -> Iterator[str]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def resolve(self, uri: str) -> Any:
        """Look up a document by URI text.

        Raises:
            SchemaNotFoundError: If no document is stored under the URI
        """
        key = canonicalize_uri(uri)
        try:
            return self._documents[key]
        except KeyError:
            raise SchemaNotFoundError(key) from None

    def retrieve(self, uri: str, default_specification=DRAFT202012) -> Resource:
        """Retrieve hook for ``referencing.Registry``.

        Raises:
            NoSuchResource: If the URI is invalid or not stored
        """
        try:
            document = self.resolve(uri)
        except (InvalidUriError, SchemaNotFoundError):
            raise NoSuchResource(ref=uri) from None

        logger.debug(f"Resolved external reference {uri}")
        return Resource.from_contents(document, default_specification=default_specification)


class SchemaRegistry:
    """Mutable URI → schema document store owned by one engine."""

    def __init__(self):
        self._documents: dict[str, Any] = {}

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, uri: object) -> bool:
        return isinstance(uri, str) and self.contains(uri)

    def register(self, document: Any) -> str:
        """Add or replace a schema under the canonical form of its "$id".

        Returns:
            The canonical URI the document was stored under
        """
        uri = schema_id_of(document)
        replaced = uri in self._documents
        self._documents[uri] = document
        logger.debug(f"{'Replaced' if replaced else 'Registered'} schema {uri}")
        return uri

    def unregister(self, uri: str) -> bool:
        """Remove the schema stored under ``uri``.

        Returns:
            True if a schema was removed, False if none was stored

        Raises:
            InvalidUriError: If ``uri`` is not an absolute URI
        """
        key = canonicalize_uri(uri)
        removed = self._documents.pop(key, None) is not None
        if removed:
            logger.debug(f"Unregistered schema {key}")
        return removed

    def clear(self) -> None:
        """Remove all schemas."""
        self._documents.clear()
        logger.debug("Cleared schema registry")

    def contains(self, uri: str) -> bool:
        """Check for a schema under ``uri``; invalid URIs are never present."""
        try:
            key = canonicalize_uri(uri)
        except InvalidUriError:
            return False
        return key in self._documents

    def resolve(self, uri: str) -> Any:
        """Look up a schema by URI.

        Raises:
            SchemaNotFoundError: If nothing is stored under ``uri``
        """
        key = canonicalize_uri(uri)
        try:
            return self._documents[key]
        except KeyError:
            raise SchemaNotFoundError(key) from None

    def uris(self) -> list[str]:
        """Registered canonical URIs in sorted order."""
        return sorted(self._documents)

    def snapshot(self) -> RegistrySnapshot:
        """Take an immutable copy of the current contents."""
        return RegistrySnapshot(self._documents)

    def export(self) -> dict[str, Any]:
        """Copy of the contents as ``{uri: document}`` for serialization."""
        return copy.deepcopy(self._documents)
