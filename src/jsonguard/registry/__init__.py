"""Local schema registry for resolving "$ref" across documents.

Resolution is purely in-memory: every document the main schema refers to
must be registered before the schema is compiled.
"""

from .store import RegistrySnapshot, SchemaRegistry, schema_id_of
from .uri import canonicalize_uri, is_valid_uri

__all__ = [
    "RegistrySnapshot",
    "SchemaRegistry",
    "canonicalize_uri",
    "is_valid_uri",
    "schema_id_of",
]
