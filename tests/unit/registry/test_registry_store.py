"""Unit tests for the schema registry and its snapshots."""

import pytest
from referencing.exceptions import NoSuchResource

from jsonguard.errors import (
    InvalidUriError,
    PropertyIdMissingError,
    PropertyIdNotStringError,
    SchemaNotFoundError,
)
from jsonguard.registry import RegistrySnapshot, SchemaRegistry, schema_id_of


class TestSchemaIdOf:
    """Test extraction of the registry key from "$id"."""

    def test_canonical_id(self):
        assert schema_id_of({"$id": "HTTPS://Example.com/a.json#"}) == "https://example.com/a.json"

    def test_missing_id(self):
        with pytest.raises(PropertyIdMissingError):
            schema_id_of({"type": "string"})

    def test_non_object_document(self):
        with pytest.raises(PropertyIdMissingError):
            schema_id_of(["$id"])

    def test_id_not_string(self):
        with pytest.raises(PropertyIdNotStringError):
            schema_id_of({"$id": 5})

    def test_relative_id(self):
        with pytest.raises(InvalidUriError):
            schema_id_of({"$id": "relative/person.json"})


class TestSchemaRegistry:
    """Test registry operations."""

    def setup_method(self):
        self.registry = SchemaRegistry()

    def test_register_and_resolve(self):
        uri = self.registry.register({"$id": "urn:a", "type": "string"})
        assert uri == "urn:a"
        assert self.registry.resolve("urn:a") == {"$id": "urn:a", "type": "string"}
        assert len(self.registry) == 1

    def test_register_replaces_existing(self):
        self.registry.register({"$id": "urn:a", "type": "string"})
        self.registry.register({"$id": "urn:a", "type": "integer"})
        assert len(self.registry) == 1
        assert self.registry.resolve("urn:a")["type"] == "integer"

    def test_lookup_uses_canonical_form(self):
        self.registry.register({"$id": "https://Example.com/schemas/./a.json"})
        assert self.registry.contains("HTTPS://example.com/schemas/a.json#")
        assert "https://example.com/schemas/a.json" in self.registry
        assert self.registry.uris() == ["https://example.com/schemas/a.json"]

    def test_unregister(self):
        self.registry.register({"$id": "urn:a"})
        assert self.registry.unregister("urn:a") is True
        assert self.registry.unregister("urn:a") is False
        assert not self.registry.contains("urn:a")

    def test_unregister_invalid_uri(self):
        with pytest.raises(InvalidUriError):
            self.registry.unregister("not a uri")

    def test_contains_invalid_uri_is_false(self):
        assert self.registry.contains("not a uri") is False
        assert 42 not in self.registry

    def test_resolve_missing(self):
        with pytest.raises(SchemaNotFoundError) as exc_info:
            self.registry.resolve("urn:missing")
        assert exc_info.value.uri == "urn:missing"
        assert str(exc_info.value) == "Schema urn:missing not found"

    def test_clear(self):
        self.registry.register({"$id": "urn:a"})
        self.registry.register({"$id": "urn:b"})
        self.registry.clear()
        assert len(self.registry) == 0
        assert self.registry.uris() == []

    def test_failed_register_leaves_registry_unchanged(self):
        self.registry.register({"$id": "urn:a"})
        with pytest.raises(PropertyIdMissingError):
            self.registry.register({"type": "string"})
        assert self.registry.uris() == ["urn:a"]

    def test_export_is_a_copy(self):
        self.registry.register({"$id": "urn:a", "type": "string"})
        exported = self.registry.export()
        exported["urn:a"]["type"] = "integer"
        assert self.registry.resolve("urn:a")["type"] == "string"


class TestRegistrySnapshot:
    """Test snapshot isolation."""

    def test_snapshot_ignores_later_changes(self):
        registry = SchemaRegistry()
        document = {"$id": "urn:a", "type": "string"}
        registry.register(document)

        snapshot = registry.snapshot()
        registry.unregister("urn:a")
        registry.register({"$id": "urn:b"})
        document["type"] = "integer"

        assert list(snapshot) == ["urn:a"]
        assert snapshot.resolve("urn:a")["type"] == "string"
        assert "urn:b" not in snapshot

    def test_snapshot_is_read_only(self):
        snapshot = RegistrySnapshot({"urn:a": {}})
        with pytest.raises(TypeError):
            snapshot._documents["urn:b"] = {}

    def test_retrieve(self):
        snapshot = RegistrySnapshot({"urn:a": {"$id": "urn:a", "type": "string"}})
        resource = snapshot.retrieve("URN:a")
        assert resource.contents["type"] == "string"

    def test_retrieve_missing(self):
        snapshot = RegistrySnapshot({})
        with pytest.raises(NoSuchResource):
            snapshot.retrieve("urn:missing")
        with pytest.raises(NoSuchResource):
            snapshot.retrieve("relative.json")
