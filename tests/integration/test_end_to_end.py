"""
Integration tests over multi-document schema sets.

Covers cross-document "$ref" resolution through the registry, reference
cycles, drafts and custom formats applied inside referenced documents.
"""
import json

import pytest

from jsonguard.config import EngineConfig
from jsonguard.engine import JsonSchemaEngine
from jsonguard.errors import SchemaCompileError, SchemaNotFoundError


PERSON_SCHEMA = {
    "$id": "https://example.com/schemas/person.json",
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "inn": {"$ref": "identifiers.json#/$defs/inn"},
        "address": {"$ref": "address.json"}
    },
    "required": ["name"]
}

IDENTIFIERS_SCHEMA = {
    "$id": "https://example.com/schemas/identifiers.json",
    "$defs": {
        "inn": {"type": "string", "format": "ru-inn-individual"},
        "iin": {"type": "string", "format": "kz-iin"},
        "bin": {"type": "string", "format": "ru-inn-legal-entity"}
    }
}


class TestSchemaSet:
    """Validate against a main schema spread over several registered documents."""

    @pytest.fixture
    def engine(self, address_schema):
        engine = JsonSchemaEngine()
        for document in (PERSON_SCHEMA, IDENTIFIERS_SCHEMA, address_schema):
            engine.add_schema(json.dumps(document))
        engine.compile(json.dumps({
            "type": "array",
            "items": {"$ref": "https://example.com/schemas/person.json"}
        }))
        return engine

    def test_valid_document(self, engine):
        instance = [
            {"name": "Ivan", "inn": "197715976499", "address": {"city": "Moscow", "zip": "101000"}},
            {"name": "Aigerim"}
        ]
        assert engine.is_valid(json.dumps(instance)) is True

    def test_errors_from_referenced_documents(self, engine):
        instance = [
            {"name": "Ivan", "inn": "197715976490", "address": {"zip": "1010"}}
        ]
        errors = engine.iter_errors(json.dumps(instance))
        paths = sorted(error.instance_path for error in errors)
        assert paths == ["/0/address", "/0/address/zip", "/0/inn"]

    def test_template_rendering(self, engine):
        engine.config.output_template = "{path}|{instance}"
        _, errors_json = engine.validate('[{"name": "Ivan", "inn": "197715976490"}]')
        assert json.loads(errors_json) == ['/0/inn|"197715976490"']

    def test_case_variant_reference(self, address_schema):
        engine = JsonSchemaEngine()
        engine.add_schema(json.dumps(address_schema))
        engine.compile('{"$ref": "HTTPS://EXAMPLE.COM/schemas/./address.json"}')
        assert engine.is_valid('{"city": "Astana"}') is True
        assert engine.is_valid('{"zip": "010000"}') is False


class TestReferenceGraph:
    """Test build-time checks across the reference graph."""

    def test_cycle_between_documents(self, engine):
        engine.add_schema(json.dumps({
            "$id": "urn:node:a",
            "type": "object",
            "properties": {"next": {"$ref": "urn:node:b"}}
        }))
        engine.add_schema(json.dumps({
            "$id": "urn:node:b",
            "type": "object",
            "properties": {"next": {"$ref": "urn:node:a"}}
        }))
        engine.compile('{"$ref": "urn:node:a"}')

        assert engine.is_valid('{"next": {"next": {"next": {}}}}') is True
        assert engine.is_valid('{"next": {"next": 5}}') is False

    def test_missing_transitive_reference(self, engine):
        engine.add_schema('{"$id": "urn:a", "$ref": "urn:b"}')
        with pytest.raises(SchemaNotFoundError) as exc_info:
            engine.compile('{"$ref": "urn:a"}')
        assert exc_info.value.uri == "urn:b"

    def test_bad_pointer_in_registered_document(self, engine):
        engine.add_schema('{"$id": "urn:ids", "$defs": {"inn": {"type": "string"}}}')
        with pytest.raises(SchemaCompileError):
            engine.compile('{"$ref": "urn:ids#/$defs/missing"}')

    def test_self_reference(self, engine):
        engine.compile(json.dumps({
            "$id": "urn:tree",
            "type": "object",
            "properties": {"children": {"type": "array", "items": {"$ref": "urn:tree"}}}
        }))
        assert engine.is_valid('{"children": [{"children": []}]}') is True
        assert engine.is_valid('{"children": [1]}') is False


class TestDrafts:
    """Test schemas written for older drafts."""

    def test_draft4_schema(self, engine):
        engine.add_schema(json.dumps({
            "$schema": "http://json-schema.org/draft-04/schema#",
            "$id": "urn:legacy",
            "type": "object",
            "properties": {"bin": {"type": "string", "format": "ru-inn-legal-entity"}}
        }))
        engine.compile(json.dumps({
            "$schema": "http://json-schema.org/draft-04/schema#",
            "type": "object",
            "properties": {"id": {"type": "integer"}, "org": {"$ref": "urn:legacy"}}
        }))

        assert engine.compiled.draft.display_name == "Draft4"
        assert engine.is_valid('{"org": {"bin": "7406096779"}}') is True
        assert engine.is_valid('{"org": {"bin": "7406096770"}}') is False

    def test_draft7_definitions(self, engine):
        engine.compile(json.dumps({
            "$schema": "http://json-schema.org/draft-07/schema#",
            "definitions": {"stamp": {"type": "string", "format": "local-date-time"}},
            "properties": {"created": {"$ref": "#/definitions/stamp"}}
        }))
        assert engine.is_valid('{"created": "2024-02-29T10:00:00"}') is True
        assert engine.is_valid('{"created": "2023-02-29T10:00:00"}') is False

    def test_forced_draft_overrides_declaration(self):
        engine = JsonSchemaEngine(EngineConfig(draft="7"))
        compiled = engine.compile(json.dumps({
            "$schema": "https://json-schema.org/draft/2020-12/schema",
            "type": "string"
        }))
        assert compiled.draft.display_name == "Draft7"
