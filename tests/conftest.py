"""Pytest configuration and fixtures for jsonguard tests."""

import json

import pytest

from jsonguard.config import EngineConfig
from jsonguard.engine import JsonSchemaEngine


@pytest.fixture
def engine():
    """Engine with default configuration."""
    return JsonSchemaEngine()


@pytest.fixture
def strict_engine():
    """Engine that rejects formats it does not know."""
    return JsonSchemaEngine(EngineConfig(ignore_unknown_formats=False))


@pytest.fixture
def inn_schema():
    """Object schema with an individual INN property."""
    return json.dumps({
        "type": "object",
        "properties": {
            "inn": {"type": "string", "format": "ru-inn-individual"}
        },
        "required": ["inn"]
    })


@pytest.fixture
def address_schema():
    """Registry document addressed by an http URI."""
    return {
        "$id": "https://example.com/schemas/address.json",
        "type": "object",
        "properties": {
            "city": {"type": "string"},
            "zip": {"type": "string", "pattern": "^[0-9]{6}$"}
        },
        "required": ["city"]
    }
