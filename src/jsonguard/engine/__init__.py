"""Validator build orchestration and the host-facing engine."""

from .builder import CompiledValidator, build, create_format_checker, resolve_draft
from .engine import JsonSchemaEngine, parse_json
from .results import ValidationError, format_error, to_json_pointer

__all__ = [
    "CompiledValidator",
    "JsonSchemaEngine",
    "ValidationError",
    "build",
    "create_format_checker",
    "format_error",
    "parse_json",
    "resolve_draft",
    "to_json_pointer",
]
