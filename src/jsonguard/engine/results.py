"""Validation errors reported for an instance."""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import jsonschema

TEMPLATE_PLACEHOLDERS = ("{path}", "{instance}", "{schema_path}", "{error}")


def to_json_pointer(parts: Iterable[Any]) -> str:
    """Render path components as an RFC 6901 JSON pointer ("" for the root)."""
    return "".join(
        "/" + str(part).replace("~", "~0").replace("/", "~1")
        for part in parts
    )


def render_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


@dataclass(frozen=True)
class ValidationError:
    """Represents one schema violation found in an instance."""
    instance_path: str
    schema_path: str
    instance: str
    message: str

    @classmethod
    def from_jsonschema(cls, error: jsonschema.ValidationError) -> "ValidationError":
        return cls(
            instance_path=to_json_pointer(error.absolute_path),
            schema_path=to_json_pointer(error.absolute_schema_path),
            instance=render_json(error.instance),
            message=error.message,
        )

    def __str__(self) -> str:
        return self.message

    def format(self, template: str | None = None) -> str:
        """Render with an output template, or the default message.

        The template may contain ``{path}``, ``{instance}``,
        ``{schema_path}`` and ``{error}``; each is replaced literally.
        """
        if template is None:
            return str(self)
        return (
            template
            .replace("{path}", self.instance_path)
            .replace("{instance}", self.instance)
            .replace("{schema_path}", self.schema_path)
            .replace("{error}", str(self))
        )

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON output."""
        return {
            "instancePath": self.instance_path,
            "schemaPath": self.schema_path,
            "instance": self.instance,
            "message": self.message,
        }


def format_error(error: ValidationError, template: str | None = None) -> str:
    return error.format(template)
