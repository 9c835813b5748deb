"""Error taxonomy for jsonguard.

Every failure an engine operation can report is one of the classes below.
Library exceptions (``jsonschema``, ``referencing``, ``json``) are translated
into these at the boundary where they occur.
"""

from enum import Enum


class ParamType(str, Enum):
    """Expected parameter types used in conversion errors."""
    STRING = "string"
    BOOL = "bool"
    INT = "int"
    BLOB = "blob"
    JSON = "json"
    STRING_OR_BLOB = "string or blob"
    URI = "uri"


class JsonGuardError(Exception):
    """Base class for all jsonguard errors."""

    kind = "error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {"kind": self.kind, "message": self.message}


class SchemaCompileError(JsonGuardError):
    """The schema could not be compiled into a validator."""

    kind = "schema_compile"

    def __init__(self, path: str, message: str):
        self.path = path
        self.detail = message
        location = f"{path} " if path else ""
        super().__init__(f"Schema compilation error: {location}{message}")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["path"] = self.path
        return data


class SchemaNotInstalledError(JsonGuardError):
    kind = "schema_not_installed"

    def __init__(self):
        super().__init__("Schema not installed")


class PropertyIdMissingError(JsonGuardError):
    kind = "property_id_missing"

    def __init__(self):
        super().__init__("Property '$id' not found in the schema")


class PropertyIdNotStringError(JsonGuardError):
    kind = "property_id_not_string"

    def __init__(self):
        super().__init__("Property '$id' is not a string")


class InvalidUriError(JsonGuardError):
    kind = "invalid_uri"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid URI: {value}")


class SchemaNotFoundError(JsonGuardError):
    """A ``$ref`` points at a document that is not in the registry."""

    kind = "schema_not_found"

    def __init__(self, uri: str):
        self.uri = uri
        super().__init__(f"Schema {uri} not found")


class ParamConversionError(JsonGuardError):
    kind = "param_conversion"

    def __init__(self, index: int, expected: ParamType):
        self.index = index
        self.expected = expected
        super().__init__(f"Error converting parameter {index} to {expected.value}")


class PropertyConversionError(JsonGuardError):
    kind = "property_conversion"

    def __init__(self, expected: ParamType):
        self.expected = expected
        super().__init__(f"Error converting property value to {expected.value}")


class ParamNotFoundError(JsonGuardError):
    kind = "param_not_found"

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Internal component error. Expected parameter {index} not found")


class JsonParseError(JsonGuardError):
    kind = "json_parse"

    def __init__(self, message: str):
        self.detail = message
        super().__init__(f"JSON reading error: {message}")


class UnknownDraftError(JsonGuardError):
    kind = "unknown_draft"

    def __init__(self, value: object = None):
        self.value = value
        if value is None:
            super().__init__("Unknown draft")
        else:
            super().__init__(f"Unknown draft: {value}")
