"""Configuration management for jsonguard using Pydantic models."""

import json
from enum import Enum
from pathlib import Path
from typing import Any

import referencing.jsonschema
from jsonschema import (
    Draft4Validator,
    Draft6Validator,
    Draft7Validator,
    Draft201909Validator,
    Draft202012Validator,
)
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from jsonguard.errors import UnknownDraftError

CONFIG_FILE_NAME = ".jsonguard.json"


class Draft(str, Enum):
    """Supported JSON Schema drafts."""
    DRAFT4 = "4"
    DRAFT6 = "6"
    DRAFT7 = "7"
    DRAFT201909 = "2019-09"
    DRAFT202012 = "2020-12"

    @property
    def display_name(self) -> str:
        return _DRAFT_DETAILS[self][0]

    @property
    def meta_schema_uri(self) -> str:
        return _DRAFT_DETAILS[self][1]

    @property
    def validator_class(self) -> type:
        return _DRAFT_DETAILS[self][2]

    @property
    def specification(self) -> referencing.Specification:
        return _DRAFT_DETAILS[self][3]

    @classmethod
    def parse(cls, value: Any) -> "Draft":
        """Parse a draft from its value ("7") or display name ("Draft7").

        Raises:
            UnknownDraftError: If the value names no supported draft
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for draft in cls:
                if value in (draft.value, draft.display_name):
                    return draft
        raise UnknownDraftError(value)

    @classmethod
    def detect(cls, schema: Any) -> "Draft | None":
        """Detect the draft declared by a schema's ``$schema`` keyword.

        Returns None when the schema declares nothing, leaving the choice
        to the compiler default.

        Raises:
            UnknownDraftError: If ``$schema`` is present but not recognised
        """
        if not isinstance(schema, dict) or "$schema" not in schema:
            return None

        declared = schema["$schema"]
        if not isinstance(declared, str):
            raise UnknownDraftError(declared)

        normalized = declared.rstrip("#")
        for draft in cls:
            if draft.meta_schema_uri == normalized:
                return draft
        raise UnknownDraftError(declared)


_DRAFT_DETAILS = {
    Draft.DRAFT4: (
        "Draft4",
        "http://json-schema.org/draft-04/schema",
        Draft4Validator,
        referencing.jsonschema.DRAFT4,
    ),
    Draft.DRAFT6: (
        "Draft6",
        "http://json-schema.org/draft-06/schema",
        Draft6Validator,
        referencing.jsonschema.DRAFT6,
    ),
    Draft.DRAFT7: (
        "Draft7",
        "http://json-schema.org/draft-07/schema",
        Draft7Validator,
        referencing.jsonschema.DRAFT7,
    ),
    Draft.DRAFT201909: (
        "Draft201909",
        "https://json-schema.org/draft/2019-09/schema",
        Draft201909Validator,
        referencing.jsonschema.DRAFT201909,
    ),
    Draft.DRAFT202012: (
        "Draft202012",
        "https://json-schema.org/draft/2020-12/schema",
        Draft202012Validator,
        referencing.jsonschema.DRAFT202012,
    ),
}

DEFAULT_DRAFT = Draft.DRAFT202012


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class EngineConfig(BaseModel):
    """Options applied when compiling the main schema."""
    use_custom_formats: bool = Field(alias="useCustomFormats", default=True)
    ignore_unknown_formats: bool = Field(alias="ignoreUnknownFormats", default=True)
    check_formats: bool = Field(alias="checkFormats", default=True)
    draft: Draft | None = None
    output_template: str | None = Field(alias="outputTemplate", default=None)

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)


class SchemasConfig(BaseModel):
    """Schemas preloaded into the registry before a build."""
    preload: list[str] = Field(default_factory=list)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class JsonGuardConfig(BaseModel):
    """Complete jsonguard configuration model."""
    engine: EngineConfig = Field(default_factory=EngineConfig)
    schemas: SchemasConfig = Field(default_factory=SchemasConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> JsonGuardConfig:
    """Load configuration from file with fallback to defaults.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    current directory and parents for .jsonguard.json

    Returns:
        JsonGuardConfig: Loaded and validated configuration

    Raises:
        ValueError: If configuration is invalid
    """
    if config_path is None:
        config_path = find_config_file()
    else:
        config_path = Path(config_path)

    if config_path and config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = json.load(f)
            return JsonGuardConfig(**config_data)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {config_path}: {e}")
        except (ValidationError, TypeError) as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}")

    return create_default_config()


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find .jsonguard.json by searching up the directory tree.

    Args:
        start_dir: Directory to start search from (default: current directory)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = Path(start_dir).resolve()

    while True:
        config_file = current / CONFIG_FILE_NAME
        if config_file.exists():
            return config_file

        parent = current.parent
        if parent == current:  # Reached root directory
            break
        current = parent

    return None


def create_default_config() -> JsonGuardConfig:
    """Create default configuration."""
    return JsonGuardConfig()
