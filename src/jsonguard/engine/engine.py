"""Validation engine exposed to embedding hosts.

One ``JsonSchemaEngine`` owns a schema registry and at most one installed
validator. All operations are synchronous and serialized by a single
instance lock, so an engine can be shared between threads.
"""

import functools
import json
import logging
import threading
from typing import Any

from jsonguard import __version__
from jsonguard.config import Draft, EngineConfig
from jsonguard.engine.builder import CompiledValidator, build
from jsonguard.engine.results import ValidationError
from jsonguard.errors import JsonGuardError, JsonParseError, SchemaNotInstalledError
from jsonguard.registry import SchemaRegistry

logger = logging.getLogger(__name__)


def parse_json(text: str | bytes | bytearray) -> Any:
    """Parse JSON text (str or UTF-8 bytes).

    Raises:
        JsonParseError: If the text is not valid JSON
    """
    try:
        return json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise JsonParseError(str(e)) from None


def _operation(clears_error: bool = True):
    """Serialize an engine operation and remember its failure, if any."""
    def decorator(method):
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            with self._lock:
                try:
                    result = method(self, *args, **kwargs)
                except JsonGuardError as e:
                    self._last_error = e
                    raise
                if clears_error:
                    self._last_error = None
                return result
        return wrapper
    return decorator


class JsonSchemaEngine:
    """Registry, configuration and installed validator of one host object."""

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()
        self.registry = SchemaRegistry()
        self._compiled: CompiledValidator | None = None
        self._schema_text: str | None = None
        self._last_error: JsonGuardError | None = None
        self._last_validation_errors: str | None = None
        self._lock = threading.RLock()

    @property
    def version(self) -> str:
        return __version__

    @property
    def schema_text(self) -> str:
        """Raw text of the installed main schema, empty if none."""
        return self._schema_text or ""

    @property
    def compiled(self) -> CompiledValidator | None:
        return self._compiled

    @property
    def last_error(self) -> JsonGuardError | None:
        return self._last_error

    @property
    def draft_name(self) -> str:
        return self.config.draft.display_name if self.config.draft else ""

    @_operation()
    def set_draft(self, value: str | None) -> None:
        """Set the draft from text; None or "" restores auto-detection."""
        self.config.draft = Draft.parse(value) if value else None

    @_operation()
    def compile(self, schema_json: str | bytes, config: EngineConfig | None = None) -> CompiledValidator:
        """Build and install the main validator.

        The previously installed validator stays in place if the build fails.
        """
        config = config or self.config
        schema = parse_json(schema_json)
        try:
            compiled = build(schema, config, self.registry)
        except JsonGuardError as e:
            logger.warning(f"Schema build failed: {e}")
            raise

        self.config = config.model_copy()
        self._compiled = compiled
        if isinstance(schema_json, (bytes, bytearray)):
            schema_json = schema_json.decode("utf-8", errors="replace")
        self._schema_text = schema_json
        logger.info(f"Installed main schema ({compiled.draft.display_name})")
        return compiled

    @_operation()
    def clear_main_schema(self) -> None:
        self._compiled = None
        self._schema_text = None

    @_operation()
    def is_valid(self, instance_json: str | bytes) -> bool:
        compiled = self._require_compiled()
        return compiled.is_valid(parse_json(instance_json))

    @_operation()
    def iter_errors(self, instance_json: str | bytes) -> list[ValidationError]:
        compiled = self._require_compiled()
        return compiled.errors(parse_json(instance_json))

    @_operation()
    def validate(self, instance_json: str | bytes) -> tuple[bool, str]:
        """Validate an instance and render its errors.

        Returns:
            (is_valid, errors_json) where errors_json is a JSON array of
            strings rendered with the configured output template
        """
        compiled = self._require_compiled()
        instance = parse_json(instance_json)

        template = self.config.output_template
        errors = [error.format(template) for error in compiled.iter_errors(instance)]
        errors_json = json.dumps(errors, ensure_ascii=False)

        self._last_validation_errors = errors_json
        return not errors, errors_json

    @_operation()
    def add_schema(self, schema_json: str | bytes) -> str:
        """Register a schema document under its "$id"; returns the canonical URI."""
        return self.registry.register(parse_json(schema_json))

    @_operation()
    def remove_schema(self, uri: str) -> None:
        self.registry.unregister(uri)

    @_operation()
    def clear_schemas(self) -> None:
        self.registry.clear()

    @_operation()
    def has_schema(self, uri: str) -> bool:
        return self.registry.contains(uri)

    @_operation()
    def list_schemas(self) -> str:
        """JSON object mapping registered URIs to their documents."""
        return json.dumps(self.registry.export(), ensure_ascii=False)

    def get_last_error(self) -> str:
        """Message of the most recent failed operation, empty if none."""
        with self._lock:
            return str(self._last_error) if self._last_error else ""

    def get_last_validation_errors(self) -> str:
        """Errors JSON of the most recent ``validate`` call, empty if none."""
        with self._lock:
            return self._last_validation_errors or ""

    def record_error(self, error: JsonGuardError | None) -> None:
        """Set the error reported by ``get_last_error`` (None clears it)."""
        with self._lock:
            self._last_error = error

    def _require_compiled(self) -> CompiledValidator:
        if self._compiled is None:
            raise SchemaNotInstalledError()
        return self._compiled
