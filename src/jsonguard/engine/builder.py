"""Compilation of a schema document into an immutable validator.

The build takes a snapshot of the schema registry, wires it into a
``referencing`` registry used by ``jsonschema`` for "$ref" resolution and
checks every reachable reference up front, so a validator that builds
never hits a missing document while validating.
"""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urldefrag, urljoin

from jsonschema import FormatChecker
from jsonschema.exceptions import SchemaError
from jsonschema_specifications import REGISTRY as SPECIFICATIONS
from referencing import Registry, Specification
from referencing.exceptions import InvalidAnchor, NoSuchAnchor, PointerToNowhere, Unresolvable

from jsonguard.config import DEFAULT_DRAFT, Draft, EngineConfig
from jsonguard.engine.results import ValidationError, to_json_pointer
from jsonguard.errors import InvalidUriError, SchemaCompileError, SchemaNotFoundError
from jsonguard.formats import FORMATS, build_format_checker
from jsonguard.registry import RegistrySnapshot, SchemaRegistry, canonicalize_uri

logger = logging.getLogger(__name__)

# Keywords whose values are instance data rather than subschemas
_DATA_KEYWORDS = frozenset({"const", "default"})
_DATA_LIST_KEYWORDS = frozenset({"enum", "examples"})
# Keywords whose values map user-chosen names to subschemas
_NAME_MAP_KEYWORDS = frozenset({
    "properties", "patternProperties", "$defs", "definitions", "dependentSchemas", "dependencies",
})


@dataclass(frozen=True)
class CompiledValidator:
    """A compiled schema bound to the registry snapshot it was built with."""
    draft: Draft
    schema: Any
    registry: RegistrySnapshot
    format_checker: FormatChecker | None = field(repr=False)
    validator: Any = field(repr=False)

    def is_valid(self, instance: Any) -> bool:
        return self.validator.is_valid(instance)

    def iter_errors(self, instance: Any) -> Iterator[ValidationError]:
        """Yield violations in the compiler's traversal order."""
        for error in self.validator.iter_errors(instance):
            yield ValidationError.from_jsonschema(error)

    def errors(self, instance: Any) -> list[ValidationError]:
        return list(self.iter_errors(instance))


def resolve_draft(schema: Any, config: EngineConfig) -> Draft:
    """Pick the configured draft, else the declared one, else the default."""
    if config.draft is not None:
        return Draft.parse(config.draft)
    return Draft.detect(schema) or DEFAULT_DRAFT


def create_format_checker(draft: Draft, config: EngineConfig) -> FormatChecker | None:
    """Format checker for a build; None when formats are not asserted."""
    if not config.check_formats:
        return None
    formats = FORMATS if config.use_custom_formats else ()
    return build_format_checker(draft.validator_class.FORMAT_CHECKER, formats)


def build(schema: Any,
          config: EngineConfig | None = None,
          registry: SchemaRegistry | Mapping[str, Any] | None = None) -> CompiledValidator:
    """Compile ``schema`` into a validator.

    Args:
        schema: Parsed root schema document
        config: Engine options (defaults when None)
        registry: Schemas available to "$ref"; copied, never referenced live

    Returns:
        CompiledValidator

    Raises:
        UnknownDraftError: If the draft cannot be determined
        SchemaCompileError: If the schema is invalid for its draft
        SchemaNotFoundError: If a "$ref" names a document that is not registered
    """
    config = config or EngineConfig()
    draft = resolve_draft(schema, config)
    validator_class = draft.validator_class

    try:
        validator_class.check_schema(schema)
    except SchemaError as e:
        raise SchemaCompileError(to_json_pointer(e.absolute_path), e.message) from None

    if isinstance(registry, SchemaRegistry):
        snapshot = registry.snapshot()
    else:
        snapshot = RegistrySnapshot(registry or {})

    reference_registry = _reference_registry(snapshot, draft.specification)
    format_checker = create_format_checker(draft, config)
    check_unknown_formats = format_checker is not None and not config.ignore_unknown_formats

    _SchemaWalker(
        specification=draft.specification,
        registry=reference_registry,
        snapshot=snapshot,
        known_formats=set(format_checker.checkers) if check_unknown_formats else None,
    ).walk(schema)

    validator = validator_class(schema, registry=reference_registry, format_checker=format_checker)

    logger.debug(f"Compiled schema with draft {draft.display_name} "
                 f"and {len(snapshot)} registered documents")
    return CompiledValidator(
        draft=draft,
        schema=schema,
        registry=snapshot,
        format_checker=format_checker,
        validator=validator,
    )


def _reference_registry(snapshot: RegistrySnapshot, specification: Specification) -> Registry:
    def retrieve(uri: str):
        return snapshot.retrieve(uri, default_specification=specification)

    return Registry(retrieve=retrieve)


class _SchemaWalker:
    """Visits every schema object reachable from the root.

    Resolves each "$ref" against the registry and rejects unknown formats
    when ``known_formats`` is given.
    """

    def __init__(self, specification: Specification, registry: Registry,
                 snapshot: RegistrySnapshot, known_formats: set[str] | None):
        self.specification = specification
        self.snapshot = snapshot
        self.known_formats = known_formats
        self.registry = registry
        self._pending: list[tuple[str, Any]] = []
        self._seen: set[str] = set()

    def walk(self, schema: Any) -> None:
        root = self.specification.create_resource(schema)
        root_uri = root.id() or ""
        self.registry = SPECIFICATIONS.combine(self.registry).with_resource(root_uri, root).crawl()

        self._mark_seen(root_uri)
        self._visit_document(root_uri, schema, is_root=True)

        while self._pending:
            uri, document = self._pending.pop(0)
            self._visit_document(uri, document, is_root=False)

    def _mark_seen(self, uri: str) -> None:
        self._seen.add(uri)
        try:
            self._seen.add(canonicalize_uri(uri))
        except InvalidUriError:
            pass

    def _visit_document(self, uri: str, document: Any, is_root: bool) -> None:
        location = "" if is_root else uri
        for base, pointer, node in self._iter_nodes(document, uri, []):
            self._check_format(node, location, pointer)
            self._check_reference(node, base, location, pointer)

    def _iter_nodes(self, node: Any, base: str, pointer: list,
                    name_map: bool = False) -> Iterator[tuple[str, list, dict]]:
        if isinstance(node, dict) and name_map:
            # Keys are property or definition names; every value is a subschema
            for key, value in node.items():
                yield from self._iter_nodes(value, base, pointer + [key])
        elif isinstance(node, dict):
            node_id = self._id_of(node)
            if isinstance(node_id, str):
                base = urljoin(base, node_id)
            yield base, pointer, node
            for key, value in node.items():
                if key in _DATA_KEYWORDS:
                    continue
                if key in _DATA_LIST_KEYWORDS and isinstance(value, list):
                    continue
                yield from self._iter_nodes(value, base, pointer + [key], key in _NAME_MAP_KEYWORDS)
        elif isinstance(node, list):
            for index, item in enumerate(node):
                yield from self._iter_nodes(item, base, pointer + [index])

    def _id_of(self, node: dict) -> str | None:
        # an "id" keyword that is not a string is not an identifier
        if not all(isinstance(node.get(key, ""), str) for key in ("$id", "id")):
            return None
        return self.specification.id_of(node)

    def _check_format(self, node: dict, location: str, pointer: list) -> None:
        if self.known_formats is None:
            return
        name = node.get("format")
        if isinstance(name, str) and name not in self.known_formats:
            raise SchemaCompileError(
                _location(location, pointer + ["format"]),
                f"Unknown format: '{name}'. Adjust configuration to ignore unrecognized formats",
            )

    def _check_reference(self, node: dict, base: str, location: str, pointer: list) -> None:
        ref = node.get("$ref")
        if not isinstance(ref, str):
            return

        if ref.startswith("#"):
            target = base
        else:
            target = urldefrag(urljoin(base, ref)).url

        try:
            self.registry.resolver(base_uri=base).lookup(ref)
        except (PointerToNowhere, NoSuchAnchor, InvalidAnchor) as e:
            raise SchemaCompileError(_location(location, pointer + ["$ref"]), str(e)) from None
        except Unresolvable:
            raise SchemaNotFoundError(_canonical_or_raw(target)) from None

        self._queue_document(target)

    def _queue_document(self, target: str) -> None:
        try:
            key = canonicalize_uri(target)
        except InvalidUriError:
            return
        if key in self._seen or key not in self.snapshot:
            return
        self._mark_seen(key)
        self._pending.append((key, self.snapshot[key]))


def _location(document_uri: str, pointer: list) -> str:
    path = to_json_pointer(pointer)
    if document_uri:
        return f"{document_uri}#{path}"
    return path


def _canonical_or_raw(uri: str) -> str:
    try:
        return canonicalize_uri(uri)
    except InvalidUriError:
        return uri
