"""The fixed catalog of custom string formats."""

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from jsonschema import FormatChecker

from jsonguard.formats.identifiers import is_kz_iin, is_ru_inn_individual, is_ru_inn_legal_entity
from jsonguard.formats.temporal import is_local_date_time

logger = logging.getLogger(__name__)

_UUID_PATTERN = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


def is_uuid(value: str) -> bool:
    """Validate the canonical hyphenated 8-4-4-4-12 UUID form."""
    return _UUID_PATTERN.fullmatch(value) is not None


@dataclass(frozen=True)
class FormatValidator:
    """A named string predicate pluggable into the ``format`` keyword."""
    name: str
    predicate: Callable[[str], bool]
    description: str = ""

    def __call__(self, instance: object) -> bool:
        # ``format`` only constrains strings
        if not isinstance(instance, str):
            return True
        return self.predicate(instance)


FORMATS: tuple[FormatValidator, ...] = (
    FormatValidator("ru-inn-individual", is_ru_inn_individual,
                    "Russian taxpayer number of an individual (12 digits)"),
    FormatValidator("ru-inn-legal-entity", is_ru_inn_legal_entity,
                    "Russian taxpayer number of a legal entity (10 digits)"),
    FormatValidator("kz-iin", is_kz_iin,
                    "Kazakhstan individual identification number (12 digits)"),
    FormatValidator("local-date-time", is_local_date_time,
                    "Date and time without offset, YYYY-MM-DDTHH:MM:SS[.fff]"),
    FormatValidator("uuid", is_uuid,
                    "Canonical hyphenated UUID"),
)

FORMAT_NAMES = tuple(f.name for f in FORMATS)


def get_format(name: str) -> FormatValidator | None:
    """Look up a catalog format by name."""
    for fmt in FORMATS:
        if fmt.name == name:
            return fmt
    return None


def build_format_checker(base: FormatChecker,
                         formats: Iterable[FormatValidator] = FORMATS) -> FormatChecker:
    """Create a new checker holding ``base``'s formats plus ``formats``.

    Catalog entries replace built-in checkers of the same name.
    """
    checker = FormatChecker(formats=())
    checker.checkers.update(base.checkers)
    for fmt in formats:
        checker.checks(fmt.name)(fmt)
    logger.debug(f"Format checker ready with {len(checker.checkers)} formats")
    return checker
