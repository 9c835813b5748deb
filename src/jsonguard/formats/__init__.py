"""Custom string formats for the JSON Schema ``format`` keyword.

Provides checksum validators for national identifiers, a calendar-aware
local date-time validator and a strict UUID validator.
"""

from .catalog import FORMAT_NAMES, FORMATS, FormatValidator, build_format_checker, get_format, is_uuid
from .identifiers import is_kz_iin, is_ru_inn_individual, is_ru_inn_legal_entity
from .temporal import is_local_date_time

__all__ = [
    "FORMATS",
    "FORMAT_NAMES",
    "FormatValidator",
    "build_format_checker",
    "get_format",
    "is_kz_iin",
    "is_local_date_time",
    "is_ru_inn_individual",
    "is_ru_inn_legal_entity",
    "is_uuid",
]
