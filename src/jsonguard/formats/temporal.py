"""Date and time string validators."""

from jsonguard.formats.identifiers import decode_digits


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_month(year: int, month: int) -> int:
    if month == 2:
        return 29 if is_leap_year(year) else 28
    if month in (4, 6, 9, 11):
        return 30
    return 31


def _number(text: str) -> int | None:
    digits = decode_digits(text, len(text))
    if not digits:
        return None
    value = 0
    for d in digits:
        value = value * 10 + d
    return value


def is_date(value: str) -> bool:
    """Validate a ``YYYY-MM-DD`` calendar date."""
    if len(value) != 10 or value[4] != "-" or value[7] != "-":
        return False

    year = _number(value[0:4])
    month = _number(value[5:7])
    day = _number(value[8:10])
    if year is None or month is None or day is None:
        return False

    if not 1 <= month <= 12:
        return False
    return 1 <= day <= days_in_month(year, month)


def is_partial_time(value: str) -> bool:
    """Validate ``HH:MM:SS`` with optional ``.`` and one or more fraction digits."""
    if len(value) < 8 or value[2] != ":" or value[5] != ":":
        return False

    hour = _number(value[0:2])
    minute = _number(value[3:5])
    second = _number(value[6:8])
    if hour is None or minute is None or second is None:
        return False
    if hour > 23 or minute > 59 or second > 59:
        return False

    rest = value[8:]
    if not rest:
        return True
    if rest[0] != ".":
        return False
    return _number(rest[1:]) is not None


def is_local_date_time(value: str) -> bool:
    """Validate a date-time without offset, e.g. ``2023-10-05T14:30:00.5``.

    The separator is the first ``T`` or ``t``.
    """
    separator = -1
    for i, ch in enumerate(value):
        if ch in "Tt":
            separator = i
            break
    if separator < 0:
        return False

    return is_date(value[:separator]) and is_partial_time(value[separator + 1:])
