"""Check-digit validators for national taxpayer identifiers.

Covers the Russian INN (individual and legal entity variants) and the
Kazakhstan IIN. Each predicate returns False for anything that is not a
string of exactly the expected number of ASCII digits.
"""

ASCII_DIGITS = frozenset("0123456789")

RU_INN_INDIVIDUAL_WEIGHTS_11 = (7, 2, 4, 10, 3, 5, 9, 4, 6, 8, 0)
RU_INN_INDIVIDUAL_WEIGHTS_12 = (3, 7, 2, 4, 10, 3, 5, 9, 4, 6, 8)
RU_INN_LEGAL_ENTITY_WEIGHTS = (2, 4, 10, 3, 5, 9, 4, 6, 8)


def decode_digits(value: str, length: int) -> list[int] | None:
    """Decode exactly ``length`` ASCII digits, or None if ``value`` is not that."""
    if len(value) != length:
        return None
    if not all(ch in ASCII_DIGITS for ch in value):
        return None
    return [ord(ch) - ord("0") for ch in value]


def _weighted_sum(digits: list[int], weights: tuple[int, ...]) -> int:
    return sum(d * w for d, w in zip(digits, weights))


def ru_inn_individual_check_digits(digits: list[int]) -> tuple[int, int]:
    """Return the two check digits for the first 10 digits of an individual INN.

    ``digits`` may hold 10 or more digits; only the leading ones are weighted.
    """
    first = _weighted_sum(digits[:10], RU_INN_INDIVIDUAL_WEIGHTS_11) % 11 % 10
    head = list(digits[:10]) + [first]
    second = _weighted_sum(head, RU_INN_INDIVIDUAL_WEIGHTS_12) % 11 % 10
    return first, second


def ru_inn_legal_entity_check_digit(digits: list[int]) -> int:
    """Return the check digit for the first 9 digits of a legal entity INN."""
    return _weighted_sum(digits[:9], RU_INN_LEGAL_ENTITY_WEIGHTS) % 11 % 10


def kz_iin_control_value(digits: list[int]) -> int | None:
    """Return the IIN control digit for the first 11 digits.

    None means both weighting passes produced 10, so no digit can be valid.
    """
    control = sum(d * (i + 1) for i, d in enumerate(digits[:11])) % 11
    if control != 10:
        return control

    checksum = 0
    for i, d in enumerate(digits[:11]):
        weight = (i + 3) % 11
        if weight == 0:
            weight = 11
        checksum += weight * d

    control = checksum % 11
    if control == 10:
        return None
    return control


def is_ru_inn_individual(value: str) -> bool:
    """Validate a 12-digit INN of an individual."""
    if len(value) != 12 or value.startswith("00"):
        return False

    digits = decode_digits(value, 12)
    if digits is None:
        return False

    return (digits[10], digits[11]) == ru_inn_individual_check_digits(digits)


def is_ru_inn_legal_entity(value: str) -> bool:
    """Validate a 10-digit INN of a legal entity."""
    if len(value) != 10 or value.startswith("00"):
        return False

    digits = decode_digits(value, 10)
    if digits is None:
        return False

    return digits[9] == ru_inn_legal_entity_check_digit(digits)


def is_kz_iin(value: str) -> bool:
    """Validate a 12-digit Kazakhstan individual identification number."""
    if len(value) != 12 or len(set(value)) == 1:
        return False

    digits = decode_digits(value, 12)
    if digits is None:
        return False

    control = kz_iin_control_value(digits)
    return control is not None and digits[11] == control
