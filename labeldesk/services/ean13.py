"""EAN-13: 12 data digits plus a weighted check digit."""

import re

_NON_DIGITS = re.compile(r"[^0-9]")
_DIGITS_12 = re.compile(r"^[0-9]{12}$")
_DIGITS_13 = re.compile(r"^[0-9]{13}$")

EAN13_DATA_LENGTH = 12
EAN13_LENGTH = 13


def normalize_digits(value: str) -> str:
    """Drop every character that is not an ASCII digit."""
    return _NON_DIGITS.sub("", value)


def ean13_check_digit(d12: str) -> str | None:
    """
    Check digit for exactly 12 digits, or None for any other input.

    Digits at even 0-based positions weigh 1, odd positions weigh 3;
    the check digit brings the weighted sum up to a multiple of 10.
    """
    if not _DIGITS_12.match(d12):
        return None
    total = 0
    for i, ch in enumerate(d12):
        n = int(ch)
        total += n if i % 2 == 0 else n * 3
    return str((10 - total % 10) % 10)


def make_ean13(value: str) -> str | None:
    """
    Complete *value* into a 13-digit EAN.

    A value that already has exactly 13 digits is returned unchanged (its
    check digit is not re-verified). Otherwise the first 12 digits, padded
    on the right with zeros, get a computed check digit.
    """
    digits = normalize_digits(value)
    if _DIGITS_13.match(digits):
        return digits
    d12 = digits[:EAN13_DATA_LENGTH].ljust(EAN13_DATA_LENGTH, "0")
    check = ean13_check_digit(d12)
    if check is None:
        return None
    return f"{d12}{check}"


def is_valid_ean13(value: str) -> bool:
    """True when *value* is 13 digits whose last digit matches the computed check digit."""
    if not _DIGITS_13.match(value):
        return False
    return ean13_check_digit(value[:EAN13_DATA_LENGTH]) == value[-1]
