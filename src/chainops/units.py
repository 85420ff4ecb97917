"""Exact conversion between human decimal strings and integer base units.

Scaling never goes through float: amounts are parsed as decimal strings and
rejected (not rounded) when they carry more precision than the token allows.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Union

from chainops.errors import InvalidAmountError, InvalidParameterError

NATIVE_DECIMALS = 18
MAX_DECIMALS = 255

_NUMERAL = re.compile(r"^([0-9]*)(?:\.([0-9]*))?$")
_SIGNED_NUMERAL = re.compile(r"^[+-]?[0-9]*(?:\.[0-9]*)?$")

Number = Union[str, int, float, Decimal]


def _check_decimals(decimals: int) -> None:
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        raise InvalidParameterError(f"Decimals must be an integer, got {decimals!r}")
    if not 0 <= decimals <= MAX_DECIMALS:
        raise InvalidParameterError(f"Decimals must be between 0 and {MAX_DECIMALS}, got {decimals}")


def to_base_units(amount: str, decimals: int) -> int:
    """Convert a human amount to integer base units.

    Args:
        amount: Non-negative decimal numeral, e.g. "10.5"
        decimals: Token decimals (0-255)

    Returns:
        amount * 10**decimals as an exact integer

    Raises:
        InvalidAmountError: If the numeral is malformed, negative, or has more
            fractional digits than decimals allows
    """
    _check_decimals(decimals)
    if not isinstance(amount, str):
        raise InvalidAmountError(f"Amount must be a decimal string, got {type(amount).__name__}")

    text = amount.strip()
    match = _NUMERAL.match(text)
    if not match or not (match.group(1) or match.group(2)):
        raise InvalidAmountError(f"Invalid amount: {amount!r}")

    whole = match.group(1) or "0"
    fraction = match.group(2) or ""
    if len(fraction) > decimals:
        raise InvalidAmountError(
            f"Amount {amount!r} has {len(fraction)} fractional digits, token allows {decimals}"
        )

    return int(whole) * 10**decimals + int(fraction.ljust(decimals, "0") or "0")


def to_human_units(base_amount: int, decimals: int) -> str:
    """Convert integer base units to a canonical decimal string.

    Trailing fractional zeros are dropped, so 10_000_000 at 6 decimals
    becomes "10".
    """
    _check_decimals(decimals)
    if isinstance(base_amount, bool) or not isinstance(base_amount, int):
        raise InvalidAmountError(f"Base amount must be an integer, got {base_amount!r}")

    sign = "-" if base_amount < 0 else ""
    whole, fraction = divmod(abs(base_amount), 10**decimals)
    if decimals == 0 or fraction == 0:
        return f"{sign}{whole}"
    digits = str(fraction).rjust(decimals, "0").rstrip("0")
    return f"{sign}{whole}.{digits}"


def canonical_amount(amount: str) -> str:
    """Normalise a decimal numeral the way to_human_units renders it."""
    match = _NUMERAL.match(amount.strip())
    if not match or not (match.group(1) or match.group(2)):
        raise InvalidAmountError(f"Invalid amount: {amount!r}")
    fraction = match.group(2) or ""
    return to_human_units(to_base_units(amount, len(fraction)), len(fraction))


def _to_decimal(value: Number) -> Decimal:
    """Parse a number; text must be a plain ASCII numeral."""
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, str):
        text = value.strip()
        if not _SIGNED_NUMERAL.match(text) or not any(c.isdigit() for c in text):
            raise ValueError(f"Not a plain numeral: {value!r}")
        return Decimal(text)
    return Decimal(str(value))


def parse_positive_amount(value: Number) -> Decimal:
    """Parse a finite, strictly positive amount.

    Raises:
        InvalidParameterError: On anything else
    """
    try:
        parsed = _to_decimal(value)
    except (InvalidOperation, ValueError):
        raise InvalidParameterError(f"Amount must be a positive number, got {value!r}")

    if not parsed.is_finite() or parsed <= 0:
        raise InvalidParameterError(f"Amount must be a positive number, got {value!r}")
    return parsed


def validate_slippage(value: Number) -> Decimal:
    """Parse a slippage percentage in [0, 100].

    Raises:
        InvalidParameterError: If not a number in range
    """
    try:
        parsed = _to_decimal(value)
    except (InvalidOperation, ValueError):
        raise InvalidParameterError(f"Slippage must be a number between 0 and 100, got {value!r}")

    if not parsed.is_finite() or parsed < 0 or parsed > 100:
        raise InvalidParameterError(f"Slippage must be a number between 0 and 100, got {value!r}")
    return parsed
