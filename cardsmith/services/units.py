"""
Unit conversion service.

Converts physical-length expressions ("2.5in", "63mm", "12 pt") into pixel
counts at a given DPI. Integers are already pixels and pass through. Bare
words such as "native", "deck" or "scale" are sentinels owned by the option
kind that accepts them and also pass through unconverted.
"""

import math
import re
from typing import Any

from cardsmith.models.failure import InvalidUnitError

# Units per inch for every supported suffix. "px" (or no suffix) is not
# converted at all.
UNITS_PER_INCH: dict[str, float] = {
    "in": 1.0,
    "cm": 2.54,
    "mm": 25.4,
    "pt": 72.0,
    "pc": 6.0,
}

PIXEL_UNITS: frozenset[str] = frozenset({"", "px"})

# "<number><unit>" with optional whitespace around and between. The number may
# carry an exponent, as Python prints very small and very large floats.
_LENGTH_PATTERN = re.compile(
    r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*([a-zA-Z]*)\s*$"
)

# Bare identifiers are sentinels, resolved later by the option kind
_SENTINEL_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def round_pixels(value: float) -> int:
    """Round to the nearest pixel, halves away from zero (36.5 -> 37, -0.5 -> -1)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def is_sentinel(value: Any) -> bool:
    """True if value is a bare word the unit layer leaves alone."""
    return isinstance(value, str) and bool(_SENTINEL_PATTERN.match(value.strip()))


def to_pixels(
    value: Any,
    dpi: float,
    *,
    key: str | None = None,
    allow_negative: bool = True,
) -> Any:
    """
    Convert a length expression to an integer pixel count.

    Args:
        value: Integer pixels, a float, a "<number><unit>" string, a
            sentinel word, or None
        dpi: Pixels per inch used for physical units
        key: Option key being converted (for error messages)
        allow_negative: Offsets may be negative; sizes may not

    Returns:
        The pixel count as an int. Sentinels and None are returned unchanged.

    Raises:
        InvalidUnitError: Unknown suffix, malformed string, non-finite
            number, or a negative number where negatives are not allowed
    """
    if value is None:
        return None

    if isinstance(value, bool):
        raise InvalidUnitError(key, value, "booleans are not lengths")

    if isinstance(value, int):
        pixels = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidUnitError(key, value, "length must be finite")
        pixels = round_pixels(value)
    elif isinstance(value, str):
        if is_sentinel(value):
            return value.strip()
        pixels = _parse_length(value, dpi, key)
    else:
        raise InvalidUnitError(key, value, f"unsupported type {type(value).__name__}")

    if pixels < 0 and not allow_negative:
        raise InvalidUnitError(key, value, "length must not be negative")

    return pixels


def _parse_length(text: str, dpi: float, key: str | None) -> int:
    match = _LENGTH_PATTERN.match(text)
    if match is None:
        raise InvalidUnitError(key, text, "expected '<number><unit>'")

    number = float(match.group(1))
    unit = match.group(2).lower()

    if not math.isfinite(number):
        raise InvalidUnitError(key, text, "length must be finite")

    if unit in PIXEL_UNITS:
        return round_pixels(number)

    units_per_inch = UNITS_PER_INCH.get(unit)
    if units_per_inch is None:
        known = ", ".join([*UNITS_PER_INCH, "px"])
        raise InvalidUnitError(key, text, f"unknown unit '{unit}' (known: {known})")

    inches = number / units_per_inch
    return round_pixels(inches * dpi)


def parse_dpi(value: Any) -> float:
    """
    Validate a DPI value.

    DPI must be a finite, strictly positive number. Unit strings are not
    accepted here since a DPI is not itself a length.

    Raises:
        InvalidUnitError: If the value is not a positive number
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidUnitError("dpi", value, "DPI must be a number")
    if not math.isfinite(value) or value <= 0:
        raise InvalidUnitError("dpi", value, "DPI must be positive")
    return value
