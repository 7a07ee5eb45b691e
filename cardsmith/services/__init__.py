"""
cardsmith services.

Range parsing, unit conversion and layout loading. The preset factory and
the script runner build decks and are imported from their own modules.
"""

from cardsmith.services.card_range import ALL, CardRange, resolve_range
from cardsmith.services.layout_registry import (
    EMPTY_ENTRY,
    LayoutRegistry,
    deep_merge,
    load_layout,
)
from cardsmith.services.units import is_sentinel, parse_dpi, to_pixels

__all__ = [
    "ALL",
    "EMPTY_ENTRY",
    "CardRange",
    "LayoutRegistry",
    "deep_merge",
    "is_sentinel",
    "load_layout",
    "parse_dpi",
    "resolve_range",
    "to_pixels",
]
