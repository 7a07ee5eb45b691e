"""
Option resolution — the per-card option engine.

Each option kind (paint, geometry, transform, input file, ...) declares the
keys it recognizes and their built-in defaults. `OptionKind.load` turns a
raw option bag into a ResolvedOptions table with exactly one fully
converted value per card for every key.

=============================================================================
RESOLUTION ALGORITHM
=============================================================================

For every key of the kind:
1. Effective raw value, by precedence:
   explicit option > layout entry value > built-in default
2. Scalar values are broadcast to every card; per-card sequences must be
   exactly deck-size long (ArityMismatchError otherwise)
3. Per-element conversion: unit parsing for geometry keys, enumerated
   choices, kind-specific `convert_<key>` hooks
4. Kind-specific finalization across keys (`finalize`)

Resolution is eager. Any error aborts before the table is returned, so a
drawing command never renders a partially resolved range.

The caller's option bag and the layout entries are never modified.
"""

from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Any, ClassVar

from cardsmith.models.failure import ArityMismatchError, InvalidOptionError, InvalidUnitError
from cardsmith.models.option_value import PerCard, expand, is_per_card
from cardsmith.services.layout_registry import EMPTY_ENTRY
from cardsmith.services.units import to_pixels

# Keys every drawing command accepts that are not resolved by any kind
COMMAND_KEYS: frozenset[str] = frozenset({"range", "layout"})

LayoutEntries = Mapping[str, Any] | Sequence[Mapping[str, Any]]

Columns = dict[str, tuple[Any, ...]]


class OptionRow(Mapping[str, Any]):
    """
    The resolved options of one kind for one card.

    Behaves as a read-only mapping and also exposes keys as attributes:
    `box[3].width` is `box[3]["width"]`.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any]) -> None:
        object.__setattr__(self, "_values", dict(values))

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __getattr__(self, name: str) -> Any:
        if name == "_values":
            raise AttributeError(name)
        try:
            return self._values[name]
        except KeyError:
            raise AttributeError(name) from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("OptionRow is read-only")

    def __repr__(self) -> str:
        return f"OptionRow({self._values!r})"


class ResolvedOptions:
    """
    Per-card table of resolved values for one option kind.

    Indexed by card index: `table[i]` is the OptionRow for card i.
    `table.column(key)` is the deck-size tuple for a single key.
    """

    __slots__ = ("kind", "deck_size", "_columns")

    def __init__(self, kind: str, columns: Columns, deck_size: int) -> None:
        self.kind = kind
        self.deck_size = deck_size
        self._columns = dict(columns)

    def __getitem__(self, index: int) -> OptionRow:
        if not 0 <= index < self.deck_size:
            raise IndexError(f"card index {index} out of range for {self.kind}")
        return OptionRow({key: values[index] for key, values in self._columns.items()})

    def __len__(self) -> int:
        return self.deck_size

    def column(self, key: str) -> tuple[Any, ...]:
        """Resolved values of one key, index-aligned with the deck."""
        return self._columns[key]

    def keys(self) -> list[str]:
        return list(self._columns)

    def __repr__(self) -> str:
        return f"ResolvedOptions({self.kind}, {self.deck_size} cards, keys={self.keys()})"


def effective_raw(
    key: str,
    opts: Mapping[str, Any],
    layout: LayoutEntries,
    default: Any,
    deck_size: int,
) -> Any:
    """
    Pick the raw value for a key: explicit option > layout entry > default.

    `layout` is either one entry applying to every card or one entry per card.
    With per-card entries, a per-card sequence stored in an entry contributes
    only its own card's element.
    """
    if key in opts:
        return opts[key]

    if isinstance(layout, Mapping):
        return layout.get(key, default)

    if len(layout) != deck_size:
        raise ArityMismatchError("layout", deck_size, len(layout))

    values = []
    for index, entry in enumerate(layout):
        value = entry.get(key, default)
        if is_per_card(value):
            if len(value) != deck_size:
                raise ArityMismatchError(key, deck_size, len(value))
            value = value[index]
        values.append(value)
    return PerCard(tuple(values))


class OptionKind:
    """
    Base class for option kinds.

    Subclasses set:
        defaults: key -> built-in default (also the set of recognized keys)
        unit_keys: keys converted to pixels with the deck DPI
        size_keys: unit keys that must not be negative
        sentinels: unit key -> bare words the key accepts instead of a length
        choices: key -> allowed values

    and may define `convert_<key>(value, index, dpi)` hooks and `finalize`.
    """

    defaults: ClassVar[Mapping[str, Any]] = {}
    unit_keys: ClassVar[frozenset[str]] = frozenset()
    size_keys: ClassVar[frozenset[str]] = frozenset()
    sentinels: ClassVar[Mapping[str, frozenset[str]]] = {}
    choices: ClassVar[Mapping[str, frozenset[Any]]] = {}

    @classmethod
    def keys(cls) -> frozenset[str]:
        """Option keys this kind recognizes."""
        return frozenset(cls.defaults)

    def default_values(self) -> Mapping[str, Any]:
        """Built-in defaults. Kinds whose defaults come from configuration override this."""
        return self.defaults

    def load(
        self,
        opts: Mapping[str, Any],
        deck_size: int,
        layout: LayoutEntries = EMPTY_ENTRY,
        dpi: float = 300,
    ) -> ResolvedOptions:
        """
        Resolve every key of this kind for every card.

        Args:
            opts: Raw option bag of the drawing command
            deck_size: Number of cards in the deck
            layout: Layout entry (or one entry per card) supplying defaults
            dpi: Deck DPI for unit conversion

        Returns:
            ResolvedOptions with one value per card for every key

        Raises:
            ResolutionError: Any conversion or arity failure
        """
        columns: Columns = {}
        for key, default in self.default_values().items():
            raw = effective_raw(key, opts, layout, default, deck_size)
            columns[key] = expand(key, raw, deck_size, self._converter(key, dpi))

        columns = self.finalize(columns, deck_size, dpi)
        return ResolvedOptions(type(self).__name__, columns, deck_size)

    def _converter(self, key: str, dpi: float) -> Callable[[Any, int], Any]:
        hook = getattr(self, f"convert_{key}", None)

        def convert(value: Any, index: int) -> Any:
            if key in self.unit_keys:
                value = self._to_pixels(key, value, dpi)
            if key in self.choices and not _is_choice(value, self.choices[key]):
                allowed = ", ".join(sorted(str(c) for c in self.choices[key]))
                raise InvalidOptionError(key, value, f"expected one of: {allowed}")
            if hook is not None:
                value = hook(value, index, dpi)
            return value

        return convert

    def _to_pixels(self, key: str, value: Any, dpi: float) -> Any:
        # None is only a value for keys that are unset by default
        if value is None and self.default_values().get(key) is not None:
            raise InvalidUnitError(key, value, "a length is required")
        pixels = to_pixels(value, dpi, key=key, allow_negative=key not in self.size_keys)
        if isinstance(pixels, str):
            allowed = self.sentinels.get(key, frozenset())
            if pixels.lower() not in allowed:
                reason = (
                    f"expected a length or one of: {', '.join(sorted(allowed))}"
                    if allowed
                    else "expected a length such as 100, '1in' or '25mm'"
                )
                raise InvalidUnitError(key, value, reason)
            return pixels.lower()
        return pixels

    def finalize(self, columns: Columns, deck_size: int, dpi: float) -> Columns:
        """Cross-key post-processing. Default: none."""
        return columns


def resolve_color(key: str, value: Any, custom_colors: Mapping[str, str]) -> str | None:
    """
    Look a color up in the custom palette.

    Colors are opaque strings handed to the rendering sink ("#RRGGBB",
    "#RRGGBBAA", named colors). Names found in the palette are substituted.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidOptionError(key, value, "colors must be strings such as '#ff0000' or 'red'")
    return custom_colors.get(value, value)


def require_bool(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise InvalidOptionError(key, value, "expected true or false")
    return value


def require_number(key: str, value: Any, *, minimum: float | None = None) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidOptionError(key, value, "expected a number")
    if minimum is not None and value < minimum:
        raise InvalidOptionError(key, value, f"must be at least {minimum}")
    return value


def _is_choice(value: Any, allowed: frozenset[Any]) -> bool:
    try:
        return value in allowed
    except TypeError:
        return False
