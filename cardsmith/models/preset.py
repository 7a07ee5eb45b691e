"""
Preset models.

A preset is a named bundle of deck-construction defaults for a standard card
type (size, DPI, bleed). A vendor spec refines a preset with a print
vendor's requirements. Both are validated once when the preset files are
loaded and are immutable afterwards.

Any extra key is kept and forwarded to deck construction, so a preset can
also carry e.g. a default `layout`.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Keys describing a preset that are not deck-construction arguments
DESCRIPTIVE_KEYS: frozenset[str] = frozenset({"description"})


class PresetSpec(BaseModel):
    """Construction defaults for one card type."""

    model_config = ConfigDict(extra="allow", frozen=True)

    width: int | str
    height: int | str
    dpi: float | None = Field(default=None, gt=0)
    bleed: int | str | None = None
    description: str | None = None

    def bag(self) -> dict[str, Any]:
        """Deck-construction arguments of this preset, unset keys omitted."""
        return self.model_dump(exclude_none=True, exclude=set(DESCRIPTIVE_KEYS))


class VendorSpec(BaseModel):
    """A vendor's corrections for one card type. Every key is optional."""

    model_config = ConfigDict(extra="allow", frozen=True)

    width: int | str | None = None
    height: int | str | None = None
    dpi: float | None = Field(default=None, gt=0)
    bleed: int | str | None = None
    description: str | None = None

    def bag(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True, exclude=set(DESCRIPTIVE_KEYS))


class PresetCatalog(BaseModel):
    """
    Every registered preset and vendor spec.

    Attributes:
        presets: Card type -> construction defaults
        vendors: Vendor -> card type -> corrections
    """

    model_config = ConfigDict(frozen=True)

    presets: dict[str, PresetSpec] = Field(default_factory=dict)
    vendors: dict[str, dict[str, VendorSpec]] = Field(default_factory=dict)
