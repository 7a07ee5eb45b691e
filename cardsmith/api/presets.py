"""
Preset API endpoints.

Read-only views of the preset registry: which card types exist, what they
default to, which vendors refine them, and the deck geometry a preset and
vendor resolve to.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from cardsmith.config import Conf
from cardsmith.deck import Deck
from cardsmith.models.failure import PresetError
from cardsmith.render.recording import RecordingSink
from cardsmith.services.preset_factory import PresetFactory, default_factory

router = APIRouter(prefix="/presets", tags=["presets"])


def get_factory() -> PresetFactory:
    """Preset factory dependency. Overridden in tests."""
    return default_factory()


FactoryDep = Annotated[PresetFactory, Depends(get_factory)]


class PresetResponse(BaseModel):
    """A preset and the vendors that refine it."""

    name: str
    description: str | None = None
    bag: dict[str, Any] = Field(default_factory=dict)
    vendors: list[str] = Field(default_factory=list)


class PresetListResponse(BaseModel):
    """Every registered preset."""

    presets: list[PresetResponse]
    total: int


class ResolvedPresetResponse(BaseModel):
    """Deck geometry a preset resolves to, in pixels."""

    name: str
    vendor: str | None = None
    width: int = Field(description="Card width including bleed on both sides")
    height: int = Field(description="Card height including bleed on both sides")
    dpi: float
    bleed: int
    bag: dict[str, Any] = Field(default_factory=dict)


def _preset_response(factory: PresetFactory, name: str) -> PresetResponse:
    return PresetResponse(
        name=name,
        description=factory.description(name),
        bag=factory.base_bag(name),
        vendors=factory.vendors_for(name),
    )


def _not_found(error: PresetError) -> HTTPException:
    return HTTPException(
        status_code=error.status_code,
        detail=error.to_response().model_dump(mode="json"),
    )


@router.get("", response_model=PresetListResponse)
async def list_presets(factory: FactoryDep) -> PresetListResponse:
    """List registered presets with their base bags and vendors."""
    presets = [_preset_response(factory, name) for name in factory.names()]
    return PresetListResponse(presets=presets, total=len(presets))


@router.get("/{name}", response_model=PresetResponse)
async def get_preset(name: str, factory: FactoryDep) -> PresetResponse:
    """
    Get one preset.

    Returns 404 if the card type has no preset.
    """
    try:
        return _preset_response(factory, name)
    except PresetError as e:
        raise _not_found(e) from e


@router.get("/{name}/resolve", response_model=ResolvedPresetResponse)
async def resolve_preset(
    name: str,
    factory: FactoryDep,
    vendor: Annotated[str | None, Query(description="Vendor whose spec to apply")] = None,
) -> ResolvedPresetResponse:
    """
    Resolve a preset (and optional vendor) to deck geometry.

    Builds an empty deck from the merged bag, so units, DPI and bleed go
    through the same conversion as a real deck. Returns 404 for an unknown
    preset or a vendor without a spec for it.
    """
    try:
        bag = factory.resolve(name, {"vendor": vendor})
    except PresetError as e:
        raise _not_found(e) from e

    deck = Deck(**bag, cards=0, sink=RecordingSink(), conf=Conf())
    return ResolvedPresetResponse(
        name=name,
        vendor=vendor,
        width=deck.width,
        height=deck.height,
        dpi=deck.dpi,
        bleed=deck.bleed,
        bag=bag,
    )
