"""
Health check endpoint.

Liveness probe for the preset API.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from cardsmith.services.preset_factory import default_factory

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    presets: int | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness probe.

    Returns healthy if the service is running, with the number of bundled
    presets it can serve.
    """
    return HealthResponse(status="healthy", presets=len(default_factory().names()))
