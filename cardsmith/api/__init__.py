from cardsmith.api.health import router as health_router
from cardsmith.api.presets import router as presets_router

__all__ = [
    "health_router",
    "presets_router",
]
