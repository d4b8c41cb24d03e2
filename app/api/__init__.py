"""API module initialization."""
from .health import router as health_router
from .thumbnails import router as thumbnails_router
from .remake import router as remake_router

__all__ = ["health_router", "thumbnails_router", "remake_router"]
