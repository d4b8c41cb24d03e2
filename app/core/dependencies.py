"""Dependency injection setup for FastAPI."""
from functools import lru_cache
from typing import Optional
from fastapi import Depends, Header

from .config import settings
from app.config.localization import SupportedLanguage, get_localization_manager
from app.services import (
    CacheService, ThumbnailResolver, ThumbnailDownloader, StyleAnalyzer, ThumbnailCompositor
)

# Service instances cache
@lru_cache()
def get_thumbnail_resolver() -> ThumbnailResolver:
    """Get ThumbnailResolver service instance."""
    return ThumbnailResolver()

@lru_cache()
def get_thumbnail_downloader() -> ThumbnailDownloader:
    """Get ThumbnailDownloader service instance."""
    return ThumbnailDownloader()

@lru_cache()
def get_cache_service() -> CacheService:
    """Get CacheService instance."""
    return CacheService(default_ttl_hours=settings.cache_ttl_hours, namespace="style")

@lru_cache()
def get_style_analyzer() -> StyleAnalyzer:
    """Get StyleAnalyzer service instance."""
    return StyleAnalyzer(cache=get_cache_service())

@lru_cache()
def get_compositor() -> ThumbnailCompositor:
    """Get ThumbnailCompositor service instance."""
    return ThumbnailCompositor(downloader=get_thumbnail_downloader())

@lru_cache()
def get_remake_sessions() -> CacheService:
    """Last generated image per video identifier, held in memory with a TTL and size cap."""
    return CacheService(
        default_ttl_hours=settings.remake_ttl_hours,
        namespace="remake",
        max_items=settings.max_remake_sessions
    )

# Language negotiation
def get_request_language(
    accept_language: Optional[str] = Header(None)
) -> SupportedLanguage:
    """Resolve the response language from the Accept-Language header."""
    return get_localization_manager().resolve_language(accept_language=accept_language)

# Service dependencies
def get_style_analyzer_dep(
    analyzer: StyleAnalyzer = Depends(get_style_analyzer)
) -> StyleAnalyzer:
    """Dependency for StyleAnalyzer service."""
    return analyzer

def get_compositor_dep(
    compositor: ThumbnailCompositor = Depends(get_compositor)
) -> ThumbnailCompositor:
    """Dependency for ThumbnailCompositor service."""
    return compositor

def get_cache_service_dep(
    cache: CacheService = Depends(get_cache_service)
) -> CacheService:
    """Dependency for CacheService."""
    return cache
