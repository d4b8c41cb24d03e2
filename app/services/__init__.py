"""Service layer modules for the Thumbnail Studio Service."""
from .cache_service import CacheService
from .thumbnail_resolver import ThumbnailResolver
from .thumbnail_downloader import ThumbnailDownloader
from .style_analyzer import StyleAnalyzer
from .compositor import ThumbnailCompositor

__all__ = [
    "CacheService", "ThumbnailResolver", "ThumbnailDownloader", "StyleAnalyzer", "ThumbnailCompositor"
]
