"""Thumbnail-related data models."""
from enum import Enum
from typing import Optional
from pydantic import BaseModel

class QualityTier(str, Enum):
    """Fixed thumbnail resolution classes."""
    MAXRES = "maxres"
    SD = "sd"
    HQ = "hq"
    MQ = "mq"

class VideoSession(BaseModel):
    """A validated video identifier scoped to one extraction session."""
    video_id: str
    source_url: Optional[str] = None

    model_config = {"frozen": True}

class ThumbnailVariant(BaseModel):
    """One resolved thumbnail for a quality tier."""
    tier: QualityTier
    label: str
    resolution: str
    url: str
    fallback_url: Optional[str] = None  # shown when the primary image fails to load

class ExtractionResult(BaseModel):
    """Identifier plus the resolved thumbnails for every tier."""
    video_id: str
    source_url: str
    thumbnails: list[ThumbnailVariant]

class DownloadResult(BaseModel):
    """Outcome of a single thumbnail download attempt."""
    video_id: str
    tier: QualityTier
    url: str
    filename: str
    content: Optional[bytes] = None
    content_type: str = "image/jpeg"
    fallback_used: bool = False
    fallback_url: Optional[str] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return not self.fallback_used and self.content is not None
