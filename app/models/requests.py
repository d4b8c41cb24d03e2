"""Request models for the Thumbnail Studio Service."""
from typing import Optional
from pydantic import BaseModel, Field

class ExtractRequest(BaseModel):
    """Request model for identifier extraction."""
    url: Optional[str] = None
    language: Optional[str] = None

class AnalyzeThumbnailRequest(BaseModel):
    """Request model for caption style analysis."""
    thumbnail_url: Optional[str] = Field(None, alias="thumbnailUrl")
    schema_version: Optional[str] = None
    language: Optional[str] = None

    model_config = {"populate_by_name": True}
