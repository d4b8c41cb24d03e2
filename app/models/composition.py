"""Compositor request and result models."""
from typing import List, Optional
from pydantic import BaseModel, Field

from app.core.config import CanvasConfig
from .style import StyleAttributes, PercentStyleAttributes
from .thumbnail import VideoSession

class CompositionRequest(BaseModel):
    """Inputs for one remake generation."""
    session: VideoSession
    background_url: Optional[str] = None
    background_image: Optional[bytes] = None  # takes precedence over background_url
    user_image: Optional[bytes] = None
    caption: str = ""
    style: StyleAttributes = Field(default_factory=PercentStyleAttributes)
    width: int = CanvasConfig.WIDTH
    height: int = CanvasConfig.HEIGHT

class StepResult(BaseModel):
    """Outcome of one pipeline step."""
    name: str
    status: str  # completed, skipped
    duration_ms: int = 0
    detail: Optional[str] = None

class GeneratedImage(BaseModel):
    """Rendered remake thumbnail held in memory until downloaded."""
    video_id: str
    content: bytes
    width: int
    height: int
    media_type: str = "image/png"
    filename: str
    steps: List[StepResult] = Field(default_factory=list)

class RemakeSession(BaseModel):
    """Last generated image for a video session."""
    session: VideoSession
    generated_image: Optional[GeneratedImage] = None
