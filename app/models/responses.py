"""Response models for the Thumbnail Studio Service."""
from typing import Any, Optional, List
from pydantic import BaseModel

class ResponseMetadata(BaseModel):
    """Standard response metadata."""
    request_id: str
    api_version: str = "1.0.0"
    timestamp: Optional[str] = None
    processing_time_ms: Optional[int] = None

class ErrorDetails(BaseModel):
    """Detailed error information."""
    url: Optional[str] = None
    reason: Optional[str] = None
    step: Optional[str] = None
    setting: Optional[str] = None

class ErrorInfo(BaseModel):
    """Error information structure."""
    code: str
    message: str
    details: Optional[ErrorDetails] = None

class SuccessResponse(BaseModel):
    """Standard success response."""
    success: bool = True
    data: Any
    metadata: ResponseMetadata

class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: ErrorInfo
    metadata: ResponseMetadata

class UrlFormat(BaseModel):
    """One accepted YouTube URL form."""
    name: str
    example: str

class QualityTierInfo(BaseModel):
    """Quality tier description."""
    tier: str
    label: str
    file_name: str
    resolution: str

class FormatLimitations(BaseModel):
    """Service usage limitations."""
    max_upload_bytes: int
    canvas_width: int
    canvas_height: int

class SupportedFormatsData(BaseModel):
    """Supported URL forms and quality tiers."""
    url_formats: List[UrlFormat]
    quality_tiers: List[QualityTierInfo]
    style_schema_version: str
    limitations: FormatLimitations

class DependencyStatus(BaseModel):
    """Service dependency status."""
    openai: str
    thumbnail_host: str = "unchecked"

class HealthMetrics(BaseModel):
    """Service health metrics."""
    uptime_seconds: int
    cached_style_analyses: int

class HealthData(BaseModel):
    """Complete health check response."""
    status: str
    timestamp: str
    version: str
    dependencies: DependencyStatus
    metrics: HealthMetrics
