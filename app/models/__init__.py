"""Data models for the Thumbnail Studio Service."""
from .requests import ExtractRequest, AnalyzeThumbnailRequest
from .thumbnail import QualityTier, VideoSession, ThumbnailVariant, ExtractionResult, DownloadResult
from .style import (
    StyleSchemaVersion, ZoneStyleAttributes, PercentStyleAttributes,
    StyleAttributes, default_style
)
from .composition import CompositionRequest, StepResult, GeneratedImage, RemakeSession
from .responses import (
    ResponseMetadata, ErrorDetails, ErrorInfo, SuccessResponse, ErrorResponse,
    UrlFormat, QualityTierInfo, FormatLimitations, SupportedFormatsData,
    DependencyStatus, HealthMetrics, HealthData
)

__all__ = [
    "ExtractRequest", "AnalyzeThumbnailRequest",
    "QualityTier", "VideoSession", "ThumbnailVariant", "ExtractionResult", "DownloadResult",
    "StyleSchemaVersion", "ZoneStyleAttributes", "PercentStyleAttributes",
    "StyleAttributes", "default_style",
    "CompositionRequest", "StepResult", "GeneratedImage", "RemakeSession",
    "ResponseMetadata", "ErrorDetails", "ErrorInfo", "SuccessResponse", "ErrorResponse",
    "UrlFormat", "QualityTierInfo", "FormatLimitations", "SupportedFormatsData",
    "DependencyStatus", "HealthMetrics", "HealthData"
]
