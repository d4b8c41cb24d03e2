"""Health check and service information endpoints."""
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.config.localization import SupportedLanguage
from app.config.schemas import resolve_schema_version
from app.core.config import settings, QualityConfig, CanvasConfig
from app.core.dependencies import get_cache_service_dep, get_request_language
from app.models.responses import (
    HealthData, DependencyStatus, HealthMetrics,
    SupportedFormatsData, UrlFormat, QualityTierInfo, FormatLimitations
)
from app.services import CacheService
from app.utils.response_helpers import ResponseHelper
from app.utils.validators import URLValidator

router = APIRouter(tags=["health"])

service_start_time = datetime.now()

# Identifier used in the supported-formats examples
EXAMPLE_VIDEO_ID = "dQw4w9WgXcQ"

@router.get("/")
async def root():
    """Root endpoint."""
    return {"message": "YouTube Thumbnail Studio is running"}

@router.get("/health")
async def health_check(cache_service: CacheService = Depends(get_cache_service_dep)):
    """
    Health check endpoint with dependency status and metrics
    """
    uptime = int((datetime.now() - service_start_time).total_seconds())

    if not settings.openai_api_key:
        openai_status = "not_configured"
    elif not settings.enable_style_analysis:
        openai_status = "disabled"
    else:
        openai_status = "healthy"

    health_data = HealthData(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.api_version,
        dependencies=DependencyStatus(openai=openai_status),
        metrics=HealthMetrics(
            uptime_seconds=uptime,
            cached_style_analyses=cache_service.get_stats()["total_items"]
        )
    )

    return JSONResponse(
        status_code=200,
        content=health_data.model_dump()
    )

@router.get("/supported-formats")
async def get_supported_formats(language: SupportedLanguage = Depends(get_request_language)):
    """
    Get accepted URL forms, quality tiers and generation limits
    """
    request_id = ResponseHelper.generate_request_id()

    url_formats = [
        UrlFormat(name=form, example=URLValidator.build_video_url(EXAMPLE_VIDEO_ID, form))
        for form in URLValidator.get_url_forms()
    ]

    quality_tiers = [
        QualityTierInfo(
            tier=tier,
            label=QualityConfig.get_label(tier, language.value),
            file_name=QualityConfig.get_file_name(tier),
            resolution=QualityConfig.get_resolution(tier)
        )
        for tier in QualityConfig.get_all_tiers()
    ]

    formats_data = SupportedFormatsData(
        url_formats=url_formats,
        quality_tiers=quality_tiers,
        style_schema_version=resolve_schema_version().value,
        limitations=FormatLimitations(
            max_upload_bytes=settings.max_upload_bytes,
            canvas_width=CanvasConfig.WIDTH,
            canvas_height=CanvasConfig.HEIGHT
        )
    )

    return ResponseHelper.create_success_response(formats_data.model_dump(), request_id)
