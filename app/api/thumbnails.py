"""Identifier extraction and thumbnail download endpoints."""
from datetime import datetime
from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse, Response

from app.config.localization import SupportedLanguage, get_localization_manager
from app.core.dependencies import get_request_language, get_thumbnail_resolver, get_thumbnail_downloader
from app.core.exceptions import ThumbnailStudioError
from app.models.requests import ExtractRequest
from app.models.thumbnail import QualityTier
from app.services import ThumbnailResolver, ThumbnailDownloader
from app.utils.logging import CorrelatedLogger
from app.utils.response_helpers import ResponseHelper
from app.utils.validators import URLValidator

# Create router
router = APIRouter(tags=["thumbnails"])

logger = CorrelatedLogger(__name__)


@router.post("/extract")
async def extract_thumbnails(
    request: ExtractRequest,
    language: SupportedLanguage = Depends(get_request_language),
    resolver: ThumbnailResolver = Depends(get_thumbnail_resolver)
):
    """Extract the video identifier from a URL and list its thumbnails."""
    request_id = ResponseHelper.generate_request_id()
    start_time = datetime.now()

    if request.language:
        language = get_localization_manager().resolve_language(user_preference=request.language)

    try:
        session = URLValidator.parse_video_url(request.url)
    except ThumbnailStudioError as e:
        return ResponseHelper.create_error_from_exception(e, request_id, language)

    result = resolver.build_extraction_result(session, language.value)
    processing_time = int((datetime.now() - start_time).total_seconds() * 1000)

    return ResponseHelper.create_success_response(
        data=result.model_dump(mode="json"),
        request_id=request_id,
        processing_time_ms=processing_time
    )


@router.get("/thumbnails/{video_id}/{tier}/download")
async def download_thumbnail(
    video_id: str,
    tier: QualityTier,
    language: SupportedLanguage = Depends(get_request_language),
    downloader: ThumbnailDownloader = Depends(get_thumbnail_downloader)
):
    """
    Download one tier as an attachment.

    When the image cannot be fetched the client is redirected to the raw URL
    so it can be opened directly instead.
    """
    request_id = ResponseHelper.generate_request_id()

    try:
        session = URLValidator.validate_identifier(video_id)
    except ThumbnailStudioError as e:
        return ResponseHelper.create_error_from_exception(e, request_id, language)

    result = await downloader.download(session, tier, request_id)

    if not result.succeeded:
        logger.info(f"[{request_id}] Redirecting to {result.fallback_url}")
        return RedirectResponse(result.fallback_url, status_code=307)

    return Response(
        content=result.content,
        media_type=result.content_type,
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'}
    )


@router.get("/thumbnails/{video_id}/{tier}/display")
async def display_thumbnail(
    video_id: str,
    tier: QualityTier,
    language: SupportedLanguage = Depends(get_request_language),
    downloader: ThumbnailDownloader = Depends(get_thumbnail_downloader)
):
    """Redirect to a displayable image, substituting hq when maxres is missing."""
    request_id = ResponseHelper.generate_request_id()

    try:
        session = URLValidator.validate_identifier(video_id)
    except ThumbnailStudioError as e:
        return ResponseHelper.create_error_from_exception(e, request_id, language)

    url = await downloader.resolve_display_url(session, tier)
    return RedirectResponse(url, status_code=307)
