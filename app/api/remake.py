"""Style analysis and thumbnail remake endpoints."""
import json
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse, Response

from app.config.localization import SupportedLanguage, get_localization_manager
from app.config.schemas import get_style_validator
from app.core.config import settings
from app.core.dependencies import (
    get_request_language, get_style_analyzer_dep, get_compositor_dep,
    get_thumbnail_downloader, get_remake_sessions
)
from app.core.exceptions import ThumbnailStudioError, ValidationError
from app.models.composition import CompositionRequest, RemakeSession
from app.models.requests import AnalyzeThumbnailRequest
from app.models.thumbnail import QualityTier
from app.services import CacheService, StyleAnalyzer, ThumbnailCompositor, ThumbnailDownloader
from app.utils.logging import CorrelatedLogger
from app.utils.response_helpers import ResponseHelper
from app.utils.validators import URLValidator

# Create router
router = APIRouter(tags=["remake"])

logger = CorrelatedLogger(__name__)


@router.post("/analyze-thumbnail")
async def analyze_thumbnail(
    request: AnalyzeThumbnailRequest,
    language: SupportedLanguage = Depends(get_request_language),
    analyzer: StyleAnalyzer = Depends(get_style_analyzer_dep)
):
    """
    Analyze the caption style of a thumbnail.

    Answers ``{"success": true, "schema_version": ..., <style fields>}``. A
    missing or failing vision service still answers with the default style.
    """
    request_id = ResponseHelper.generate_request_id()

    if request.language:
        language = get_localization_manager().resolve_language(user_preference=request.language)

    if not request.thumbnail_url:
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": get_localization_manager().get_message("missing_thumbnail_url", language)
            }
        )

    style = await analyzer.analyze(
        request.thumbnail_url,
        request_id=request_id,
        language=language.value,
        schema_version=request.schema_version
    )

    return JSONResponse(content={"success": True, **style.model_dump(mode="json")})


@router.post("/remake")
async def remake_thumbnail(
    video_id: str = Form(...),
    caption: str = Form(""),
    style: Optional[str] = Form(None),
    background_url: Optional[str] = Form(None),
    user_image: Optional[UploadFile] = File(None),
    language: SupportedLanguage = Depends(get_request_language),
    analyzer: StyleAnalyzer = Depends(get_style_analyzer_dep),
    compositor: ThumbnailCompositor = Depends(get_compositor_dep),
    downloader: ThumbnailDownloader = Depends(get_thumbnail_downloader),
    sessions: CacheService = Depends(get_remake_sessions)
):
    """
    Generate a remade thumbnail and return it as a PNG attachment.

    The background is the video's thumbnail (maxres, or hq when maxres is
    missing) unless ``background_url`` is given. Without an explicit ``style``
    the background is analysed first.
    """
    request_id = ResponseHelper.generate_request_id()

    try:
        session = URLValidator.validate_identifier(video_id)
        user_image_bytes = await _read_upload(user_image, language)

        if not background_url:
            background_url = await downloader.resolve_display_url(session, QualityTier.MAXRES)

        if style:
            style_attributes = _parse_style(style)
        else:
            style_attributes = await analyzer.analyze(
                background_url, request_id=request_id, language=language.value
            )

        composition = CompositionRequest(
            session=session,
            background_url=background_url,
            user_image=user_image_bytes,
            caption=caption,
            style=style_attributes
        )

        remake_session = sessions.get(session.video_id) or RemakeSession(session=session)
        image = await compositor.generate(composition, remake_session, request_id)
        sessions.set(session.video_id, remake_session)

    except ThumbnailStudioError as e:
        return ResponseHelper.create_error_from_exception(e, request_id, language)

    logger.info(f"[{request_id}] Generated {image.filename} ({len(image.content)} bytes)")

    return Response(
        content=image.content,
        media_type=image.media_type,
        headers={"Content-Disposition": f'attachment; filename="{image.filename}"'}
    )


@router.get("/remake/{video_id}")
async def get_last_remake(
    video_id: str,
    language: SupportedLanguage = Depends(get_request_language),
    sessions: CacheService = Depends(get_remake_sessions)
):
    """Download the last image generated for a video."""
    request_id = ResponseHelper.generate_request_id()

    try:
        session = URLValidator.validate_identifier(video_id)
    except ThumbnailStudioError as e:
        return ResponseHelper.create_error_from_exception(e, request_id, language)

    remake_session = sessions.get(session.video_id)
    if remake_session is None or remake_session.generated_image is None:
        return ResponseHelper.create_error_response(
            error_code="NOT_FOUND",
            message=f"No generated thumbnail for {session.video_id}",
            status_code=404,
            request_id=request_id
        )

    image = remake_session.generated_image
    return Response(
        content=image.content,
        media_type=image.media_type,
        headers={"Content-Disposition": f'attachment; filename="{image.filename}"'}
    )


async def _read_upload(upload: Optional[UploadFile], language: SupportedLanguage) -> Optional[bytes]:
    """Read an optional upload, enforcing the configured size limit."""
    if upload is None:
        return None

    content = await upload.read()
    if not content:
        return None

    if len(content) > settings.max_upload_bytes:
        raise ValidationError(
            get_localization_manager().get_message("upload_too_large", language),
            {"reason": f"{len(content)} bytes exceeds {settings.max_upload_bytes}"}
        )
    return content


def _parse_style(raw_style: str):
    """Parse a style form field: an analysis response or a bare style record."""
    validator = get_style_validator()

    try:
        payload = json.loads(raw_style)
    except json.JSONDecodeError as e:
        logger.warning(f"Unparseable style field, using default style: {str(e)}")
        payload = None

    if isinstance(payload, dict) and "success" not in payload:
        return validator.normalize(payload, payload.get("schema_version"))
    return validator.from_service_payload(payload)
