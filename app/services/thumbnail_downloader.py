"""Thumbnail download service with a best-effort fallback."""
import asyncio
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple, Union

import requests

from app.core.config import settings
from app.core.exceptions import ThumbnailFetchError
from app.models.thumbnail import QualityTier, VideoSession, DownloadResult
from app.services.thumbnail_resolver import resolve_thumbnail_url, display_fallback_tier
from app.utils.logging import CorrelatedLogger, MetricsLogger

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Safari/537.36"


def build_download_filename(prefix: str, video_id: str, suffix: str, ext: str) -> str:
    """Deterministic save name: {prefix}_{identifier}_{suffix}.{ext}"""
    return f"{prefix}_{video_id}_{suffix}.{ext}"


class ThumbnailDownloader:
    """Service for retrieving thumbnail images."""

    def __init__(self, timeout: Optional[int] = None):
        self.timeout = timeout or settings.request_timeout
        self.logger = CorrelatedLogger(__name__)
        self.metrics = MetricsLogger()

    async def fetch_bytes(self, url: str) -> Tuple[bytes, str]:
        """Fetch an image and return its bytes and content type.

        Raises:
            ThumbnailFetchError: On network errors, non-success status or an empty body
        """
        try:
            return await asyncio.to_thread(self._fetch_sync, url)
        except requests.RequestException as e:
            raise ThumbnailFetchError(url, str(e))

    def _fetch_sync(self, url: str) -> Tuple[bytes, str]:
        # The context manager releases the connection on every exit path
        with requests.get(url, timeout=self.timeout, headers={"User-Agent": USER_AGENT}) as response:
            response.raise_for_status()
            content = response.content
            if not content:
                raise ThumbnailFetchError(url, "Empty response body")
            content_type = response.headers.get("content-type", "image/jpeg")
            return content, content_type

    async def download(
        self,
        session: VideoSession,
        tier: Union[QualityTier, str],
        request_id: Optional[str] = None
    ) -> DownloadResult:
        """Download one tier; on failure return the raw URL to open instead."""
        tier = QualityTier(tier)
        url = resolve_thumbnail_url(session.video_id, tier)
        filename = build_download_filename("youtube_thumbnail", session.video_id, tier.value, "jpg")

        if request_id:
            self.logger.request_id = request_id

        start_time = datetime.now()

        try:
            content, content_type = await self.fetch_bytes(url)
        except ThumbnailFetchError as e:
            processing_time = int((datetime.now() - start_time).total_seconds() * 1000)
            self.logger.warning(f"Download failed for {url}, falling back to direct link: {e.message}")
            self.metrics.log_download_metrics(
                request_id or "-", session.video_id, tier.value,
                success=False, processing_time_ms=processing_time, fallback_used=True
            )
            return DownloadResult(
                video_id=session.video_id,
                tier=tier,
                url=url,
                filename=filename,
                fallback_used=True,
                fallback_url=url,
                error=e.details.get("reason")
            )

        processing_time = int((datetime.now() - start_time).total_seconds() * 1000)
        self.metrics.log_download_metrics(
            request_id or "-", session.video_id, tier.value,
            success=True, processing_time_ms=processing_time, size_bytes=len(content)
        )

        return DownloadResult(
            video_id=session.video_id,
            tier=tier,
            url=url,
            filename=filename,
            content=content,
            content_type=content_type
        )

    async def resolve_display_url(self, session: VideoSession, tier: Union[QualityTier, str]) -> str:
        """URL to display for a tier, substituting the fallback tier when the image is missing."""
        tier = QualityTier(tier)
        url = resolve_thumbnail_url(session.video_id, tier)
        fallback = display_fallback_tier(tier)
        if fallback is None:
            return url

        if await asyncio.to_thread(self._probe_sync, url):
            return url

        self.logger.info(f"{tier.value} thumbnail unavailable for {session.video_id}, showing {fallback.value}")
        return resolve_thumbnail_url(session.video_id, fallback)

    def _probe_sync(self, url: str) -> bool:
        try:
            with requests.head(url, timeout=self.timeout, allow_redirects=True) as response:
                return response.ok
        except requests.RequestException as e:
            self.logger.debug(f"Probe failed for {url}: {str(e)}")
            return False

    def save(self, result: DownloadResult, directory: Union[str, Path]) -> Path:
        """Write a successful download to a local directory under its deterministic name."""
        if not result.succeeded:
            raise ThumbnailFetchError(result.url, result.error or "Nothing to save")

        target_dir = Path(directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / result.filename
        target.write_bytes(result.content)

        self.logger.info(f"Saved {result.filename} ({len(result.content)} bytes)")
        return target
