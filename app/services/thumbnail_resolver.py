"""Static thumbnail URL resolution."""
from typing import List, Optional, Union

from app.core.config import QualityConfig
from app.models.thumbnail import QualityTier, VideoSession, ThumbnailVariant, ExtractionResult


def resolve_thumbnail_url(video_id: str, tier: Union[QualityTier, str]) -> str:
    """Build the canonical static thumbnail URL for an identifier and tier."""
    file_name = QualityConfig.get_file_name(QualityTier(tier).value)
    return f"{QualityConfig.THUMBNAIL_HOST}/{video_id}/{file_name}.jpg"


def display_fallback_tier(tier: Union[QualityTier, str]) -> Optional[QualityTier]:
    """Tier to show when the given tier's image fails to load."""
    fallback = QualityConfig.DISPLAY_FALLBACKS.get(QualityTier(tier).value)
    return QualityTier(fallback) if fallback else None


class ThumbnailResolver:
    """Resolves every quality tier for a video session."""

    def resolve_variant(
        self,
        session: VideoSession,
        tier: Union[QualityTier, str],
        language: str = "ko"
    ) -> ThumbnailVariant:
        """Resolve one tier into a display-ready variant."""
        tier = QualityTier(tier)
        fallback = display_fallback_tier(tier)

        return ThumbnailVariant(
            tier=tier,
            label=QualityConfig.get_label(tier.value, language),
            resolution=QualityConfig.get_resolution(tier.value),
            url=resolve_thumbnail_url(session.video_id, tier),
            fallback_url=resolve_thumbnail_url(session.video_id, fallback) if fallback else None
        )

    def resolve_all(self, session: VideoSession, language: str = "ko") -> List[ThumbnailVariant]:
        """Resolve all tiers in display order."""
        return [
            self.resolve_variant(session, tier, language)
            for tier in QualityConfig.get_all_tiers()
        ]

    def build_extraction_result(self, session: VideoSession, language: str = "ko") -> ExtractionResult:
        """Bundle the session identifier with its resolved thumbnails."""
        return ExtractionResult(
            video_id=session.video_id,
            source_url=session.source_url or "",
            thumbnails=self.resolve_all(session, language)
        )
