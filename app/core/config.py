"""
Configuration management for the Thumbnail Studio Service.
Centralizes environment variable handling and application settings.
"""
import os
from typing import Optional, List, Dict
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        # API Configuration
        self.api_title = "Thumbnail Studio Service"
        self.api_description = "A service for extracting, downloading and remaking YouTube thumbnails"
        self.api_version = "1.0.0"
        self.debug_mode = os.getenv("DEBUG_MODE", "false").lower() == "true"
        self.allowed_origins = ["*"]

        # External API Keys
        self.openai_api_key = os.getenv("OPENAI_API_KEY", "")
        self.vision_model = os.getenv("VISION_MODEL", "gpt-4o")

        # Style Analysis
        self.enable_style_analysis = os.getenv("ENABLE_STYLE_ANALYSIS", "true").lower() == "true"
        self.style_schema_version = os.getenv("STYLE_SCHEMA_VERSION", "percent").lower()
        self.default_language = os.getenv("DEFAULT_LANGUAGE", "ko")

        # Network
        self.request_timeout = int(os.getenv("REQUEST_TIMEOUT", "10"))  # seconds

        # Cache Configuration
        self.cache_enabled = os.getenv("CACHE_ENABLED", "true").lower() == "true"
        self.cache_ttl_hours = int(os.getenv("CACHE_TTL_HOURS", "24"))

        # Generation
        self.max_concurrent_generations = int(os.getenv("MAX_CONCURRENT_GENERATIONS", "1"))
        self.max_upload_bytes = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
        self.font_path: Optional[str] = os.getenv("FONT_PATH") or None
        self.remake_ttl_hours = int(os.getenv("REMAKE_TTL_HOURS", "1"))
        self.max_remake_sessions = int(os.getenv("MAX_REMAKE_SESSIONS", "50"))

        # Logging
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.log_format = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

class QualityConfig:
    """Static thumbnail quality tier table."""

    THUMBNAIL_HOST = "https://img.youtube.com/vi"

    QUALITY_TIERS = {
        "maxres": {
            "file_name": "maxresdefault",
            "resolution": "1280 x 720",
            "labels": {"ko": "최고 화질", "en": "Maximum quality"},
        },
        "sd": {
            "file_name": "sddefault",
            "resolution": "640 x 480",
            "labels": {"ko": "표준 화질", "en": "Standard quality"},
        },
        "hq": {
            "file_name": "hqdefault",
            "resolution": "480 x 360",
            "labels": {"ko": "고화질", "en": "High quality"},
        },
        "mq": {
            "file_name": "mqdefault",
            "resolution": "320 x 180",
            "labels": {"ko": "중간 화질", "en": "Medium quality"},
        },
    }

    # maxres thumbnails do not exist for every video
    DISPLAY_FALLBACKS = {"maxres": "hq"}

    @classmethod
    def get_file_name(cls, tier: str) -> str:
        """Get the static filename suffix for a tier."""
        return cls.QUALITY_TIERS[tier]["file_name"]

    @classmethod
    def get_label(cls, tier: str, language: str = "ko") -> str:
        """Get the human label for a tier in the given language."""
        labels = cls.QUALITY_TIERS[tier]["labels"]
        return labels.get(language, labels["en"])

    @classmethod
    def get_resolution(cls, tier: str) -> str:
        """Get the nominal resolution for a tier."""
        return cls.QUALITY_TIERS[tier]["resolution"]

    @classmethod
    def get_all_tiers(cls) -> List[str]:
        """Get all tier keys in display order."""
        return list(cls.QUALITY_TIERS.keys())

class CanvasConfig:
    """Fixed constants for the thumbnail compositor."""

    WIDTH = 1280
    HEIGHT = 720

    # Background layer
    BACKGROUND_BLEED = 50
    BACKGROUND_BLUR_RADIUS = 25
    BACKGROUND_BRIGHTNESS = 0.4
    BACKGROUND_SATURATION = 1.2
    GRADIENT_STOPS = [(0.0, 0.2), (0.5, 0.1), (1.0, 0.5)]  # (offset, black alpha)

    # User image layer
    USER_IMAGE_MAX_HEIGHT_RATIO = 0.9
    USER_IMAGE_MAX_WIDTH_RATIO = 0.7
    USER_IMAGE_SHADOW = {"alpha": 0.6, "blur": 40, "offset": (0, 15)}

    # Text layer
    TEXT_SHADOW = {"alpha": 0.8, "blur": 10, "offset": (2, 2)}
    ZONE_STROKE = {"color": (0, 0, 0, 204), "width": 8}  # line width centred on the glyph outline
    STROKE_WIDTH_RATIO = 0.08
    MIN_STROKE_WIDTH = 4

    ZONE_PADDING = 40
    ZONE_TOP_Y = 80
    ZONE_BOTTOM_MARGIN = 60

    # Discrete size buckets expressed as a fraction of canvas height (px at 720)
    ZONE_FONT_SIZES: Dict[str, float] = {
        "small": 36 / 720,
        "medium": 48 / 720,
        "large": 64 / 720,
        "xlarge": 80 / 720,
    }

    # Hangul-capable fonts tried in order when FONT_PATH is not set
    FONT_CANDIDATES: List[str] = [
        "/usr/share/fonts/opentype/noto/NotoSansCJK-Bold.ttc",
        "/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc",
        "/usr/share/fonts/noto-cjk/NotoSansCJK-Regular.ttc",
        "/usr/share/fonts/google-noto-cjk/NotoSansCJK-Regular.ttc",
        "/usr/share/fonts/truetype/nanum/NanumGothicBold.ttf",
        "/usr/share/fonts/truetype/nanum/NanumGothic.ttf",
        "/System/Library/Fonts/AppleSDGothicNeo.ttc",
        "/Library/Fonts/NotoSansKR-Bold.otf",
        "C:/Windows/Fonts/malgunbd.ttf",
        "C:/Windows/Fonts/malgun.ttf",
    ]

# Create global settings instance
settings = Settings()
