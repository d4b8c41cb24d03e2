"""
Localization support for user-facing messages and labels.
Handles language selection, fallbacks, and message lookup.
"""
from typing import Dict, List, Optional
from enum import Enum

from ..core.config import settings
from ..utils.logging import CorrelatedLogger


class SupportedLanguage(str, Enum):
    """Supported languages for messages and analysis prompts."""
    KOREAN = "ko"
    ENGLISH = "en"


MESSAGES: Dict[str, Dict[str, str]] = {
    "missing_input": {
        "ko": "유튜브 영상 URL을 입력해주세요.",
        "en": "Please enter a YouTube video URL.",
    },
    "invalid_format": {
        "ko": "올바른 유튜브 URL 형식이 아닙니다. 다시 확인해주세요.",
        "en": "This is not a valid YouTube URL format. Please check it again.",
    },
    "missing_thumbnail_url": {
        "ko": "썸네일 URL이 필요합니다.",
        "en": "A thumbnail URL is required.",
    },
    "generation_failed": {
        "ko": "썸네일 생성에 실패했습니다.",
        "en": "Thumbnail generation failed.",
    },
    "upload_too_large": {
        "ko": "업로드한 이미지가 너무 큽니다.",
        "en": "The uploaded image is too large.",
    },
    "default_caption": {
        "ko": "나만의 썸네일 제목",
        "en": "My thumbnail title",
    },
}


class LanguageDetector:
    """Pick a language from an explicit preference or an Accept-Language header."""

    ALIASES = {
        "ko": SupportedLanguage.KOREAN,
        "kr": SupportedLanguage.KOREAN,
        "korean": SupportedLanguage.KOREAN,
        "en": SupportedLanguage.ENGLISH,
        "english": SupportedLanguage.ENGLISH,
    }

    def __init__(self):
        self.logger = CorrelatedLogger(__name__)

    def detect_language(
        self,
        user_preference: Optional[str] = None,
        accept_language: Optional[str] = None
    ) -> Optional[SupportedLanguage]:
        """
        Detect the most appropriate language.

        Args:
            user_preference: Explicitly requested language
            accept_language: Raw Accept-Language header value

        Returns:
            Detected language, or None if nothing matched
        """
        # Priority 1: Explicit user preference
        if user_preference:
            language = self._match(user_preference)
            if language:
                return language

        # Priority 2: Accept-Language header, highest q-value first
        if accept_language:
            for tag in self._parse_accept_language(accept_language):
                language = self._match(tag)
                if language:
                    return language

        return None

    def _match(self, value: str) -> Optional[SupportedLanguage]:
        """Match a language tag such as 'ko-KR' to a supported language."""
        normalized = value.lower().strip()
        primary = normalized.split("-")[0].split("_")[0]
        return self.ALIASES.get(normalized) or self.ALIASES.get(primary)

    def _parse_accept_language(self, header: str) -> List[str]:
        """Return language tags ordered by their q-value."""
        weighted = []
        for index, part in enumerate(header.split(",")):
            pieces = part.strip().split(";")
            tag = pieces[0].strip()
            if not tag or tag == "*":
                continue

            quality = 1.0
            for param in pieces[1:]:
                param = param.strip()
                if param.startswith("q="):
                    try:
                        quality = float(param[2:])
                    except ValueError:
                        quality = 0.0
            weighted.append((-quality, index, tag))

        return [tag for _, _, tag in sorted(weighted)]


class LocalizationManager:
    """
    Manages language selection and message lookup.

    Features:
    - Language preference and header negotiation
    - Fallback language chains
    - Message catalog lookup
    """

    def __init__(self, default_language: Optional[str] = None):
        self.logger = CorrelatedLogger(__name__)
        self.detector = LanguageDetector()
        self.default_language = self.detector._match(default_language or settings.default_language) or SupportedLanguage.KOREAN

        # Language fallback chains
        self.fallback_chains = {
            SupportedLanguage.KOREAN: [SupportedLanguage.KOREAN, SupportedLanguage.ENGLISH],
            SupportedLanguage.ENGLISH: [SupportedLanguage.ENGLISH, SupportedLanguage.KOREAN]
        }

    def resolve_language(
        self,
        user_preference: Optional[str] = None,
        accept_language: Optional[str] = None
    ) -> SupportedLanguage:
        """Resolve the language for a request, falling back to the default."""
        detected = self.detector.detect_language(user_preference, accept_language)
        return detected or self.default_language

    def get_message(self, key: str, language: Optional[SupportedLanguage] = None) -> str:
        """Look up a message, walking the fallback chain when missing."""
        language = language or self.default_language
        translations = MESSAGES.get(key, {})

        for candidate in self.fallback_chains.get(language, [language]):
            if candidate.value in translations:
                return translations[candidate.value]

        self.logger.warning(f"Missing message key '{key}' for language {language.value}")
        return key

    def get_supported_languages(self) -> List[str]:
        """Get list of supported language codes."""
        return [lang.value for lang in SupportedLanguage]


# Global localization manager instance
_localization_manager = None

def get_localization_manager() -> LocalizationManager:
    """Get global localization manager instance (singleton pattern)."""
    global _localization_manager
    if _localization_manager is None:
        _localization_manager = LocalizationManager()
    return _localization_manager
