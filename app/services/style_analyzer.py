"""Caption style analysis service using the OpenAI Vision API."""
import json
import asyncio
from datetime import datetime
from typing import Optional, Dict, Any

from openai import OpenAI

from ..core.config import settings, CanvasConfig
from ..core.exceptions import StyleAnalysisError, ConfigurationError
from ..models.style import StyleSchemaVersion, default_style
from ..utils.logging import CorrelatedLogger, MetricsLogger
from ..config.localization import SupportedLanguage, get_localization_manager
from ..config.templates import get_template_engine
from ..config.schemas import get_style_validator, resolve_schema_version, ANALYSIS_TYPES
from .cache_service import CacheService


class StyleAnalyzer:
    """Service for deriving caption style attributes from a reference thumbnail."""

    def __init__(self, language: Optional[str] = None, cache: Optional[CacheService] = None):
        self.client = self._initialize_client()
        self.logger = CorrelatedLogger(__name__)
        self.metrics = MetricsLogger()
        self.language = get_localization_manager().resolve_language(user_preference=language)
        self.template_engine = get_template_engine()
        self.validator = get_style_validator()
        self.cache = cache or CacheService(default_ttl_hours=settings.cache_ttl_hours, namespace="style")

        self.logger.info(f"StyleAnalyzer initialized with language: {self.language.value}")

    def _initialize_client(self) -> Optional[OpenAI]:
        """Initialize OpenAI client if API key is configured."""
        if not settings.openai_api_key:
            return None

        try:
            return OpenAI(api_key=settings.openai_api_key, timeout=settings.request_timeout * 3)
        except Exception as e:
            raise ConfigurationError("OpenAI client", str(e))

    @property
    def is_configured(self) -> bool:
        return self.client is not None and settings.enable_style_analysis

    async def analyze(
        self,
        thumbnail_url: str,
        request_id: Optional[str] = None,
        language: Optional[str] = None,
        schema_version: Optional[str] = None
    ):
        """Analyze a thumbnail and return validated style attributes.

        Never raises for service problems: a missing credential, a failed call
        or an unparseable answer all yield the default record.
        """
        version = resolve_schema_version(schema_version)

        if request_id:
            self.logger.request_id = request_id

        if not thumbnail_url:
            return default_style(version)

        if not self.is_configured:
            self.logger.info("Style analysis not configured, using default style")
            return default_style(version)

        analysis_language = self._resolve_language(language)
        cache_key = f"{version.value}:{thumbnail_url}"

        if settings.cache_enabled:
            cached = self.cache.get(cache_key)
            if cached is not None:
                self.metrics.log_style_analysis_metrics(
                    request_id or "-", thumbnail_url, version.value,
                    success=True, processing_time_ms=0, cache_hit=True
                )
                return cached

        start_time = datetime.now()

        try:
            style = await self._request_analysis(thumbnail_url, version, analysis_language)
        except StyleAnalysisError as e:
            processing_time = int((datetime.now() - start_time).total_seconds() * 1000)
            self.logger.warning(f"Style analysis failed for {thumbnail_url}: {e.message}, using default style")
            self.metrics.log_style_analysis_metrics(
                request_id or "-", thumbnail_url, version.value,
                success=False, processing_time_ms=processing_time, error_code=e.error_code
            )
            return default_style(version)

        processing_time = int((datetime.now() - start_time).total_seconds() * 1000)
        self.metrics.log_style_analysis_metrics(
            request_id or "-", thumbnail_url, version.value,
            success=True, processing_time_ms=processing_time
        )

        if settings.cache_enabled:
            self.cache.set(cache_key, style)

        return style

    async def _request_analysis(
        self,
        thumbnail_url: str,
        version: StyleSchemaVersion,
        language: SupportedLanguage
    ):
        """Call the vision model once and validate its answer."""
        try:
            prompt_text = self.template_engine.render_prompt(
                analysis_type=ANALYSIS_TYPES[version],
                language=language.value,
                width=CanvasConfig.WIDTH,
                height=CanvasConfig.HEIGHT
            )

            response = await asyncio.to_thread(
                self.client.chat.completions.create,
                model=settings.vision_model,
                messages=self._create_analysis_prompt(thumbnail_url, prompt_text),
                max_tokens=500,
                temperature=0.1
            )

            content = response.choices[0].message.content
        except Exception as e:
            raise StyleAnalysisError(thumbnail_url, str(e))

        if not content:
            raise StyleAnalysisError(thumbnail_url, "Empty response content")

        try:
            raw_data = self._extract_json_from_content(content)
        except ValueError as e:
            raise StyleAnalysisError(thumbnail_url, f"Unparseable response: {str(e)}")

        return self.validator.normalize(raw_data, version)

    def _create_analysis_prompt(self, thumbnail_url: str, prompt_text: str) -> list:
        """Create the analysis prompt for OpenAI Vision API using template system."""
        return [
            {
                "role": "user",
                "content": [
                    {
                        "type": "text",
                        "text": prompt_text
                    },
                    {
                        "type": "image_url",
                        "image_url": {
                            "url": thumbnail_url,
                            "detail": "low"  # text placement does not need high detail
                        }
                    }
                ]
            }
        ]

    def _extract_json_from_content(self, content: str) -> Dict[str, Any]:
        """Extract and parse the first JSON object from OpenAI response content.

        Code fences and any prose before or after the object are ignored.
        """
        json_content = content.strip()

        start_idx = json_content.find('{')
        if start_idx == -1:
            raise ValueError(f"No JSON object in response: {json_content[:200]}")

        try:
            analysis_data, _ = json.JSONDecoder().raw_decode(json_content[start_idx:])
        except json.JSONDecodeError as e:
            self.logger.warning(f"JSON decode error: {str(e)}, content: {json_content[:200]}...")
            raise

        if not isinstance(analysis_data, dict):
            raise ValueError(f"Expected a JSON object, got {type(analysis_data).__name__}")

        # Flatten nested sections such as {"text_style": {...}}
        flattened_data = {}
        for key, value in analysis_data.items():
            if isinstance(value, dict):
                flattened_data.update(value)
            else:
                flattened_data[key] = value
        return flattened_data

    def _resolve_language(self, language: Optional[str]) -> SupportedLanguage:
        if language:
            return get_localization_manager().resolve_language(user_preference=language)
        return self.language
