"""
Prompt Template Engine for dynamic prompt generation.
Handles template loading, rendering, and validation.
"""
import yaml
from typing import Dict, Any, Optional, List
from pathlib import Path
from jinja2 import Template
from dataclasses import dataclass

from app.core.exceptions import ConfigurationError
from app.utils.logging import CorrelatedLogger


@dataclass
class PromptSection:
    """Represents a section of the analysis prompt."""
    title: str
    fields: List[Dict[str, Any]]


@dataclass
class PromptConfig:
    """Configuration for a complete prompt template."""
    system_role: str
    instruction: str
    analysis_sections: Dict[str, PromptSection]
    response_format: Dict[str, str]


class PromptTemplateEngine:
    """
    Template engine for managing and rendering analysis prompts.

    Features:
    - Multi-language prompt support
    - Dynamic template rendering with Jinja2
    - Configuration-based prompt management
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize the template engine.

        Args:
            config_dir: Path to configuration directory. Defaults to app/config/
        """
        self.logger = CorrelatedLogger(__name__)

        if config_dir is None:
            config_dir = Path(__file__).parent.parent

        self.config_dir = Path(config_dir)
        self.prompts_dir = self.config_dir / "prompts"

        # Cache for loaded configurations
        self._config_cache: Dict[str, Dict[str, Any]] = {}
        self._schema_cache: Dict[str, Dict[str, Any]] = {}

        self.logger.info(f"PromptTemplateEngine initialized with config_dir: {config_dir}")

    def load_prompt_config(self, analysis_type: str, language: str = "ko") -> PromptConfig:
        """
        Load prompt configuration for specific analysis type and language.

        Args:
            analysis_type: Type of analysis (e.g., 'text_style_percent')
            language: Language code (e.g., 'ko', 'en')

        Returns:
            PromptConfig object with loaded configuration

        Raises:
            ConfigurationError: If configuration cannot be loaded
        """
        cache_key = f"{analysis_type}_{language}"

        if cache_key in self._config_cache:
            return self._build_prompt_config(self._config_cache[cache_key])

        config_path = self.prompts_dir / analysis_type / f"{language}.yaml"

        if not config_path.exists():
            raise ConfigurationError(
                f"prompts/{analysis_type}/{language}",
                f"Available languages: {self._get_available_languages(analysis_type)}"
            )

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"prompts/{analysis_type}/{language}", str(e))

        self._config_cache[cache_key] = config_data

        self.logger.info(f"Loaded prompt configuration: {analysis_type}/{language}")
        return self._build_prompt_config(config_data)

    def load_schema_config(self, analysis_type: str) -> Dict[str, Any]:
        """
        Load response schema configuration for validation.

        Args:
            analysis_type: Type of analysis (e.g., 'text_style_percent')

        Returns:
            Schema configuration dictionary
        """
        if analysis_type in self._schema_cache:
            return self._schema_cache[analysis_type]

        schema_path = self.prompts_dir / analysis_type / "schema.yaml"

        if not schema_path.exists():
            raise ConfigurationError(f"prompts/{analysis_type}/schema", "Schema configuration not found")

        try:
            with open(schema_path, 'r', encoding='utf-8') as f:
                schema_data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"prompts/{analysis_type}/schema", str(e))

        self._schema_cache[analysis_type] = schema_data

        self.logger.info(f"Loaded schema configuration: {analysis_type}")
        return schema_data

    def render_prompt(
        self,
        analysis_type: str,
        language: str = "ko",
        **template_vars
    ) -> str:
        """
        Render the complete analysis prompt with template variables.

        Args:
            analysis_type: Type of analysis (e.g., 'text_style_percent')
            language: Language code (e.g., 'ko', 'en')
            **template_vars: Variables to pass to the template

        Returns:
            Rendered prompt string
        """
        config = self.load_prompt_config(analysis_type, language)

        prompt_parts = [
            config.system_role.strip(),
            "",
            config.instruction.strip(),
            ""
        ]

        field_number = 1
        for section in config.analysis_sections.values():
            prompt_parts.append(f"{section.title}:")

            for field_info in section.fields:
                field_name = field_info['field']
                description = field_info.get('description', '')

                if 'options' in field_info:
                    options = ', '.join(str(option) for option in field_info['options'])
                    prompt_parts.append(f"{field_number}) {field_name}: {options}")
                elif field_info.get('type') == 'float':
                    low, high = field_info.get('range', ['0', '100'])
                    prompt_parts.append(f"{field_number}) {field_name}: {description} ({low}-{high})")
                else:
                    prompt_parts.append(f"{field_number}) {field_name}: {description}")
                field_number += 1

            prompt_parts.append("")

        prompt_parts.append(config.response_format.get('instruction', '').strip())

        full_prompt = "\n".join(prompt_parts)

        try:
            full_prompt = Template(full_prompt).render(**template_vars)
        except Exception as e:
            raise ConfigurationError(f"prompts/{analysis_type}/{language}", f"Prompt rendering failed: {str(e)}")

        self.logger.debug(f"Rendered prompt for {analysis_type}/{language} ({len(full_prompt)} chars)")
        return full_prompt

    def get_available_languages(self, analysis_type: str) -> List[str]:
        """Get list of available languages for an analysis type."""
        return self._get_available_languages(analysis_type)

    def get_available_analysis_types(self) -> List[str]:
        """Get list of available analysis types."""
        if not self.prompts_dir.exists():
            return []

        return sorted(
            item.name for item in self.prompts_dir.iterdir()
            if item.is_dir() and not item.name.startswith('.')
        )

    def _build_prompt_config(self, config_data: Dict[str, Any]) -> PromptConfig:
        """Build PromptConfig object from raw configuration data."""
        main_prompt = config_data.get('main_prompt', {})

        analysis_sections = {}
        for section_name, section_data in main_prompt.get('analysis_sections', {}).items():
            analysis_sections[section_name] = PromptSection(
                title=section_data.get('title', section_name.upper()),
                fields=section_data.get('fields', [])
            )

        return PromptConfig(
            system_role=config_data.get('system_role', ''),
            instruction=main_prompt.get('instruction', ''),
            analysis_sections=analysis_sections,
            response_format=config_data.get('response_format', {})
        )

    def _get_available_languages(self, analysis_type: str) -> List[str]:
        """Get available language codes for an analysis type."""
        analysis_dir = self.prompts_dir / analysis_type

        if not analysis_dir.exists():
            return []

        return sorted(
            item.stem for item in analysis_dir.iterdir()
            if item.is_file() and item.suffix == '.yaml' and item.stem != 'schema'
        )


# Global template engine instance
_template_engine = None

def get_template_engine() -> PromptTemplateEngine:
    """Get global template engine instance (singleton pattern)."""
    global _template_engine
    if _template_engine is None:
        _template_engine = PromptTemplateEngine()
    return _template_engine
