"""
Validation of caption style attributes returned by the analysis service.
Each schema version keeps its own field rules; invalid fields fall back to defaults.
"""
import math
import re
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.exceptions import ConfigurationError
from app.models.style import (
    StyleSchemaVersion, ZoneStyleAttributes, PercentStyleAttributes, default_style
)
from app.utils.logging import CorrelatedLogger
from app.config.templates import get_template_engine

HEX_COLOR = re.compile(r'^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')

ANALYSIS_TYPES = {
    StyleSchemaVersion.ZONE: "text_style_zone",
    StyleSchemaVersion.PERCENT: "text_style_percent",
}

STYLE_MODELS = {
    StyleSchemaVersion.ZONE: ZoneStyleAttributes,
    StyleSchemaVersion.PERCENT: PercentStyleAttributes,
}

_MISSING = object()


def resolve_schema_version(value: Optional[Union[StyleSchemaVersion, str]] = None) -> StyleSchemaVersion:
    """Map a requested version to a supported one, defaulting to the configured version."""
    for candidate in (value, settings.style_schema_version):
        if candidate is None:
            continue
        try:
            return StyleSchemaVersion(str(getattr(candidate, "value", candidate)).lower())
        except ValueError:
            continue
    return StyleSchemaVersion.PERCENT


class StyleResponseValidator:
    """
    Validator for caption style responses using per-version schema definitions.

    Features:
    - Schema definitions loaded from YAML next to the prompts
    - Camel-case aliases from earlier endpoint revisions
    - Enum, colour and numeric range checks
    - Field-level fallback to the documented defaults
    """

    def __init__(self, template_engine=None):
        self.logger = CorrelatedLogger(__name__)
        self.template_engine = template_engine or get_template_engine()

    def get_schema_config(self, schema_version: StyleSchemaVersion) -> Dict[str, Any]:
        """Load the schema definition for a version."""
        try:
            return self.template_engine.load_schema_config(ANALYSIS_TYPES[schema_version])
        except ConfigurationError as e:
            self.logger.error(f"Failed to load style schema for {schema_version.value}: {e.message}")
            return {'field_definitions': {}, 'field_aliases': {}}

    def normalize(
        self,
        raw_data: Any,
        schema_version: Optional[Union[StyleSchemaVersion, str]] = None
    ):
        """
        Validate raw style data into a complete style record.

        Args:
            raw_data: Parsed JSON object from the analysis response
            schema_version: Schema the data follows

        Returns:
            ZoneStyleAttributes or PercentStyleAttributes with every field valid
        """
        version = resolve_schema_version(schema_version)
        model = STYLE_MODELS[version]

        if not isinstance(raw_data, dict):
            self.logger.warning(f"Style data is not an object ({type(raw_data).__name__}), using defaults")
            return default_style(version)

        schema_config = self.get_schema_config(version)
        data = self._apply_aliases(raw_data, schema_config.get('field_aliases') or {})
        data = self._apply_conversions(data, schema_config.get('field_conversions') or {})

        validated: Dict[str, Any] = {}
        for field_name, field_def in (schema_config.get('field_definitions') or {}).items():
            if field_name not in model.model_fields or field_name not in data:
                continue

            default = model.model_fields[field_name].default
            value = self._validate_field(field_name, data[field_name], field_def, default)
            if value is not _MISSING:
                validated[field_name] = value

        try:
            return model(**validated)
        except PydanticValidationError as e:
            self.logger.warning(f"Style record rejected, using defaults: {str(e)}")
            return default_style(version)

    def from_service_payload(
        self,
        payload: Any,
        schema_version: Optional[Union[StyleSchemaVersion, str]] = None
    ):
        """Turn an analysis endpoint response into a style record.

        A payload without ``success: true`` yields the full default record.
        """
        if not isinstance(payload, dict):
            return default_style(resolve_schema_version(schema_version))

        version = resolve_schema_version(payload.get('schema_version') or schema_version)
        if payload.get('success') is not True:
            self.logger.info("Style service reported failure, using default style")
            return default_style(version)

        fields = {key: value for key, value in payload.items() if key not in ('success', 'schema_version')}
        return self.normalize(fields, version)

    def _apply_aliases(self, data: Dict[str, Any], aliases: Dict[str, str]) -> Dict[str, Any]:
        """Rename legacy keys; canonical keys win when both are present."""
        renamed: Dict[str, Any] = {}
        for key, value in data.items():
            target = aliases.get(key, key)
            if target in renamed and key != target:
                continue
            renamed[target] = value
        return renamed

    def _apply_conversions(self, data: Dict[str, Any], conversions: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
        """Convert legacy keys such as ``fontSizeRatio`` (0.12 -> 12 percent)."""
        converted = dict(data)
        for key, rule in conversions.items():
            if key not in converted:
                continue
            value = converted.pop(key)
            target = rule['target']
            if target in converted:
                continue

            if 'scale' in rule:
                number = self._coerce_number(value)
                if number is not None:
                    converted[target] = number * rule['scale']
            elif isinstance(value, str) and value.strip().lower() in rule.get('values', {}):
                converted[target] = rule['values'][value.strip().lower()]
        return converted

    def _validate_field(self, field_name: str, value: Any, field_def: Dict[str, Any], default: Any) -> Any:
        """Validate one field, returning its default when the value is unusable."""
        field_type = field_def.get('type')

        if value is None:
            if field_def.get('nullable'):
                return None
            return _MISSING

        if isinstance(value, str):
            value = value.strip()

        if field_type == 'color':
            if isinstance(value, str) and HEX_COLOR.match(value):
                return value.upper()
        elif field_type == 'float':
            number = self._coerce_number(value)
            if number is not None:
                low, high = field_def.get('range', [number, number])
                clamped = min(max(number, float(low)), float(high))
                if clamped != number:
                    self.logger.warning(f"Clamped {field_name} from {number} to {clamped}")
                return clamped
        elif field_type == 'enum':
            match = self._match_enum(value, field_def.get('enum', []))
            if match is not None:
                return match
        else:
            return value

        self.logger.warning(f"Invalid value {value!r} for field '{field_name}', using default: {default!r}")
        return _MISSING

    def _coerce_number(self, value: Any) -> Optional[float]:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            try:
                number = float(value.rstrip('%').strip())
            except ValueError:
                return None
        else:
            return None
        return number if math.isfinite(number) else None

    def _match_enum(self, value: Any, valid_values: list) -> Optional[str]:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)) and float(value).is_integer():
            value = str(int(value))
        if not isinstance(value, str):
            return None

        value_lower = value.lower()
        for valid_value in valid_values:
            if str(valid_value).lower() == value_lower:
                return str(valid_value)
        return None


# Global validator instance
_style_validator = None

def get_style_validator() -> StyleResponseValidator:
    """Get global style validator instance (singleton pattern)."""
    global _style_validator
    if _style_validator is None:
        _style_validator = StyleResponseValidator()
    return _style_validator
