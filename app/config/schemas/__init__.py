"""Schema validation system for style analysis responses."""

from .style_schemas import (
    StyleResponseValidator,
    resolve_schema_version,
    get_style_validator,
    ANALYSIS_TYPES
)

__all__ = [
    'StyleResponseValidator',
    'resolve_schema_version',
    'get_style_validator',
    'ANALYSIS_TYPES'
]
