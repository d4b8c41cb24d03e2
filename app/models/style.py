"""Caption style models for the two versioned analysis schemas."""
from enum import Enum
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, Field

class StyleSchemaVersion(str, Enum):
    """Supported style analysis response schemas."""
    ZONE = "zone"  # named zone plus qualitative size/weight
    PERCENT = "percent"  # continuous percentage coordinates

class ZoneStyleAttributes(BaseModel):
    """Legacy style record: named text zone and qualitative size."""
    schema_version: Literal["zone"] = "zone"
    text_color: str = "#FFFFFF"
    text_position: str = "bottom-center"  # top-left, top-center, ..., bottom-right
    font_style: str = "bold"  # bold, normal, thin, italic
    font_size: str = "large"  # small, medium, large, xlarge
    background_style: str = "blur"  # blur, dark, none

    model_config = {"frozen": True}

class PercentStyleAttributes(BaseModel):
    """Canonical style record: percentage position and continuous size."""
    schema_version: Literal["percent"] = "percent"
    text_color: str = "#FFFFFF"
    stroke_color: Optional[str] = "#000000"  # None disables the outline pass
    x_percent: float = Field(50.0, ge=0.0, le=100.0)
    y_percent: float = Field(85.0, ge=0.0, le=100.0)
    font_size_percent: float = Field(12.0, ge=4.0, le=25.0)
    font_weight: str = "bold"
    alignment: str = "center"  # left, center, right

    model_config = {"frozen": True}

StyleAttributes = Annotated[
    Union[ZoneStyleAttributes, PercentStyleAttributes],
    Field(discriminator="schema_version"),
]

def default_style(schema_version: Union[StyleSchemaVersion, str]) -> Union[ZoneStyleAttributes, PercentStyleAttributes]:
    """Return the full default record for a schema version."""
    if StyleSchemaVersion(schema_version) == StyleSchemaVersion.ZONE:
        return ZoneStyleAttributes()
    return PercentStyleAttributes()
