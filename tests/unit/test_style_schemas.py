"""Unit tests for caption style validation."""
import pytest
from unittest.mock import patch

from app.config.schemas import StyleResponseValidator, resolve_schema_version
from app.models.style import (
    StyleSchemaVersion, ZoneStyleAttributes, PercentStyleAttributes, default_style
)


@pytest.fixture
def validator():
    return StyleResponseValidator()


class TestResolveSchemaVersion:
    """Test schema version selection."""

    def test_explicit_version(self):
        assert resolve_schema_version("zone") == StyleSchemaVersion.ZONE
        assert resolve_schema_version("PERCENT") == StyleSchemaVersion.PERCENT
        assert resolve_schema_version(StyleSchemaVersion.ZONE) == StyleSchemaVersion.ZONE

    def test_configured_default(self):
        with patch("app.config.schemas.style_schemas.settings") as mock_settings:
            mock_settings.style_schema_version = "zone"
            assert resolve_schema_version(None) == StyleSchemaVersion.ZONE
            assert resolve_schema_version("unknown") == StyleSchemaVersion.ZONE

    def test_invalid_configuration_falls_back_to_percent(self):
        with patch("app.config.schemas.style_schemas.settings") as mock_settings:
            mock_settings.style_schema_version = "v9"
            assert resolve_schema_version(None) == StyleSchemaVersion.PERCENT


class TestPercentNormalization:
    """Test the canonical percentage schema."""

    def test_valid_record(self, validator):
        style = validator.normalize({
            "text_color": "#ff0000",
            "stroke_color": "#000",
            "x_percent": 30,
            "y_percent": "20",
            "font_size_percent": 15.5,
            "font_weight": "700",
            "alignment": "Left"
        }, "percent")

        assert isinstance(style, PercentStyleAttributes)
        assert style.text_color == "#FF0000"
        assert style.stroke_color == "#000"
        assert style.x_percent == 30.0
        assert style.y_percent == 20.0
        assert style.font_size_percent == 15.5
        assert style.font_weight == "700"
        assert style.alignment == "left"

    def test_font_size_clamped_to_maximum(self, validator):
        style = validator.normalize({"font_size_percent": 500}, "percent")
        assert style.font_size_percent == 25.0

    def test_negative_position_clamped(self, validator):
        style = validator.normalize({"x_percent": -10, "y_percent": 140}, "percent")
        assert style.x_percent == 0.0
        assert style.y_percent == 100.0

    def test_unknown_alignment_uses_default(self, validator):
        style = validator.normalize({"alignment": "diagonal"}, "percent")
        assert style.alignment == "center"

    def test_invalid_fields_replaced_individually(self, validator):
        """Invalid fields take defaults while valid ones are kept."""
        style = validator.normalize({
            "text_color": "red",
            "x_percent": "left-ish",
            "y_percent": 10,
            "font_weight": 900,
            "alignment": True
        }, "percent")

        assert style.text_color == "#FFFFFF"
        assert style.x_percent == 50.0
        assert style.y_percent == 10.0
        assert style.font_weight == "900"
        assert style.alignment == "center"

    def test_null_stroke_preserved(self, validator):
        style = validator.normalize({"stroke_color": None}, "percent")
        assert style.stroke_color is None

    def test_missing_fields_use_defaults(self, validator):
        assert validator.normalize({}, "percent") == PercentStyleAttributes()

    def test_camel_case_aliases(self, validator):
        style = validator.normalize({
            "textColor": "#00FF00",
            "strokeColor": None,
            "xPercent": 10,
            "fontSizePercent": 8
        }, "percent")

        assert style.text_color == "#00FF00"
        assert style.stroke_color is None
        assert style.x_percent == 10.0
        assert style.font_size_percent == 8.0

    def test_canonical_key_wins_over_alias(self, validator):
        style = validator.normalize({"text_color": "#111111", "textColor": "#222222"}, "percent")
        assert style.text_color == "#111111"

    def test_ratio_and_vertical_position_keys(self, validator):
        """Fractional font size and named vertical positions are converted."""
        style = validator.normalize({
            "fontSizeRatio": 0.18,
            "verticalPosition": "top",
            "horizontalAlign": "left"
        }, "percent")

        assert style.font_size_percent == pytest.approx(18.0)
        assert style.y_percent == 15.0
        assert style.alignment == "left"

    def test_converted_keys_do_not_override_canonical(self, validator):
        style = validator.normalize({
            "font_size_percent": 10,
            "fontSizeRatio": 0.2,
            "y_percent": 40,
            "verticalPosition": "middle"
        }, "percent")

        assert style.font_size_percent == 10.0
        assert style.y_percent == 40.0

    def test_unknown_vertical_position_ignored(self, validator):
        style = validator.normalize({"verticalPosition": "somewhere", "fontSizeRatio": "big"}, "percent")

        assert style.y_percent == 85.0
        assert style.font_size_percent == 12.0

    def test_non_numeric_and_non_finite(self, validator):
        style = validator.normalize({"x_percent": "NaN", "y_percent": float("inf")}, "percent")
        assert style.x_percent == 50.0
        assert style.y_percent == 85.0

    def test_non_object_returns_default(self, validator):
        assert validator.normalize(["not", "a", "dict"], "percent") == PercentStyleAttributes()


class TestZoneNormalization:
    """Test the legacy named-zone schema."""

    def test_valid_record(self, validator):
        style = validator.normalize({
            "text_color": "#FFFF00",
            "text_position": "TOP-LEFT",
            "font_style": "italic",
            "font_size": "xlarge",
            "background_style": "dark"
        }, "zone")

        assert isinstance(style, ZoneStyleAttributes)
        assert style.text_position == "top-left"
        assert style.font_style == "italic"
        assert style.font_size == "xlarge"
        assert style.background_style == "dark"

    def test_unknown_values_use_defaults(self, validator):
        style = validator.normalize({
            "text_position": "somewhere",
            "font_size": "huge",
            "font_style": 12
        }, "zone")

        assert style == ZoneStyleAttributes()

    def test_zone_aliases(self, validator):
        style = validator.normalize({"textPosition": "center", "fontSize": "small"}, "zone")
        assert style.text_position == "center"
        assert style.font_size == "small"

    def test_versions_not_merged(self, validator):
        """Percent fields are ignored when validating a zone record."""
        style = validator.normalize({"x_percent": 10, "text_position": "bottom-left"}, "zone")

        assert isinstance(style, ZoneStyleAttributes)
        assert not hasattr(style, "x_percent")


class TestFromServicePayload:
    """Test the client half of the analysis endpoint contract."""

    def test_failure_payload_returns_default(self, validator):
        assert validator.from_service_payload({"success": False}, "percent") == default_style("percent")

    def test_missing_success_flag_returns_default(self, validator):
        style = validator.from_service_payload({"text_color": "#000000"}, "percent")
        assert style == PercentStyleAttributes()

    def test_non_dict_payload(self, validator):
        assert validator.from_service_payload(None, "zone") == ZoneStyleAttributes()
        assert validator.from_service_payload("oops", "percent") == PercentStyleAttributes()

    def test_success_payload(self, validator):
        style = validator.from_service_payload({
            "success": True,
            "schema_version": "percent",
            "text_color": "#ABCDEF",
            "alignment": "right"
        })

        assert style.text_color == "#ABCDEF"
        assert style.alignment == "right"

    def test_payload_schema_version_honoured(self, validator):
        style = validator.from_service_payload({
            "success": True,
            "schema_version": "zone",
            "text_position": "top-right"
        }, "percent")

        assert isinstance(style, ZoneStyleAttributes)
        assert style.text_position == "top-right"
