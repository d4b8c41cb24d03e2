"""Unit tests for custom exceptions."""
import pytest
from app.core.exceptions import (
    ThumbnailStudioError, ValidationError, MissingInputError, InvalidURLFormatError,
    ThumbnailFetchError, StyleAnalysisError, GenerationError, ConfigurationError
)

class TestCustomExceptions:
    """Test custom exception classes."""

    def test_base_exception(self):
        """Test base exception functionality."""
        exc = ThumbnailStudioError(
            "Test message",
            "TEST_ERROR",
            {"key": "value"}
        )

        assert str(exc) == "Test message"
        assert exc.message == "Test message"
        assert exc.error_code == "TEST_ERROR"
        assert exc.details == {"key": "value"}

    def test_validation_error(self):
        """Test validation error."""
        exc = ValidationError("Invalid input", {"reason": "too large"})

        assert exc.error_code == "VALIDATION_ERROR"
        assert exc.message == "Invalid input"
        assert exc.details == {"reason": "too large"}

    def test_missing_input_error(self):
        exc = MissingInputError()

        assert exc.error_code == "MISSING_INPUT"
        assert exc.details == {}

    def test_invalid_url_format_error(self):
        exc = InvalidURLFormatError("not a url")

        assert exc.error_code == "INVALID_URL_FORMAT"
        assert exc.details["url"] == "not a url"

    def test_thumbnail_fetch_error(self):
        """Test thumbnail fetch error."""
        url = "https://img.youtube.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"
        exc = ThumbnailFetchError(url, "404 Client Error")

        assert exc.error_code == "THUMBNAIL_FETCH_FAILED"
        assert "404 Client Error" in exc.message
        assert exc.details == {"url": url, "reason": "404 Client Error"}

    def test_style_analysis_error(self):
        exc = StyleAnalysisError("https://example.com/a.jpg", "timeout")

        assert exc.error_code == "STYLE_ANALYSIS_FAILED"
        assert exc.details["reason"] == "timeout"

    def test_generation_error(self):
        """Generation errors name the failing step."""
        exc = GenerationError("load_background", "Cannot decode image")

        assert exc.error_code == "GENERATION_FAILED"
        assert "load_background" in exc.message
        assert exc.details["step"] == "load_background"

    def test_configuration_error(self):
        exc = ConfigurationError("FONT_PATH", "File not found")

        assert exc.error_code == "CONFIGURATION_ERROR"
        assert exc.details["setting"] == "FONT_PATH"

    def test_exception_inheritance(self):
        """Test that all custom exceptions inherit from base exception."""
        exceptions = [
            ValidationError("test"),
            MissingInputError(),
            InvalidURLFormatError("test"),
            ThumbnailFetchError("test"),
            StyleAnalysisError("test"),
            GenerationError("test"),
            ConfigurationError("test")
        ]

        for exc in exceptions:
            assert isinstance(exc, ThumbnailStudioError)
            assert isinstance(exc, Exception)
