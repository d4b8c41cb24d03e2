"""Custom exceptions for the Thumbnail Studio Service."""
from typing import Optional

class ThumbnailStudioError(Exception):
    """Base exception for thumbnail studio service."""

    def __init__(self, message: str, error_code: str, details: Optional[dict] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

class ValidationError(ThumbnailStudioError):
    """Exception raised for input validation errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, "VALIDATION_ERROR", details)

class MissingInputError(ThumbnailStudioError):
    """Exception raised when the URL input is empty or whitespace only."""

    def __init__(self, message: str = "Please enter a YouTube video URL."):
        super().__init__(message, "MISSING_INPUT")

class InvalidURLFormatError(ThumbnailStudioError):
    """Exception raised when no YouTube URL pattern matches the input."""

    def __init__(self, url: str, message: str = "This is not a valid YouTube URL format. Please check it again."):
        details = {"url": url}
        super().__init__(message, "INVALID_URL_FORMAT", details)

class ThumbnailFetchError(ThumbnailStudioError):
    """Exception raised when a thumbnail image cannot be retrieved."""

    def __init__(self, url: str, reason: str = "Image could not be retrieved"):
        message = f"Failed to fetch thumbnail: {reason}"
        details = {"url": url, "reason": reason}
        super().__init__(message, "THUMBNAIL_FETCH_FAILED", details)

class StyleAnalysisError(ThumbnailStudioError):
    """Exception raised when thumbnail style analysis fails."""

    def __init__(self, thumbnail_url: str, reason: str = "Vision API error"):
        message = f"Failed to analyze thumbnail style: {reason}"
        details = {"url": thumbnail_url, "reason": reason}
        super().__init__(message, "STYLE_ANALYSIS_FAILED", details)

class GenerationError(ThumbnailStudioError):
    """Exception raised when the compositor pipeline aborts."""

    def __init__(self, step: str, reason: str = "Image could not be loaded"):
        message = f"Thumbnail generation failed at '{step}': {reason}"
        details = {"step": step, "reason": reason}
        super().__init__(message, "GENERATION_FAILED", details)

class ConfigurationError(ThumbnailStudioError):
    """Exception raised for configuration errors."""

    def __init__(self, setting: str, reason: str = "Invalid configuration"):
        message = f"Configuration error for {setting}: {reason}"
        details = {"setting": setting, "reason": reason}
        super().__init__(message, "CONFIGURATION_ERROR", details)
