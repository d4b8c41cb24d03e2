"""Logging configuration and utilities."""
import logging
import sys
from typing import Optional
from ..core.config import settings

class LoggerSetup:
    """Centralized logging configuration."""

    @staticmethod
    def setup_logging(
        level: Optional[str] = None,
        format_string: Optional[str] = None
    ) -> None:
        """Setup application logging."""
        log_level = level or settings.log_level
        log_format = format_string or settings.log_format

        # Configure root logger
        logging.basicConfig(
            level=getattr(logging, log_level.upper(), logging.INFO),
            format=log_format,
            handlers=[
                logging.StreamHandler(sys.stdout)
            ]
        )

        # Set specific logger levels
        logging.getLogger("uvicorn").setLevel(logging.INFO)
        logging.getLogger("fastapi").setLevel(logging.INFO)
        logging.getLogger("openai").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("urllib3").setLevel(logging.WARNING)
        logging.getLogger("PIL").setLevel(logging.WARNING)

class CorrelatedLogger:
    """Logger with correlation ID support for request tracking."""

    def __init__(self, name: str, request_id: Optional[str] = None):
        self.logger = logging.getLogger(name)
        self.request_id = request_id

    def _format_message(self, message: str) -> str:
        """Format message with request ID if available."""
        if self.request_id:
            return f"[{self.request_id}] {message}"
        return message

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message with correlation ID."""
        self.logger.debug(self._format_message(message), **kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message with correlation ID."""
        self.logger.info(self._format_message(message), **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message with correlation ID."""
        self.logger.warning(self._format_message(message), **kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Log error message with correlation ID."""
        self.logger.error(self._format_message(message), **kwargs)

    def exception(self, message: str, **kwargs) -> None:
        """Log exception message with correlation ID."""
        self.logger.exception(self._format_message(message), **kwargs)

class MetricsLogger:
    """Logger for performance metrics and monitoring."""

    def __init__(self):
        self.logger = logging.getLogger("metrics")

    def log_download_metrics(
        self,
        request_id: str,
        video_id: str,
        tier: str,
        success: bool,
        processing_time_ms: int,
        fallback_used: bool = False,
        size_bytes: Optional[int] = None
    ) -> None:
        """Log thumbnail download metrics."""
        status = "success" if success else "fallback" if fallback_used else "failed"

        log_msg = (
            f"DOWNLOAD_METRICS request_id={request_id} "
            f"video_id={video_id} tier={tier} status={status} "
            f"processing_time_ms={processing_time_ms}"
        )

        if size_bytes is not None:
            log_msg += f" size_bytes={size_bytes}"

        self.logger.info(log_msg)

    def log_style_analysis_metrics(
        self,
        request_id: str,
        thumbnail_url: str,
        schema_version: str,
        success: bool,
        processing_time_ms: int,
        cache_hit: bool = False,
        error_code: Optional[str] = None
    ) -> None:
        """Log style analysis metrics."""
        status = "success" if success else "default"
        cache_status = "hit" if cache_hit else "miss"

        log_msg = (
            f"STYLE_ANALYSIS_METRICS request_id={request_id} "
            f"thumbnail_url={thumbnail_url} schema={schema_version} status={status} "
            f"processing_time_ms={processing_time_ms} cache={cache_status}"
        )

        if error_code:
            log_msg += f" error_code={error_code}"

        self.logger.info(log_msg)

    def log_generation_metrics(
        self,
        request_id: str,
        video_id: str,
        success: bool,
        processing_time_ms: int,
        step_count: int,
        failed_step: Optional[str] = None
    ) -> None:
        """Log compositor metrics."""
        status = "success" if success else "failed"

        log_msg = (
            f"GENERATION_METRICS request_id={request_id} "
            f"video_id={video_id} status={status} "
            f"processing_time_ms={processing_time_ms} steps={step_count}"
        )

        if failed_step:
            log_msg += f" failed_step={failed_step}"

        self.logger.info(log_msg)
