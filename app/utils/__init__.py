"""Utility modules for the Thumbnail Studio Service."""
from .logging import LoggerSetup, CorrelatedLogger, MetricsLogger
from .validators import URLValidator

__all__ = [
    "URLValidator",
    "LoggerSetup", "CorrelatedLogger", "MetricsLogger"
]
