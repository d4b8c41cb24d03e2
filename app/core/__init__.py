"""Core application modules."""
from .config import settings, QualityConfig, CanvasConfig

__all__ = ["settings", "QualityConfig", "CanvasConfig"]
