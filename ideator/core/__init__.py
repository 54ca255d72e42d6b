"""Core application modules."""
from .config import settings, ProductionConfig

__all__ = ["settings", "ProductionConfig"]
