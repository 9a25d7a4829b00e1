"""Configuration management for cdhit-clstr."""

from .settings import get_settings, Settings

__all__ = ["get_settings", "Settings"]
