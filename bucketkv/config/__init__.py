"""Configuration module for bucketkv."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
