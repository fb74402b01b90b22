"""
Application configuration using Pydantic settings.

Configuration comes from environment variables or a .env file.
"""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
