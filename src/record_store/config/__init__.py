"""Configuration management for the record store.

Usage:
    >>> from record_store.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.DATABASE_URL)
"""

from record_store.config.settings import IN_MEMORY_URL, Settings, get_settings

__all__ = [
    "IN_MEMORY_URL",
    "Settings",
    "get_settings",
]
