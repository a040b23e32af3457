"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from lawsearch.configs.indexing import IndexingSettings
from lawsearch.configs.settings import Settings, get_settings

__all__ = ["IndexingSettings", "Settings", "get_settings"]
