"""
Configuration module for specref.

Uses pydantic-settings for environment variable loading.
"""

from specref.config.settings import (
    Settings,
    find_project_root,
)

__all__ = ["Settings", "find_project_root"]
