"""
Core infrastructure package for the Segment Compass backend.

Provides:
- Configuration management via pydantic-settings
- FastAPI dependency injection utilities

This module re-exports key components from submodules for convenient importing:

    from segment_compass.core import get_settings, SettingsDep
"""

from segment_compass.core.config import Settings, get_settings
from segment_compass.core.dependencies import (
    get_settings_dependency,
    SettingsDep,
)

__all__ = [
    'Settings',
    'get_settings',
    'get_settings_dependency',
    'SettingsDep',
]
