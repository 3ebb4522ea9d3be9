"""
Settings and environment management module for the Segment Compass backend.

This module provides centralized configuration management using pydantic-settings,
which automatically loads settings from environment variables and .env files.

Key Features:
- Environment variable validation and type coercion
- Sensible defaults for development
- Singleton pattern via @lru_cache for efficient access
- Proximity engine tuning parameters (thresholds, space caps, indicator counts)

Proximity Configuration Defaults:
- proximity_min_threshold: 1.0 (Floor for any directional lateral threshold)
- proximity_threshold_ratio: 0.2 (Share of the midpoint-to-bound distance counted as "close")
- diagonal_threshold: 2.0 (Chebyshev distance for crisis/redemption diagonals)
- search_area_max_distance: 2.0 (Farthest search-area position from the midpoint)
- special_zone_max_distance: 1 (Only adjacent cells count for special zones)
- indicator_count_threshold: 3 (Customers needed before an indicator is raised)

Usage:
    from segment_compass.core.config import get_settings

    settings = get_settings()
    threshold = settings.diagonal_threshold
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    The class inherits from pydantic-settings BaseSettings which provides:
    - Automatic loading from environment variables (case-insensitive)
    - Support for .env file loading
    - Type validation and coercion
    - Default values for optional settings

    Attributes:
        log_level: Root logging level applied by the application entry point.
        cors_origins: Origins allowed to call the API from a browser.
        proximity_min_threshold: Lower bound for directional lateral thresholds.
        proximity_threshold_ratio: Fraction of the midpoint-to-bound distance
            that still counts as close to a lateral boundary.
        diagonal_threshold: Chebyshev distance threshold for diagonal proximity.
        search_area_max_distance: Maximum distance from the midpoint for a
            position to remain in a potential search area.
        special_zone_max_distance: Maximum Chebyshev distance to a special zone.
        indicator_count_threshold: Customer count at which a relationship raises
            a crisis or opportunity indicator.
        default_apostles_zone_size: Apostles thickness when a request omits it.
        default_terrorists_zone_size: Terrorists thickness when a request omits it.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',  # Ignore extra environment variables not defined in this class
        case_sensitive=False,
    )

    # =========================================================================
    # Service
    # =========================================================================

    log_level: str = 'INFO'

    cors_origins: List[str] = [
        'http://localhost:3000',
        'http://127.0.0.1:3000',
    ]

    # =========================================================================
    # Lateral Proximity
    # =========================================================================

    # Directional threshold = max(proximity_min_threshold, distance * ratio)
    # On a 0-10 scale with midpoint 5 this yields exactly 1.0 in every direction
    proximity_min_threshold: float = 1.0
    proximity_threshold_ratio: float = 0.2

    # =========================================================================
    # Diagonal and Search Area
    # =========================================================================

    diagonal_threshold: float = 2.0
    search_area_max_distance: float = 2.0

    # =========================================================================
    # Special Zones
    # =========================================================================

    # Chebyshev distance, so diagonal neighbours of a zone count as 1 step away
    special_zone_max_distance: int = 1
    default_apostles_zone_size: int = 1
    default_terrorists_zone_size: int = 1

    # =========================================================================
    # Summary
    # =========================================================================

    indicator_count_threshold: int = 3


@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings: The application settings instance with all configuration values.

    Raises:
        pydantic.ValidationError: If an environment variable has an invalid value.

    Note:
        To refresh settings in tests, you can clear the cache:
        >>> get_settings.cache_clear()
    """
    return Settings()
