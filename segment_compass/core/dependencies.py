"""
FastAPI dependency injection module for the Segment Compass backend.

Key Dependencies Provided:
- get_settings_dependency: Returns the cached Settings singleton
- SettingsDep: Type alias for injecting Settings into endpoints

Keeping configuration behind a dependency lets tests swap it out with:

    app.dependency_overrides[get_settings_dependency] = lambda: custom_settings
"""

from typing import Annotated

from fastapi import Depends

from segment_compass.core.config import Settings, get_settings


def get_settings_dependency() -> Settings:
    """
    Return the Settings singleton instance.

    This is a thin wrapper around get_settings() so FastAPI's dependency
    override mechanism can replace it in tests.

    Returns:
        Settings: The cached Settings instance with all configuration values.
    """
    return get_settings()


# Usage: async def endpoint(settings: SettingsDep)
SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]
