"""
Pytest Configuration and Shared Fixtures for Segment Compass Tests.

This module provides fixtures and configuration for all tests, supporting:
- Async test execution with pytest-asyncio
- Default settings with a fresh get_settings cache per test
- Scale/midpoint configurations used across the suite
- A data point factory and a fixed quadrant resolver

Dependencies:
- pytest
- pytest-asyncio
- httpx (FastAPI TestClient)
"""

from typing import Callable, Dict, Generator, List

import pytest

from segment_compass.core.config import Settings, get_settings
from segment_compass.models import DataPoint, Midpoint, QuadrantType


# ============================================================
# PYTEST PLUGINS CONFIGURATION
# ============================================================

# Configure pytest-asyncio for async test support
pytest_plugins: List[str] = ['pytest_asyncio']


# ============================================================
# PYTEST HOOKS
# ============================================================

def pytest_configure(config) -> None:
    """
    Configure custom pytest markers for test organization.

    Custom markers defined:
    - api: Marks tests that exercise the FastAPI application
    - scenario: Marks end-to-end proximity scenarios on realistic scales
    """
    config.addinivalue_line(
        'markers',
        'api: marks tests that exercise the FastAPI application'
    )
    config.addinivalue_line(
        'markers',
        'scenario: marks end-to-end proximity scenarios on realistic scales'
    )


# ============================================================
# SETTINGS FIXTURES
# ============================================================

@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """
    Clear the cached Settings before and after each test so environment
    changes made by one test never leak into another.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings with every default value."""
    return Settings()


# ============================================================
# GRID FIXTURES
# ============================================================

@pytest.fixture
def midpoint_ten() -> Midpoint:
    """Midpoint of a 0-10 scale."""
    return Midpoint(sat=5, loy=5)


@pytest.fixture
def midpoint_five() -> Midpoint:
    """Midpoint of a 1-5 scale."""
    return Midpoint(sat=3, loy=3)


# ============================================================
# DATA FIXTURES
# ============================================================

@pytest.fixture
def make_point() -> Callable[..., DataPoint]:
    """
    Factory for DataPoint objects.

    Usage:
        point = make_point("c1", 4, 5)
        hidden = make_point("c2", 4, 5, excluded=True)
    """
    def _make(id: str, satisfaction: float, loyalty: float, **kwargs) -> DataPoint:
        return DataPoint(
            id=id,
            name=kwargs.pop("name", f"Customer {id}"),
            satisfaction=satisfaction,
            loyalty=loyalty,
            **kwargs,
        )
    return _make


@pytest.fixture
def fixed_resolver() -> Callable[[Dict[str, QuadrantType]], Callable[[DataPoint], QuadrantType]]:
    """
    Build a resolver from an id -> quadrant map.

    Unmapped ids resolve to neutral, which the classifier ignores.
    """
    def _build(assignments: Dict[str, QuadrantType]) -> Callable[[DataPoint], QuadrantType]:
        def resolve(point: DataPoint) -> QuadrantType:
            return assignments.get(point.id, QuadrantType.NEUTRAL)
        return resolve
    return _build
