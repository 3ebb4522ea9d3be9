"""
Segment Compass Services Module

This module contains the business logic of the proximity engine.
Every service is stateless and testable in isolation.

Services:
- distance_calculator: Scale parsing, boundary distances and thresholds
- search_area: Space-capped potential search areas
- special_zones: Apostles, near-apostles and terrorists geometry
- lateral_proximity: Lateral boundary classification for one customer
- relationships: Registry of the sixteen proximity relationships
- proximity_classifier: Full proximity analysis (EnhancedProximityClassifier)
- quadrant_assignment: Default quadrant resolver
- proximity_evaluator: Risks and opportunities for reports
- export: pandas/CSV export of matched customers

All services are designed to be consumed by the API layer (segment_compass/api/).
"""

# =============================================================================
# Geometry
# =============================================================================

from segment_compass.services.distance_calculator import (
    BoundaryDistances,
    DistanceCalculator,
    ScaleRange,
    parse_scale,
)
from segment_compass.services.search_area import (
    SearchArea,
    get_potential_ranges,
    get_space_cap_limit,
    nearest_positions,
)
from segment_compass.services.special_zones import (
    SpecialZoneGeometry,
    ZoneRect,
    ZoneRegion,
)

# =============================================================================
# Classification
# =============================================================================

from segment_compass.services.lateral_proximity import (
    LateralProximityCalculator,
    LateralProximityResult,
)
from segment_compass.services.relationships import (
    RELATIONSHIPS,
    Relationship,
    get_relationship,
)
from segment_compass.services.proximity_classifier import (
    EnhancedProximityClassifier,
    QuadrantResolver,
)
from segment_compass.services.quadrant_assignment import (
    QuadrantConfig,
    build_quadrant_resolver,
    calculate_distribution,
    get_natural_quadrant_for_point,
    get_quadrant_for_point,
    point_key,
)

# =============================================================================
# Reporting
# =============================================================================

from segment_compass.services.proximity_evaluator import evaluate_proximity
from segment_compass.services.export import proximity_to_csv, proximity_to_dataframe

__all__ = [
    # Geometry
    "BoundaryDistances",
    "DistanceCalculator",
    "ScaleRange",
    "parse_scale",
    "SearchArea",
    "get_potential_ranges",
    "get_space_cap_limit",
    "nearest_positions",
    "SpecialZoneGeometry",
    "ZoneRect",
    "ZoneRegion",
    # Classification
    "LateralProximityCalculator",
    "LateralProximityResult",
    "RELATIONSHIPS",
    "Relationship",
    "get_relationship",
    "EnhancedProximityClassifier",
    "QuadrantResolver",
    "QuadrantConfig",
    "build_quadrant_resolver",
    "calculate_distribution",
    "get_natural_quadrant_for_point",
    "get_quadrant_for_point",
    "point_key",
    # Reporting
    "evaluate_proximity",
    "proximity_to_csv",
    "proximity_to_dataframe",
]
