"""
Quadrant Assignment Service

Default quadrant resolver for callers that do not pre-assign quadrants.

Assignment order for a customer:
1. Manual assignment keyed by "<id>_<satisfaction>_<loyalty>"
2. Neutral when the customer sits exactly on the midpoint
3. Natural quadrant: with special zones shown, near-apostles (when enabled),
   then apostles, then terrorists; otherwise the standard split where a
   score equal to the midpoint counts as the high side
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Sequence

from segment_compass.models.enums import MAIN_QUADRANTS, SPECIAL_ZONES, QuadrantType
from segment_compass.models.schemas import DataPoint, Midpoint
from segment_compass.services.distance_calculator import parse_scale
from segment_compass.services.special_zones import SpecialZoneGeometry


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuadrantConfig:
    """
    Grid configuration needed to place a customer.

    Attributes:
        satisfaction_scale: Satisfaction scale string, e.g. "1-5"
        loyalty_scale: Loyalty scale string, e.g. "1-5"
        midpoint: Midpoint dividing the grid
        apostles_zone_size: Apostles thickness from the (max, max) corner
        terrorists_zone_size: Terrorists thickness from the (min, min) corner
        show_special_zones: Whether corner zones take part in assignment
        show_near_apostles: Whether the near-apostles ring takes part
    """
    satisfaction_scale: str
    loyalty_scale: str
    midpoint: Midpoint
    apostles_zone_size: int = 1
    terrorists_zone_size: int = 1
    show_special_zones: bool = False
    show_near_apostles: bool = False

    def zone_geometry(self) -> SpecialZoneGeometry:
        return SpecialZoneGeometry(
            parse_scale(self.satisfaction_scale),
            parse_scale(self.loyalty_scale),
            self.apostles_zone_size,
            self.terrorists_zone_size,
        )


def _format_coordinate(value: float) -> str:
    # 4.0 -> "4", 4.5 -> "4.5"
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def point_key(point: DataPoint) -> str:
    """Manual assignment key: "<id>_<satisfaction>_<loyalty>"."""
    return (
        f"{point.id}_{_format_coordinate(point.satisfaction)}"
        f"_{_format_coordinate(point.loyalty)}"
    )


def _standard_quadrant(point: DataPoint, midpoint: Midpoint) -> QuadrantType:
    high_sat = point.satisfaction >= midpoint.sat
    high_loy = point.loyalty >= midpoint.loy
    if high_sat and high_loy:
        return QuadrantType.LOYALISTS
    if high_sat:
        return QuadrantType.MERCENARIES
    if high_loy:
        return QuadrantType.HOSTAGES
    return QuadrantType.DEFECTORS


def get_natural_quadrant_for_point(
    point: DataPoint,
    config: QuadrantConfig,
    zones: Optional[SpecialZoneGeometry] = None,
) -> QuadrantType:
    """
    Quadrant from position alone, ignoring manual assignments.

    Args:
        point: Customer to place
        config: Grid configuration
        zones: Prebuilt zone geometry, built from config when omitted

    Returns:
        QuadrantType for the point
    """
    if config.show_special_zones:
        zones = zones or config.zone_geometry()
        sat, loy = point.satisfaction, point.loyalty

        # Near-apostles is checked first so the L-shape wins over the corner
        if config.show_near_apostles and config.apostles_zone_size > 0:
            if zones.near_apostles().contains(sat, loy):
                return QuadrantType.NEAR_APOSTLES

        if zones.apostles().contains(sat, loy):
            return QuadrantType.APOSTLES

        if zones.terrorists().contains(sat, loy):
            return QuadrantType.TERRORISTS

    return _standard_quadrant(point, config.midpoint)


def get_quadrant_for_point(
    point: DataPoint,
    manual_assignments: Mapping[str, QuadrantType],
    config: QuadrantConfig,
    zones: Optional[SpecialZoneGeometry] = None,
) -> QuadrantType:
    """Manual assignment, then neutral for the midpoint, then the natural quadrant."""
    manual = manual_assignments.get(point_key(point))
    if manual is not None:
        return QuadrantType(manual)

    if point.satisfaction == config.midpoint.sat and point.loyalty == config.midpoint.loy:
        return QuadrantType.NEUTRAL

    return get_natural_quadrant_for_point(point, config, zones)


def build_quadrant_resolver(
    config: QuadrantConfig,
    manual_assignments: Optional[Mapping[str, QuadrantType]] = None,
) -> Callable[[DataPoint], QuadrantType]:
    """
    Resolver suitable for EnhancedProximityClassifier.analyze_proximity.

    Zone geometry is built once and shared by every call.
    """
    assignments = dict(manual_assignments or {})
    zones = config.zone_geometry()

    def resolve(point: DataPoint) -> QuadrantType:
        return get_quadrant_for_point(point, assignments, config, zones)

    return resolve


def calculate_distribution(
    data: Sequence[DataPoint],
    resolver: Callable[[DataPoint], QuadrantType],
    midpoint: Midpoint,
) -> Dict[str, int]:
    """
    Customers per quadrant and special zone.

    Excluded customers and customers on the midpoint are not counted.
    """
    counts: Counter = Counter()
    for point in data:
        if point.excluded:
            continue
        if point.satisfaction == midpoint.sat and point.loyalty == midpoint.loy:
            continue
        counts[QuadrantType(resolver(point)).value] += 1

    distribution = {
        quadrant.value: counts.get(quadrant.value, 0)
        for quadrant in MAIN_QUADRANTS + SPECIAL_ZONES
    }
    logger.debug(f"Quadrant distribution: {distribution}")
    return distribution


__all__ = [
    "QuadrantConfig",
    "point_key",
    "get_natural_quadrant_for_point",
    "get_quadrant_for_point",
    "build_quadrant_resolver",
    "calculate_distribution",
]
