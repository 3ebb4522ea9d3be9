"""
Lateral Proximity Calculator

Classifies a single customer against the two lateral boundaries of its quadrant.
A loyalist can be close to mercenaries (across the loyalty line) or hostages
(across the satisfaction line), but never laterally close to defectors; that
movement is diagonal and handled by the classifier.

For each adjacent quadrant the calculator:
1. Checks the customer lies in the potential search area for the pair, with the
   space cap applied only to the axis that separates the two quadrants
2. Measures the distance to the separating midpoint line
3. Accepts the neighbour when distance <= threshold

Risk level uses the ratio of the smallest qualifying distance to the threshold:
- ratio <= 0.5: HIGH
- ratio <= 0.8: MODERATE
- otherwise: LOW
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from segment_compass.core.config import Settings, get_settings
from segment_compass.models.enums import ProximityRiskLevel, QuadrantType
from segment_compass.models.schemas import DataPoint, Midpoint
from segment_compass.services.distance_calculator import parse_scale
from segment_compass.services.search_area import (
    SearchArea,
    get_potential_ranges,
    nearest_positions,
)


# Lateral neighbours of each main quadrant, in evaluation order
ADJACENT_QUADRANTS: Dict[QuadrantType, Tuple[QuadrantType, QuadrantType]] = {
    QuadrantType.LOYALISTS: (QuadrantType.MERCENARIES, QuadrantType.HOSTAGES),
    QuadrantType.MERCENARIES: (QuadrantType.LOYALISTS, QuadrantType.DEFECTORS),
    QuadrantType.HOSTAGES: (QuadrantType.LOYALISTS, QuadrantType.DEFECTORS),
    QuadrantType.DEFECTORS: (QuadrantType.MERCENARIES, QuadrantType.HOSTAGES),
}

# Pairs separated by the loyalty line; every other adjacent pair is separated
# by the satisfaction line
_LOYALTY_LINE_PAIRS = {
    frozenset({QuadrantType.LOYALISTS, QuadrantType.MERCENARIES}),
    frozenset({QuadrantType.HOSTAGES, QuadrantType.DEFECTORS}),
}


def separating_axis(from_quadrant: QuadrantType, to_quadrant: QuadrantType) -> str:
    """
    Axis whose midpoint line separates two adjacent quadrants.

    Returns:
        "loy" for the loyalty line, "sat" for the satisfaction line
    """
    if frozenset({from_quadrant, to_quadrant}) in _LOYALTY_LINE_PAIRS:
        return "loy"
    return "sat"


def risk_level_for_ratio(distance: float, threshold: float) -> ProximityRiskLevel:
    """
    Risk level from the ratio of distance to threshold.

    Args:
        distance: Distance from the boundary
        threshold: Threshold the distance was compared against

    Returns:
        HIGH at ratio <= 0.5, MODERATE at ratio <= 0.8, otherwise LOW
    """
    if threshold <= 0:
        return ProximityRiskLevel.LOW
    ratio = distance / threshold
    if ratio <= 0.5:
        return ProximityRiskLevel.HIGH
    if ratio <= 0.8:
        return ProximityRiskLevel.MODERATE
    return ProximityRiskLevel.LOW


@dataclass
class LateralProximityResult:
    """
    Outcome of a lateral classification.

    Attributes:
        is_proximity: True when at least one neighbour is within threshold
        proximity_targets: Neighbouring quadrants within threshold
        min_distance: Smallest qualifying distance (0 when there is none)
        risk_level: Risk level of the smallest qualifying distance
    """
    is_proximity: bool = False
    proximity_targets: List[QuadrantType] = field(default_factory=list)
    min_distance: float = 0.0
    risk_level: ProximityRiskLevel = ProximityRiskLevel.LOW


class LateralProximityCalculator:
    """
    Lateral boundary classification for one customer at a time.
    """

    def __init__(
        self,
        satisfaction_scale: str,
        loyalty_scale: str,
        midpoint: Midpoint,
        settings: Optional[Settings] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.satisfaction_range = parse_scale(satisfaction_scale)
        self.loyalty_range = parse_scale(loyalty_scale)
        self.midpoint = midpoint
        self.settings = settings or get_settings()
        self.logger = logger or logging.getLogger(__name__)

    def get_potential_search_area(
        self,
        from_quadrant: QuadrantType,
        to_quadrant: QuadrantType,
    ) -> SearchArea:
        """
        Search area for a lateral pair.

        The space cap and distance filter apply to the separating axis only;
        the other axis keeps the full range of the source quadrant.
        """
        sat_range, loy_range = get_potential_ranges(
            from_quadrant,
            self.satisfaction_range,
            self.loyalty_range,
            self.midpoint,
        )
        max_distance = self.settings.search_area_max_distance

        if separating_axis(from_quadrant, to_quadrant) == "sat":
            sat_positions = nearest_positions(sat_range, self.midpoint.sat, max_distance)
            loy_positions = loy_range
        else:
            sat_positions = sat_range
            loy_positions = nearest_positions(loy_range, self.midpoint.loy, max_distance)

        return SearchArea(sat_positions=list(sat_positions), loy_positions=list(loy_positions))

    def calculate_lateral_distance(
        self,
        point: DataPoint,
        from_quadrant: QuadrantType,
        to_quadrant: QuadrantType,
    ) -> float:
        """Distance from the point to the midpoint line separating the pair."""
        if separating_axis(from_quadrant, to_quadrant) == "loy":
            return abs(point.loyalty - self.midpoint.loy)
        return abs(point.satisfaction - self.midpoint.sat)

    def get_lateral_proximity_classification(
        self,
        point: DataPoint,
        threshold: float,
        current_quadrant: QuadrantType,
    ) -> LateralProximityResult:
        """
        Classify a customer against the lateral boundaries of its quadrant.

        Args:
            point: Customer to classify
            threshold: Maximum distance that still counts as close
            current_quadrant: Quadrant the customer is assigned to

        Returns:
            LateralProximityResult; a non-proximity result for zones or
            neutral customers, which have no lateral neighbours
        """
        neighbours = ADJACENT_QUADRANTS.get(current_quadrant)
        if neighbours is None:
            return LateralProximityResult()

        targets: List[QuadrantType] = []
        min_distance: Optional[float] = None

        for target in neighbours:
            area = self.get_potential_search_area(current_quadrant, target)
            if not area.contains(point.satisfaction, point.loyalty):
                self.logger.debug(
                    f"Lateral: {point.id} at ({point.satisfaction},{point.loyalty}) "
                    f"outside search area for {current_quadrant.value} -> {target.value}"
                )
                continue

            distance = self.calculate_lateral_distance(point, current_quadrant, target)
            if distance <= threshold:
                targets.append(target)
                min_distance = distance if min_distance is None else min(min_distance, distance)
            else:
                self.logger.debug(
                    f"Lateral: {point.id} too far from {target.value} "
                    f"(distance {distance} > threshold {threshold})"
                )

        if min_distance is None:
            return LateralProximityResult()

        return LateralProximityResult(
            is_proximity=True,
            proximity_targets=targets,
            min_distance=min_distance,
            risk_level=risk_level_for_ratio(min_distance, threshold),
        )
