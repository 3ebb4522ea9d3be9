"""
Distance Calculator Service

Computes the geometry a proximity analysis needs from a scale configuration:
the distance from the midpoint to each scale bound, one lateral threshold per
direction, and the single default threshold used for lateral proximity.

The four quadrants are generally not the same size. On a 1-10 scale with a
midpoint of 7 the low side spans 6 steps while the high side spans 3, so a
threshold is derived per direction and the default is the smallest of them.
That keeps "close" symmetric: no quadrant gets a wider band than another.

Proximity is declared unavailable when any quadrant spans one step or less on
either axis, because every point of such a quadrant would sit on a boundary.

Usage:
    from segment_compass.services.distance_calculator import DistanceCalculator

    calculator = DistanceCalculator("0-10", "0-10", Midpoint(sat=5, loy=5))
    if calculator.is_proximity_available():
        threshold = calculator.get_default_threshold()  # 1.0
"""

from dataclasses import dataclass
from typing import Dict, Optional

from segment_compass.core.config import Settings, get_settings
from segment_compass.models.schemas import Midpoint


# A quadrant must span more than this many steps on both axes
MIN_QUADRANT_SPAN: float = 1.0


@dataclass(frozen=True)
class ScaleRange:
    """
    Inclusive integer bounds of one axis, parsed from a string like "1-7".

    Attributes:
        minimum: Lowest allowed score
        maximum: Highest allowed score
    """
    minimum: int
    maximum: int

    @property
    def positions(self) -> int:
        """Number of integer positions on the axis."""
        return self.maximum - self.minimum + 1


def parse_scale(scale: str) -> ScaleRange:
    """
    Parse a scale string into a ScaleRange.

    Args:
        scale: Scale string in "<min>-<max>" form, e.g. "0-10" or "1-5"

    Returns:
        ScaleRange with inclusive bounds

    Raises:
        ValueError: If the string is malformed or min is not below max
    """
    parts = str(scale).strip().split("-")
    if len(parts) != 2:
        raise ValueError(f"Invalid scale '{scale}': expected '<min>-<max>'")

    try:
        minimum, maximum = int(parts[0]), int(parts[1])
    except ValueError:
        raise ValueError(f"Invalid scale '{scale}': bounds must be integers")

    if minimum >= maximum:
        raise ValueError(f"Invalid scale '{scale}': minimum must be below maximum")

    return ScaleRange(minimum=minimum, maximum=maximum)


@dataclass(frozen=True)
class BoundaryDistances:
    """
    Distance from the midpoint to each scale bound.

    Attributes:
        sat_to_min: Midpoint satisfaction minus the satisfaction minimum
        sat_to_max: Satisfaction maximum minus the midpoint satisfaction
        loy_to_min: Midpoint loyalty minus the loyalty minimum
        loy_to_max: Loyalty maximum minus the midpoint loyalty
    """
    sat_to_min: float
    sat_to_max: float
    loy_to_min: float
    loy_to_max: float

    def as_dict(self) -> Dict[str, float]:
        return {
            "satToMin": self.sat_to_min,
            "satToMax": self.sat_to_max,
            "loyToMin": self.loy_to_min,
            "loyToMax": self.loy_to_max,
        }


class DistanceCalculator:
    """
    Pure function of (satisfaction scale, loyalty scale, midpoint).

    Directional thresholds are keyed by the direction a customer would move:
    - left: toward lower satisfaction (across the satisfaction line)
    - right: toward higher satisfaction
    - down: toward lower loyalty (across the loyalty line)
    - up: toward higher loyalty
    """

    def __init__(
        self,
        satisfaction_scale: str,
        loyalty_scale: str,
        midpoint: Midpoint,
        settings: Optional[Settings] = None,
    ):
        self.satisfaction_range = parse_scale(satisfaction_scale)
        self.loyalty_range = parse_scale(loyalty_scale)
        self.midpoint = midpoint
        self.settings = settings or get_settings()

    def get_boundary_distances(self) -> BoundaryDistances:
        """Distances from the midpoint to the four scale bounds."""
        return BoundaryDistances(
            sat_to_min=self.midpoint.sat - self.satisfaction_range.minimum,
            sat_to_max=self.satisfaction_range.maximum - self.midpoint.sat,
            loy_to_min=self.midpoint.loy - self.loyalty_range.minimum,
            loy_to_max=self.loyalty_range.maximum - self.midpoint.loy,
        )

    def _threshold_for(self, distance: float) -> float:
        return max(
            self.settings.proximity_min_threshold,
            distance * self.settings.proximity_threshold_ratio,
        )

    def get_directional_thresholds(self) -> Dict[str, float]:
        """
        One lateral threshold per direction.

        Each is max(proximity_min_threshold, distance * proximity_threshold_ratio).
        """
        distances = self.get_boundary_distances()
        return {
            "left": self._threshold_for(distances.sat_to_min),
            "right": self._threshold_for(distances.sat_to_max),
            "down": self._threshold_for(distances.loy_to_min),
            "up": self._threshold_for(distances.loy_to_max),
        }

    def get_default_threshold(self) -> float:
        """Smallest directional threshold."""
        return min(self.get_directional_thresholds().values())

    def get_unavailability_reason(self) -> Optional[str]:
        """
        Explain why proximity is unavailable, or None when it is available.

        The satisfaction axis is checked before the loyalty axis.
        """
        distances = self.get_boundary_distances()

        if min(distances.sat_to_min, distances.sat_to_max) <= MIN_QUADRANT_SPAN:
            return "Scale too small on the satisfaction axis"
        if min(distances.loy_to_min, distances.loy_to_max) <= MIN_QUADRANT_SPAN:
            return "Scale too small on the loyalty axis"

        return None

    def is_proximity_available(self) -> bool:
        return self.get_unavailability_reason() is None
