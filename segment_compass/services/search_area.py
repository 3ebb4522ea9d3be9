"""
Potential search areas for lateral and diagonal proximity.

Raw distance alone over-counts on small scales: on a 1-5 scale every defector is
within 2.0 of the midpoint. A search area restricts candidates to the scale
positions of the source quadrant that sit nearest the midpoint, limited by the
space cap:

    positions available    positions kept
    0                      0
    1, 2 or 3              1
    4 or more              2

After the cap, positions farther than search_area_max_distance from the midpoint
are dropped. Membership is a range check over the kept positions so decimal
scores are supported.
"""

import math
from dataclasses import dataclass, field
from typing import List, Tuple

from segment_compass.models.enums import QuadrantType
from segment_compass.models.schemas import Midpoint
from segment_compass.services.distance_calculator import ScaleRange


def get_space_cap_limit(available_positions: int) -> int:
    """
    Number of positions nearest the midpoint that may qualify.

    Args:
        available_positions: Positions in the source quadrant along one axis

    Returns:
        0 when nothing is available, 1 for up to three positions, otherwise 2
    """
    if available_positions <= 0:
        return 0
    if available_positions <= 3:
        return 1
    return 2


@dataclass
class SearchArea:
    """Positions on each axis that a candidate must fall within."""
    sat_positions: List[float] = field(default_factory=list)
    loy_positions: List[float] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.sat_positions or not self.loy_positions

    def contains(self, satisfaction: float, loyalty: float) -> bool:
        if self.is_empty:
            return False
        in_sat = min(self.sat_positions) <= satisfaction <= max(self.sat_positions)
        in_loy = min(self.loy_positions) <= loyalty <= max(self.loy_positions)
        return in_sat and in_loy


def _span(start: int, stop: int) -> List[int]:
    # Inclusive on both ends; empty when start > stop
    return list(range(start, stop + 1))


def get_potential_ranges(
    quadrant: QuadrantType,
    satisfaction_range: ScaleRange,
    loyalty_range: ScaleRange,
    midpoint: Midpoint,
    ceil_high_loyalty: bool = False,
) -> Tuple[List[int], List[int]]:
    """
    Integer positions a quadrant can occupy on each axis.

    The midpoint line (floored) is included on both sides. With
    ceil_high_loyalty, a decimal loyalty midpoint starts the high side at the
    next integer instead, which is how diagonal analysis treats it.

    Returns:
        (satisfaction positions, loyalty positions); both empty for a
        quadrant outside the four main ones
    """
    sat_floor = math.floor(midpoint.sat)
    loy_floor = math.floor(midpoint.loy)
    loy_high_start = loy_floor
    if ceil_high_loyalty and midpoint.loy % 1 != 0:
        loy_high_start = math.ceil(midpoint.loy)

    sat_low = _span(satisfaction_range.minimum, sat_floor)
    sat_high = _span(sat_floor, satisfaction_range.maximum)
    loy_low = _span(loyalty_range.minimum, loy_floor)
    loy_high = _span(loy_high_start, loyalty_range.maximum)

    if quadrant == QuadrantType.LOYALISTS:
        return sat_high, loy_high
    if quadrant == QuadrantType.MERCENARIES:
        return sat_high, loy_low
    if quadrant == QuadrantType.HOSTAGES:
        return sat_low, loy_high
    if quadrant == QuadrantType.DEFECTORS:
        return sat_low, loy_low
    return [], []


def nearest_positions(
    positions: List[int],
    center: float,
    max_distance: float,
) -> List[int]:
    """
    Apply the space cap to positions, keeping those nearest center.

    Ties keep their original order. The distance filter runs after the cap.
    """
    cap = get_space_cap_limit(len(positions))
    ranked = sorted(positions, key=lambda pos: abs(pos - center))[:cap]
    return [pos for pos in ranked if abs(pos - center) <= max_distance]
