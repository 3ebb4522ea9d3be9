"""
Special Zone Geometry

Corner zones of the satisfaction/loyalty grid:
- apostles: zone_size positions thick from the (max, max) corner, area zone_size**2
- terrorists: zone_size positions thick from the (min, min) corner
- near_apostles: the 1-thick L-shaped ring immediately below and left of the
  apostles zone, area 2 * zone_size + 1

A zone is a union of inclusive rectangles so the L-shape needs no special case.
Distances are Chebyshev, so diagonal neighbours of a zone are 1 step away.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from segment_compass.models.enums import QuadrantType
from segment_compass.services.distance_calculator import ScaleRange


@dataclass(frozen=True)
class ZoneRect:
    """Inclusive rectangle of grid positions."""
    min_sat: int
    max_sat: int
    min_loy: int
    max_loy: int

    @property
    def area(self) -> int:
        return max(0, self.max_sat - self.min_sat + 1) * max(0, self.max_loy - self.min_loy + 1)

    def contains(self, satisfaction: float, loyalty: float) -> bool:
        return (
            self.min_sat <= satisfaction <= self.max_sat
            and self.min_loy <= loyalty <= self.max_loy
        )

    def distance(self, satisfaction: float, loyalty: float) -> float:
        """Chebyshev distance to the rectangle; 0 inside."""
        sat_gap = max(self.min_sat - satisfaction, 0, satisfaction - self.max_sat)
        loy_gap = max(self.min_loy - loyalty, 0, loyalty - self.max_loy)
        return max(sat_gap, loy_gap)


@dataclass
class ZoneRegion:
    """A special zone as a union of rectangles. Empty when the zone is disabled."""
    zone: QuadrantType
    rects: List[ZoneRect] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.area == 0

    @property
    def area(self) -> int:
        # Rectangles of a region never overlap
        return sum(rect.area for rect in self.rects)

    def contains(self, satisfaction: float, loyalty: float) -> bool:
        return any(rect.contains(satisfaction, loyalty) for rect in self.rects)

    def distance(self, satisfaction: float, loyalty: float) -> Optional[float]:
        """Chebyshev distance to the nearest rectangle, or None for an empty region."""
        if self.is_empty:
            return None
        return min(rect.distance(satisfaction, loyalty) for rect in self.rects)


class SpecialZoneGeometry:
    """
    Builds the special zone regions for a scale configuration.

    Zone sizes larger than the scale are clipped to the scale bounds.
    """

    def __init__(
        self,
        satisfaction_range: ScaleRange,
        loyalty_range: ScaleRange,
        apostles_zone_size: int,
        terrorists_zone_size: int,
    ):
        self.satisfaction_range = satisfaction_range
        self.loyalty_range = loyalty_range
        self.apostles_zone_size = apostles_zone_size
        self.terrorists_zone_size = terrorists_zone_size

    def apostles(self) -> ZoneRegion:
        size = self.apostles_zone_size
        if size <= 0:
            return ZoneRegion(QuadrantType.APOSTLES)
        return ZoneRegion(QuadrantType.APOSTLES, [ZoneRect(
            min_sat=max(self.satisfaction_range.maximum - size + 1, self.satisfaction_range.minimum),
            max_sat=self.satisfaction_range.maximum,
            min_loy=max(self.loyalty_range.maximum - size + 1, self.loyalty_range.minimum),
            max_loy=self.loyalty_range.maximum,
        )])

    def terrorists(self) -> ZoneRegion:
        size = self.terrorists_zone_size
        if size <= 0:
            return ZoneRegion(QuadrantType.TERRORISTS)
        return ZoneRegion(QuadrantType.TERRORISTS, [ZoneRect(
            min_sat=self.satisfaction_range.minimum,
            max_sat=min(self.satisfaction_range.minimum + size - 1, self.satisfaction_range.maximum),
            min_loy=self.loyalty_range.minimum,
            max_loy=min(self.loyalty_range.minimum + size - 1, self.loyalty_range.maximum),
        )])

    def has_room_for_near_apostles(self) -> bool:
        """True when the ring below and left of apostles stays on the scale."""
        apostles = self.apostles()
        if apostles.is_empty:
            return False
        corner = apostles.rects[0]
        return (
            corner.min_sat - 1 >= self.satisfaction_range.minimum
            and corner.min_loy - 1 >= self.loyalty_range.minimum
        )

    def near_apostles(self) -> ZoneRegion:
        if not self.has_room_for_near_apostles():
            return ZoneRegion(QuadrantType.NEAR_APOSTLES)

        corner = self.apostles().rects[0]
        ring_sat = corner.min_sat - 1
        ring_loy = corner.min_loy - 1
        return ZoneRegion(QuadrantType.NEAR_APOSTLES, [
            # Left column, including the shared corner cell
            ZoneRect(ring_sat, ring_sat, ring_loy, self.loyalty_range.maximum),
            # Bottom row
            ZoneRect(corner.min_sat, self.satisfaction_range.maximum, ring_loy, ring_loy),
        ])

    def region(self, zone: QuadrantType) -> ZoneRegion:
        """Region for a special zone; empty for anything that is not a zone."""
        if zone == QuadrantType.APOSTLES:
            return self.apostles()
        if zone == QuadrantType.NEAR_APOSTLES:
            return self.near_apostles()
        if zone == QuadrantType.TERRORISTS:
            return self.terrorists()
        return ZoneRegion(zone)
