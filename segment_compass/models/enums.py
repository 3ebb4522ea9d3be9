"""
Enumeration definitions for the Segment Compass backend.

All enums inherit from both `str` and `Enum` to ensure JSON serialization compatibility
with Pydantic models, enabling automatic serialization/deserialization in API responses.
"""

from enum import Enum


class QuadrantType(str, Enum):
    """
    Region of the satisfaction/loyalty grid a customer is assigned to.

    The four quadrants split the grid at the midpoint:
    - loyalists: high satisfaction, high loyalty
    - mercenaries: high satisfaction, low loyalty
    - hostages: low satisfaction, high loyalty
    - defectors: low satisfaction, low loyalty

    Special zones sit in the corners when enabled:
    - apostles: corner nearest (max, max)
    - near_apostles: 1-thick ring adjacent to apostles
    - terrorists: corner nearest (min, min)

    - neutral: customer exactly on the midpoint ("fence-sitter")
    """
    LOYALISTS = "loyalists"
    MERCENARIES = "mercenaries"
    HOSTAGES = "hostages"
    DEFECTORS = "defectors"
    APOSTLES = "apostles"
    NEAR_APOSTLES = "near_apostles"
    TERRORISTS = "terrorists"
    NEUTRAL = "neutral"


# The four main quadrants, in display order
MAIN_QUADRANTS = (
    QuadrantType.LOYALISTS,
    QuadrantType.MERCENARIES,
    QuadrantType.HOSTAGES,
    QuadrantType.DEFECTORS,
)

SPECIAL_ZONES = (
    QuadrantType.APOSTLES,
    QuadrantType.NEAR_APOSTLES,
    QuadrantType.TERRORISTS,
)


class ProximityRiskLevel(str, Enum):
    """
    Risk that a customer (or a relationship as a whole) moves across a boundary.

    - LOW: Far from the boundary relative to the threshold
    - MODERATE: Within 80% of the threshold
    - HIGH: Within half of the threshold
    """
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"


class StrategicValue(str, Enum):
    """
    Strategic value of a crossroads customer.

    - HIGH: 3+ relationships, or 2+ relationships with risk >= 75
    - MODERATE: 2+ relationships with risk >= 50
    - LOW: Everything else
    """
    HIGH = "HIGH"
    MODERATE = "MODERATE"
    LOW = "LOW"


class ProximityKind(str, Enum):
    """
    Geometry used to evaluate a proximity relationship.

    - lateral: adjacent quadrant across one midpoint line
    - diagonal: opposite quadrant across the midpoint itself
    - special_zone: corner zone (apostles, near-apostles, terrorists)
    """
    LATERAL = "lateral"
    DIAGONAL = "diagonal"
    SPECIAL_ZONE = "special_zone"


class Severity(str, Enum):
    """
    Report severity (for risks) or impact (for opportunities).
    """
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RelationshipPolarity(str, Enum):
    """
    Whether movement along a relationship is bad news or good news.

    - warning: toward a less loyal or less satisfied segment
    - opportunity: toward a more loyal or more satisfied segment
    """
    WARNING = "warning"
    OPPORTUNITY = "opportunity"
