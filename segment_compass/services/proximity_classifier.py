"""
Enhanced Proximity Classifier

Computes, for every customer plotted on the satisfaction/loyalty grid, whether
it sits close enough to a quadrant or special-zone boundary to be "at risk of
movement", and aggregates the results into sixteen directional relationships.

Analysis steps:
1. Availability: scales too small for meaningful quadrants yield an empty
   result flagged unavailable (never an exception)
2. Threshold: the caller's threshold when positive, otherwise the default
   from DistanceCalculator
3. Grouping: customers are grouped by the injected quadrant resolver; excluded
   customers and customers exactly on the midpoint are skipped
4. Lateral analysis (8 relationships) via LateralProximityCalculator
5. Diagonal analysis (4 relationships): Chebyshev distance to the midpoint
   with a fixed threshold, restricted to the diagonal search area
6. Special-zone analysis (4 relationships), gated by the zone display toggles
7. Summary metrics, indicators, and crossroads customers (customers that
   appear in two or more relationships)

A classifier instance only holds immutable configuration, so one instance can
serve concurrent requests.

Usage:
    classifier = EnhancedProximityClassifier("0-10", "0-10", Midpoint(sat=5, loy=5))
    result = classifier.analyze_proximity(data, resolver)
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Union

import numpy as np

from segment_compass.core.config import Settings, get_settings
from segment_compass.models.enums import (
    MAIN_QUADRANTS,
    SPECIAL_ZONES,
    ProximityKind,
    ProximityRiskLevel,
    QuadrantType,
    RelationshipPolarity,
    StrategicValue,
)
from segment_compass.models.schemas import (
    CrossroadsCustomer,
    CrossroadsSummary,
    CustomerProximityDetail,
    DataPoint,
    Midpoint,
    ProximityAnalysis,
    ProximityAnalysisResult,
    ProximityDetail,
    ProximitySettings,
    ProximitySummary,
)
from segment_compass.services.distance_calculator import DistanceCalculator
from segment_compass.services.lateral_proximity import (
    LateralProximityCalculator,
    risk_level_for_ratio,
)
from segment_compass.services.relationships import (
    RELATIONSHIPS,
    get_relationship,
)
from segment_compass.services.search_area import (
    SearchArea,
    get_potential_ranges,
    nearest_positions,
)
from segment_compass.services.special_zones import SpecialZoneGeometry


# Maps a customer to the quadrant it is currently assigned to. Plain strings
# such as "loyalists" are accepted as well as QuadrantType members.
QuadrantResolver = Callable[[DataPoint], Union[QuadrantType, str]]

_STRATEGIC_ORDER = {
    StrategicValue.HIGH: 3,
    StrategicValue.MODERATE: 2,
    StrategicValue.LOW: 1,
}


# =============================================================================
# Scoring helpers
# =============================================================================


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def calculate_risk_score(distance: float, threshold: float) -> int:
    """
    Risk score (0-100) from a distance and the threshold it qualified under.

    Closer means riskier: distance 0 scores 100, distance >= threshold scores 0.
    """
    if threshold <= 0:
        return 0
    normalized = min(distance / threshold, 1.0)
    return max(0, min(100, round_half_up((1.0 - normalized) * 100)))


def special_zone_risk_score(distance: float) -> int:
    """100 inside the zone, 50 one step away, 0 otherwise."""
    if distance == 0:
        return 100
    if distance <= 1:
        return 50
    return 0


def special_zone_risk_level(distance: float) -> ProximityRiskLevel:
    if distance == 0:
        return ProximityRiskLevel.HIGH
    if distance <= 1:
        return ProximityRiskLevel.MODERATE
    return ProximityRiskLevel.LOW


def risk_level_for_score(average_risk_score: float) -> ProximityRiskLevel:
    """Relationship-level risk from the average customer risk score."""
    if average_risk_score >= 75:
        return ProximityRiskLevel.HIGH
    if average_risk_score >= 50:
        return ProximityRiskLevel.MODERATE
    return ProximityRiskLevel.LOW


def calculate_strategic_value(relationship_count: int, risk_score: float) -> StrategicValue:
    """
    Strategic value of a crossroads customer.

    HIGH for 3+ relationships or risk >= 75, MODERATE for risk >= 50, else LOW.
    Only called for customers with at least two relationships.
    """
    if relationship_count >= 3 or risk_score >= 75:
        return StrategicValue.HIGH
    if risk_score >= 50:
        return StrategicValue.MODERATE
    return StrategicValue.LOW


def build_proximity_detail(customers: List[CustomerProximityDetail]) -> ProximityDetail:
    """Aggregate matched customers into a ProximityDetail."""
    if not customers:
        return ProximityDetail()

    positions = {(c.satisfaction, c.loyalty) for c in customers}
    average_distance = float(np.mean([c.distanceFromBoundary for c in customers]))
    average_risk = float(np.mean([c.riskScore for c in customers]))

    return ProximityDetail(
        customerCount=len(customers),
        positionCount=len(positions),
        averageDistance=average_distance,
        riskLevel=risk_level_for_score(average_risk),
        customers=sorted(customers, key=lambda c: c.riskScore, reverse=True),
    )


def _coerce_quadrant(label: Union[QuadrantType, str, None]) -> Optional[QuadrantType]:
    if isinstance(label, QuadrantType):
        return label
    try:
        return QuadrantType(label)
    except ValueError:
        return None


@dataclass
class _CrossroadsEntry:
    customer: CustomerProximityDetail
    relationships: List[str] = field(default_factory=list)
    risk_scores: List[int] = field(default_factory=list)


# =============================================================================
# Classifier
# =============================================================================


class EnhancedProximityClassifier:
    """
    Orchestrates lateral, diagonal and special-zone proximity analysis.

    Args:
        satisfaction_scale: Satisfaction scale string, e.g. "1-5"
        loyalty_scale: Loyalty scale string, e.g. "0-10"
        midpoint: Midpoint dividing the grid
        apostles_zone_size: Apostles thickness from the (max, max) corner
        terrorists_zone_size: Terrorists thickness from the (min, min) corner
        logger: Logger for all tracing; defaults to this module's logger
        settings: Tuning parameters; defaults to the application settings

    Raises:
        ValueError: If either scale string is invalid
    """

    def __init__(
        self,
        satisfaction_scale: str,
        loyalty_scale: str,
        midpoint: Midpoint,
        apostles_zone_size: int = 1,
        terrorists_zone_size: int = 1,
        logger: Optional[logging.Logger] = None,
        settings: Optional[Settings] = None,
    ):
        self.satisfaction_scale = satisfaction_scale
        self.loyalty_scale = loyalty_scale
        self.midpoint = midpoint
        self.apostles_zone_size = apostles_zone_size
        self.terrorists_zone_size = terrorists_zone_size
        self.settings = settings or get_settings()
        self.logger = logger or logging.getLogger(__name__)

        self.distance_calculator = DistanceCalculator(
            satisfaction_scale, loyalty_scale, midpoint, settings=self.settings
        )
        self.lateral_calculator = LateralProximityCalculator(
            satisfaction_scale,
            loyalty_scale,
            midpoint,
            settings=self.settings,
            logger=self.logger,
        )
        self.zones = SpecialZoneGeometry(
            self.distance_calculator.satisfaction_range,
            self.distance_calculator.loyalty_range,
            apostles_zone_size,
            terrorists_zone_size,
        )

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    def analyze_proximity(
        self,
        data: Sequence[DataPoint],
        get_quadrant_for_point: QuadrantResolver,
        is_premium: bool = False,
        user_threshold: Optional[float] = None,
        show_special_zones: bool = False,
        show_near_apostles: bool = False,
    ) -> ProximityAnalysisResult:
        """
        Run the full proximity analysis.

        Args:
            data: Customers to analyze
            get_quadrant_for_point: Resolver returning each customer's assigned quadrant
            is_premium: Carried through to the result settings
            user_threshold: Lateral threshold override; ignored unless positive
            show_special_zones: Enables apostles and terrorists relationships
            show_near_apostles: Enables near-apostles relationships

        Returns:
            ProximityAnalysisResult; flagged unavailable when the scales are too small
        """
        self.logger.info(
            f"Proximity analysis: {len(data)} customers, "
            f"midpoint ({self.midpoint.sat}, {self.midpoint.loy}), "
            f"scales {self.satisfaction_scale} x {self.loyalty_scale}"
        )

        reason = self.distance_calculator.get_unavailability_reason()
        if reason is not None:
            self.logger.info(f"Proximity unavailable: {reason}")
            return self.create_empty_result(
                total_customers=len(data),
                reason=reason,
                is_premium=is_premium,
                show_special_zones=show_special_zones,
                show_near_apostles=show_near_apostles,
            )

        if user_threshold is not None and user_threshold > 0:
            threshold = float(user_threshold)
        else:
            threshold = self.distance_calculator.get_default_threshold()
        self.logger.debug(
            f"Threshold {threshold} (user {user_threshold}, "
            f"directional {self.distance_calculator.get_directional_thresholds()})"
        )

        groups = self.group_customers_by_quadrant(data, get_quadrant_for_point)

        details: Dict[str, ProximityDetail] = {}
        for relationship in RELATIONSHIPS:
            customers = groups.get(relationship.source, [])
            if relationship.kind == ProximityKind.LATERAL:
                detail = self.analyze_lateral_proximity(
                    customers, relationship.source, relationship.target, threshold
                )
            elif relationship.kind == ProximityKind.DIAGONAL:
                detail = self.analyze_diagonal_proximity(
                    customers, relationship.source, relationship.target
                )
            else:
                detail = self.analyze_special_zone_proximity(
                    customers,
                    relationship.source,
                    relationship.target,
                    show_special_zones,
                    show_near_apostles,
                )
            details[relationship.key] = detail

        analysis = ProximityAnalysis(**details)
        summary = self.calculate_summary(analysis)
        crossroads = self.detect_crossroads(analysis)

        self.logger.info(
            f"Proximity analysis complete: {summary.totalProximityCustomers} matches "
            f"across {summary.totalProximityPositions} positions, "
            f"{crossroads.totalCount} crossroads ({crossroads.highValueCount} high value)"
        )

        return ProximityAnalysisResult(
            analysis=analysis,
            summary=summary,
            crossroads=crossroads,
            settings=ProximitySettings(
                proximityThreshold=threshold,
                showSpecialZones=show_special_zones,
                showNearApostles=show_near_apostles,
                isPremium=is_premium,
                totalCustomers=len(data),
                isAvailable=True,
            ),
        )

    def create_empty_result(
        self,
        total_customers: int,
        reason: str,
        is_premium: bool = False,
        show_special_zones: bool = False,
        show_near_apostles: bool = False,
    ) -> ProximityAnalysisResult:
        """Well-formed result with every relationship empty, flagged unavailable."""
        return ProximityAnalysisResult(
            settings=ProximitySettings(
                proximityThreshold=0.0,
                showSpecialZones=show_special_zones,
                showNearApostles=show_near_apostles,
                isPremium=is_premium,
                totalCustomers=total_customers,
                isAvailable=False,
                unavailabilityReason=reason,
            ),
        )

    # -------------------------------------------------------------------------
    # Grouping
    # -------------------------------------------------------------------------

    def is_on_midpoint(self, point: DataPoint) -> bool:
        return point.satisfaction == self.midpoint.sat and point.loyalty == self.midpoint.loy

    def group_customers_by_quadrant(
        self,
        data: Sequence[DataPoint],
        get_quadrant_for_point: QuadrantResolver,
    ) -> Dict[QuadrantType, List[DataPoint]]:
        """
        Group customers by their assigned quadrant.

        Excluded customers and customers on the midpoint are skipped. Labels
        outside the main quadrants and special zones (including neutral) are
        dropped.
        """
        groups: Dict[QuadrantType, List[DataPoint]] = {
            quadrant: [] for quadrant in MAIN_QUADRANTS + SPECIAL_ZONES
        }

        for point in data:
            if point.excluded:
                continue
            if self.is_on_midpoint(point):
                self.logger.debug(f"Skipping midpoint customer {point.id}")
                continue

            quadrant = _coerce_quadrant(get_quadrant_for_point(point))
            if quadrant in groups:
                groups[quadrant].append(point)
            else:
                self.logger.debug(f"Dropping customer {point.id} with quadrant {quadrant}")

        self.logger.debug(
            "Grouped customers: "
            + ", ".join(f"{q.value}={len(members)}" for q, members in groups.items())
        )
        return groups

    # -------------------------------------------------------------------------
    # Lateral
    # -------------------------------------------------------------------------

    def analyze_lateral_proximity(
        self,
        customers: List[DataPoint],
        from_quadrant: QuadrantType,
        to_quadrant: QuadrantType,
        threshold: float,
    ) -> ProximityDetail:
        """Customers of from_quadrant laterally close to to_quadrant."""
        matched: List[CustomerProximityDetail] = []

        for customer in customers:
            classification = self.lateral_calculator.get_lateral_proximity_classification(
                customer, threshold, from_quadrant
            )
            if not classification.is_proximity or to_quadrant not in classification.proximity_targets:
                continue

            matched.append(CustomerProximityDetail(
                id=customer.id,
                name=customer.name or "",
                satisfaction=customer.satisfaction,
                loyalty=customer.loyalty,
                distanceFromBoundary=classification.min_distance,
                currentQuadrant=from_quadrant,
                proximityTargets=list(classification.proximity_targets),
                riskScore=calculate_risk_score(classification.min_distance, threshold),
                riskLevel=classification.risk_level,
            ))

        self.logger.debug(
            f"Lateral {from_quadrant.value} -> {to_quadrant.value}: "
            f"{len(matched)} of {len(customers)} customers"
        )
        return build_proximity_detail(matched)

    # -------------------------------------------------------------------------
    # Diagonal
    # -------------------------------------------------------------------------

    def can_boundary_position_belong_to_quadrant(
        self,
        satisfaction: float,
        loyalty: float,
        quadrant: QuadrantType,
    ) -> bool:
        """
        Whether a position could be assigned to quadrant when points on a
        midpoint line may go to either side. The midpoint itself never qualifies.
        """
        sat_mid, loy_mid = self.midpoint.sat, self.midpoint.loy
        if satisfaction == sat_mid and loyalty == loy_mid:
            return False

        if quadrant == QuadrantType.DEFECTORS:
            return (satisfaction < sat_mid and loyalty <= loy_mid) or (
                satisfaction <= sat_mid and loyalty < loy_mid
            )
        if quadrant == QuadrantType.MERCENARIES:
            return (satisfaction >= sat_mid and loyalty < loy_mid) or (
                satisfaction > sat_mid and loyalty <= loy_mid
            )
        if quadrant == QuadrantType.LOYALISTS:
            return satisfaction >= sat_mid and loyalty >= loy_mid
        if quadrant == QuadrantType.HOSTAGES:
            return (satisfaction < sat_mid and loyalty >= loy_mid) or (
                satisfaction <= sat_mid and loyalty > loy_mid
            )
        return False

    def is_strictly_in_quadrant(
        self,
        satisfaction: float,
        loyalty: float,
        quadrant: QuadrantType,
    ) -> bool:
        """Standard quadrant split, with the midpoint lines on the high side."""
        high_sat = satisfaction >= self.midpoint.sat
        high_loy = loyalty >= self.midpoint.loy

        if quadrant == QuadrantType.LOYALISTS:
            return high_sat and high_loy
        if quadrant == QuadrantType.MERCENARIES:
            return high_sat and not high_loy
        if quadrant == QuadrantType.HOSTAGES:
            return not high_sat and high_loy
        if quadrant == QuadrantType.DEFECTORS:
            return not high_sat and not high_loy
        return False

    def get_diagonal_search_area(self, from_quadrant: QuadrantType) -> SearchArea:
        """
        Search area for diagonal movement out of from_quadrant.

        The space cap and distance filter apply to both axes, and a decimal
        loyalty midpoint starts the high loyalty side at the next integer.
        """
        sat_range, loy_range = get_potential_ranges(
            from_quadrant,
            self.distance_calculator.satisfaction_range,
            self.distance_calculator.loyalty_range,
            self.midpoint,
            ceil_high_loyalty=True,
        )
        max_distance = self.settings.search_area_max_distance
        return SearchArea(
            sat_positions=nearest_positions(sat_range, self.midpoint.sat, max_distance),
            loy_positions=nearest_positions(loy_range, self.midpoint.loy, max_distance),
        )

    def analyze_diagonal_proximity(
        self,
        customers: List[DataPoint],
        from_quadrant: QuadrantType,
        to_quadrant: QuadrantType,
    ) -> ProximityDetail:
        """Customers of from_quadrant diagonally close to the opposite quadrant."""
        if not customers:
            return ProximityDetail()

        threshold = self.settings.diagonal_threshold
        area = self.get_diagonal_search_area(from_quadrant)
        matched: List[CustomerProximityDetail] = []

        for customer in customers:
            sat, loy = customer.satisfaction, customer.loyalty
            if not self.can_boundary_position_belong_to_quadrant(sat, loy, from_quadrant):
                continue
            if self.is_strictly_in_quadrant(sat, loy, to_quadrant):
                continue

            distance = max(abs(sat - self.midpoint.sat), abs(loy - self.midpoint.loy))
            if distance > threshold:
                continue
            if not area.contains(sat, loy):
                self.logger.debug(
                    f"Diagonal: {customer.id} at ({sat},{loy}) meets distance "
                    f"{distance} but is outside the search area"
                )
                continue

            matched.append(CustomerProximityDetail(
                id=customer.id,
                name=customer.name or "",
                satisfaction=sat,
                loyalty=loy,
                distanceFromBoundary=distance,
                currentQuadrant=from_quadrant,
                proximityTargets=[to_quadrant],
                riskScore=calculate_risk_score(distance, threshold),
                riskLevel=risk_level_for_ratio(distance, threshold),
            ))

        self.logger.debug(
            f"Diagonal {from_quadrant.value} -> {to_quadrant.value}: "
            f"{len(matched)} of {len(customers)} customers"
        )
        return build_proximity_detail(matched)

    # -------------------------------------------------------------------------
    # Special zones
    # -------------------------------------------------------------------------

    def should_analyze_special_zone_proximity(
        self,
        from_zone: QuadrantType,
        to_zone: QuadrantType,
        show_special_zones: bool,
        show_near_apostles: bool,
    ) -> bool:
        """
        Activation rule for a special-zone relationship.

        Near-apostles takes precedence over apostles for loyalists, so
        loyalists -> apostles only runs while near-apostles is hidden.
        """
        if from_zone == QuadrantType.LOYALISTS and to_zone == QuadrantType.APOSTLES:
            return show_special_zones and not show_near_apostles
        if from_zone == QuadrantType.LOYALISTS and to_zone == QuadrantType.NEAR_APOSTLES:
            return show_near_apostles
        if from_zone == QuadrantType.NEAR_APOSTLES and to_zone == QuadrantType.APOSTLES:
            return show_near_apostles
        if from_zone == QuadrantType.DEFECTORS and to_zone == QuadrantType.TERRORISTS:
            return show_special_zones
        return False

    def analyze_special_zone_proximity(
        self,
        customers: List[DataPoint],
        from_zone: QuadrantType,
        to_zone: QuadrantType,
        show_special_zones: bool,
        show_near_apostles: bool,
    ) -> ProximityDetail:
        """Customers of from_zone within one step (Chebyshev) of the to_zone region."""
        if not customers:
            return ProximityDetail()

        if not self.should_analyze_special_zone_proximity(
            from_zone, to_zone, show_special_zones, show_near_apostles
        ):
            self.logger.debug(f"Special zone {from_zone.value} -> {to_zone.value} not active")
            return ProximityDetail()

        region = self.zones.region(to_zone)
        if region.area <= 1:
            self.logger.debug(
                f"Special zone {to_zone.value} too small ({region.area} positions), skipping"
            )
            return ProximityDetail()

        max_distance = self.settings.special_zone_max_distance
        matched: List[CustomerProximityDetail] = []

        for customer in customers:
            sat, loy = customer.satisfaction, customer.loyalty
            if region.contains(sat, loy):
                continue

            distance = region.distance(sat, loy)
            if distance is None or distance > max_distance:
                continue

            matched.append(CustomerProximityDetail(
                id=customer.id,
                name=customer.name or "",
                satisfaction=sat,
                loyalty=loy,
                distanceFromBoundary=distance,
                currentQuadrant=from_zone,
                proximityTargets=[to_zone],
                riskScore=special_zone_risk_score(distance),
                riskLevel=special_zone_risk_level(distance),
            ))

        self.logger.debug(
            f"Special zone {from_zone.value} -> {to_zone.value}: "
            f"{len(matched)} of {len(customers)} customers"
        )
        return build_proximity_detail(matched)

    # -------------------------------------------------------------------------
    # Aggregation
    # -------------------------------------------------------------------------

    def calculate_summary(self, analysis: ProximityAnalysis) -> ProximitySummary:
        """Totals, average risk and indicators across every relationship."""
        details = analysis.details()

        risk_scores = [
            customer.riskScore
            for detail in details.values()
            for customer in detail.customers
        ]
        average_risk = round_half_up(float(np.mean(risk_scores))) if risk_scores else 0

        crisis_indicators: List[str] = []
        opportunity_indicators: List[str] = []
        for key, detail in details.items():
            if detail.customerCount < self.settings.indicator_count_threshold:
                continue
            relationship = get_relationship(key)
            indicator = f"{detail.customerCount} {relationship.indicator}"
            if relationship.polarity == RelationshipPolarity.WARNING:
                crisis_indicators.append(indicator)
            else:
                opportunity_indicators.append(indicator)

        return ProximitySummary(
            totalProximityCustomers=sum(d.customerCount for d in details.values()),
            totalProximityPositions=sum(d.positionCount for d in details.values()),
            averageRiskScore=average_risk,
            crisisIndicators=crisis_indicators,
            opportunityIndicators=opportunity_indicators,
        )

    def detect_crossroads(self, analysis: ProximityAnalysis) -> CrossroadsSummary:
        """
        Customers appearing in two or more relationships, each listed once.

        Sorted by strategic value, then average risk score, both descending.
        """
        entries: Dict[str, _CrossroadsEntry] = {}
        for key, detail in analysis.details().items():
            for customer in detail.customers:
                entry = entries.setdefault(customer.id, _CrossroadsEntry(customer=customer))
                entry.relationships.append(key)
                entry.risk_scores.append(customer.riskScore)

        crossroads: List[CrossroadsCustomer] = []
        for entry in entries.values():
            if len(entry.relationships) < 2:
                continue
            risk_score = round_half_up(float(np.mean(entry.risk_scores)))
            crossroads.append(CrossroadsCustomer(
                id=entry.customer.id,
                name=entry.customer.name,
                satisfaction=entry.customer.satisfaction,
                loyalty=entry.customer.loyalty,
                currentQuadrant=entry.customer.currentQuadrant,
                proximityRelationships=entry.relationships,
                strategicValue=calculate_strategic_value(len(entry.relationships), risk_score),
                riskScore=risk_score,
            ))

        crossroads.sort(
            key=lambda c: (_STRATEGIC_ORDER[c.strategicValue], c.riskScore),
            reverse=True,
        )

        return CrossroadsSummary(
            customers=crossroads,
            totalCount=len(crossroads),
            highValueCount=sum(1 for c in crossroads if c.strategicValue == StrategicValue.HIGH),
        )


__all__ = [
    "QuadrantResolver",
    "EnhancedProximityClassifier",
    "calculate_risk_score",
    "calculate_strategic_value",
    "build_proximity_detail",
    "risk_level_for_score",
    "round_half_up",
    "special_zone_risk_score",
    "special_zone_risk_level",
]
