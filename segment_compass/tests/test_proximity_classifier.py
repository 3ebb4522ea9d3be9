"""
Unit tests for EnhancedProximityClassifier.

Scenarios use a 0-10 grid with midpoint (5, 5), where the default lateral
threshold is 1.0 and the diagonal threshold is 2.0, unless stated otherwise.
Quadrants are assigned through a fixed id -> quadrant resolver so each test
controls grouping explicitly.
"""

import logging

import pytest

from segment_compass.models import (
    Midpoint,
    ProximityRiskLevel,
    QuadrantType,
    StrategicValue,
)
from segment_compass.services.proximity_classifier import (
    EnhancedProximityClassifier,
    calculate_risk_score,
    calculate_strategic_value,
    risk_level_for_score,
    round_half_up,
)


L = QuadrantType.LOYALISTS
M = QuadrantType.MERCENARIES
H = QuadrantType.HOSTAGES
D = QuadrantType.DEFECTORS


@pytest.fixture
def classifier(midpoint_ten: Midpoint) -> EnhancedProximityClassifier:
    return EnhancedProximityClassifier("0-10", "0-10", midpoint_ten)


@pytest.fixture
def zone_classifier(midpoint_ten: Midpoint) -> EnhancedProximityClassifier:
    """0-10 grid with apostles and terrorists two positions thick."""
    return EnhancedProximityClassifier(
        "0-10", "0-10", midpoint_ten, apostles_zone_size=2, terrorists_zone_size=2
    )


def _ids(detail):
    return [customer.id for customer in detail.customers]


# =============================================================================
# Test Class: TestScoringHelpers
# =============================================================================

class TestScoringHelpers:
    """Tests for the module-level scoring helpers."""

    @pytest.mark.parametrize("distance,threshold,expected", [
        (0.0, 1.0, 100),
        (1.0, 1.0, 0),
        (1.0, 2.0, 50),
        (0.25, 2.0, 88),
        (3.0, 1.0, 0),
    ])
    def test_risk_score(self, distance, threshold, expected):
        assert calculate_risk_score(distance, threshold) == expected

    def test_round_half_up(self):
        assert round_half_up(62.5) == 63
        assert round_half_up(83.33) == 83

    @pytest.mark.parametrize("score,expected", [
        (100, ProximityRiskLevel.HIGH),
        (75, ProximityRiskLevel.HIGH),
        (74.9, ProximityRiskLevel.MODERATE),
        (50, ProximityRiskLevel.MODERATE),
        (49, ProximityRiskLevel.LOW),
    ])
    def test_detail_risk_level(self, score, expected):
        assert risk_level_for_score(score) == expected

    @pytest.mark.parametrize("count,risk,expected", [
        (3, 0, StrategicValue.HIGH),
        (2, 75, StrategicValue.HIGH),
        (2, 74, StrategicValue.MODERATE),
        (2, 50, StrategicValue.MODERATE),
        (2, 49, StrategicValue.LOW),
    ])
    def test_strategic_value(self, count, risk, expected):
        assert calculate_strategic_value(count, risk) == expected


# =============================================================================
# Test Class: TestAvailabilityAndThreshold
# =============================================================================

class TestAvailabilityAndThreshold:
    """Tests for unavailable scales and threshold selection."""

    def test_unavailable_scale_returns_empty_result(self, make_point, fixed_resolver):
        classifier = EnhancedProximityClassifier("1-3", "1-3", Midpoint(sat=2, loy=2))
        data = [make_point("c1", 1, 1), make_point("c2", 3, 3)]

        result = classifier.analyze_proximity(data, fixed_resolver({"c1": D, "c2": L}))

        assert result.settings.isAvailable is False
        assert result.settings.unavailabilityReason == "Scale too small on the satisfaction axis"
        assert result.settings.proximityThreshold == 0
        assert result.settings.totalCustomers == 2
        assert result.summary.totalProximityCustomers == 0
        assert result.crossroads.totalCount == 0
        assert all(detail.customerCount == 0 for detail in result.analysis.details().values())

    def test_default_threshold_used(self, classifier, make_point, fixed_resolver):
        result = classifier.analyze_proximity([make_point("h1", 4, 5)], fixed_resolver({"h1": H}))

        assert result.settings.proximityThreshold == 1.0
        assert result.settings.isAvailable is True

    @pytest.mark.parametrize("user_threshold,expected", [
        (None, 1.0),
        (0, 1.0),
        (-2.0, 1.0),
        (2.0, 2.0),
    ])
    def test_user_threshold(self, classifier, make_point, fixed_resolver, user_threshold, expected):
        result = classifier.analyze_proximity(
            [make_point("h1", 4, 5)], fixed_resolver({"h1": H}), user_threshold=user_threshold
        )

        assert result.settings.proximityThreshold == expected

    def test_settings_echo_flags(self, classifier, make_point, fixed_resolver):
        result = classifier.analyze_proximity(
            [make_point("h1", 4, 5), make_point("h2", 4, 6)],
            fixed_resolver({"h1": H}),
            is_premium=True,
            show_special_zones=True,
            show_near_apostles=True,
        )

        assert result.settings.isPremium is True
        assert result.settings.showSpecialZones is True
        assert result.settings.showNearApostles is True
        assert result.settings.totalCustomers == 2

    def test_empty_data(self, classifier, fixed_resolver):
        result = classifier.analyze_proximity([], fixed_resolver({}))

        assert result.settings.isAvailable is True
        assert result.summary.totalProximityCustomers == 0
        assert result.summary.averageRiskScore == 0


# =============================================================================
# Test Class: TestGrouping
# =============================================================================

class TestGrouping:
    """Tests for group_customers_by_quadrant."""

    def test_skips_excluded_and_midpoint(self, classifier, make_point, fixed_resolver):
        data = [
            make_point("h1", 4, 5),
            make_point("h2", 4, 5, excluded=True),
            make_point("mid", 5, 5),
        ]
        groups = classifier.group_customers_by_quadrant(
            data, fixed_resolver({"h1": H, "h2": H, "mid": L})
        )

        assert [p.id for p in groups[H]] == ["h1"]
        assert groups[L] == []

    def test_accepts_string_labels_and_drops_unknown(self, classifier, make_point):
        data = [make_point("a", 4, 7), make_point("b", 6, 7), make_point("c", 3, 3)]
        labels = {"a": "hostages", "b": "mystery", "c": "neutral"}

        groups = classifier.group_customers_by_quadrant(data, lambda p: labels[p.id])

        assert [p.id for p in groups[H]] == ["a"]
        assert sum(len(members) for members in groups.values()) == 1

    def test_midpoint_and_excluded_never_appear(self, classifier, make_point, fixed_resolver):
        data = [make_point("mid", 5, 5), make_point("gone", 4, 5, excluded=True)]
        result = classifier.analyze_proximity(data, fixed_resolver({"mid": H, "gone": H}))

        assert result.summary.totalProximityCustomers == 0
        assert result.crossroads.customers == []


# =============================================================================
# Test Class: TestLateralRelationships
# =============================================================================

class TestLateralRelationships:
    """Tests for the eight lateral relationships."""

    def test_hostage_on_boundary_close_to_loyalists(self, classifier, make_point, fixed_resolver):
        result = classifier.analyze_proximity([make_point("h1", 4, 5)], fixed_resolver({"h1": H}))
        detail = result.analysis.hostages_close_to_loyalists

        assert _ids(detail) == ["h1"]
        customer = detail.customers[0]
        assert customer.currentQuadrant == H
        assert customer.proximityTargets == [L, D]
        assert customer.distanceFromBoundary == 0
        assert customer.riskScore == 100
        assert customer.riskLevel == ProximityRiskLevel.HIGH

    def test_detail_counts_positions(self, classifier, make_point, fixed_resolver):
        data = [make_point("h1", 4, 7), make_point("h2", 4, 7), make_point("h3", 4, 8)]
        result = classifier.analyze_proximity(data, fixed_resolver({"h1": H, "h2": H, "h3": H}))
        detail = result.analysis.hostages_close_to_loyalists

        assert detail.customerCount == 3
        assert detail.positionCount == 2
        assert detail.averageDistance == 1.0
        assert detail.riskLevel == ProximityRiskLevel.LOW

    def test_customers_sorted_by_risk(self, classifier, make_point, fixed_resolver):
        data = [make_point("far", 4, 7), make_point("near", 4, 5)]
        result = classifier.analyze_proximity(data, fixed_resolver({"far": H, "near": H}))

        assert _ids(result.analysis.hostages_close_to_loyalists) == ["near", "far"]

    def test_deep_customers_are_not_close(self, classifier, make_point, fixed_resolver):
        data = [make_point("l1", 9, 9), make_point("d1", 1, 1)]
        result = classifier.analyze_proximity(data, fixed_resolver({"l1": L, "d1": D}))

        assert result.summary.totalProximityCustomers == 0


# =============================================================================
# Test Class: TestDiagonalRelationships
# =============================================================================

class TestDiagonalRelationships:
    """Tests for the four diagonal relationships."""

    def test_defector_next_to_midpoint(self, classifier, make_point, fixed_resolver):
        result = classifier.analyze_proximity([make_point("d1", 4, 4)], fixed_resolver({"d1": D}))
        detail = result.analysis.defectors_close_to_loyalists

        assert _ids(detail) == ["d1"]
        customer = detail.customers[0]
        assert customer.distanceFromBoundary == 1
        assert customer.proximityTargets == [L]
        assert customer.riskScore == 50
        assert customer.riskLevel == ProximityRiskLevel.HIGH

    def test_small_scale_search_area_excludes_corner(self, make_point, fixed_resolver):
        # Chebyshev distance 2 meets the threshold, but on a 1-5 scale the
        # defectors search area keeps only satisfaction 3
        classifier = EnhancedProximityClassifier("1-5", "1-5", Midpoint(sat=3, loy=3))
        result = classifier.analyze_proximity([make_point("d1", 1, 1)], fixed_resolver({"d1": D}))

        assert result.analysis.defectors_close_to_loyalists.customerCount == 0

    def test_outside_search_area_excluded(self, classifier, make_point, fixed_resolver):
        # (7, 7) is within Chebyshev 2 but the loyalists area is {5, 6} on both axes
        result = classifier.analyze_proximity([make_point("l1", 7, 7)], fixed_resolver({"l1": L}))

        assert result.analysis.loyalists_close_to_defectors.customerCount == 0

    def test_customer_inside_target_quadrant_excluded(self, classifier, make_point, fixed_resolver):
        # Assigned to loyalists but positioned strictly inside defectors
        result = classifier.analyze_proximity([make_point("l1", 4, 4)], fixed_resolver({"l1": L}))

        assert result.analysis.loyalists_close_to_defectors.customerCount == 0

    def test_boundary_loyalist_included(self, classifier, make_point, fixed_resolver):
        result = classifier.analyze_proximity([make_point("l1", 5, 6)], fixed_resolver({"l1": L}))

        assert _ids(result.analysis.loyalists_close_to_defectors) == ["l1"]

    def test_hostage_close_to_mercenaries(self, classifier, make_point, fixed_resolver):
        result = classifier.analyze_proximity([make_point("h1", 4, 6)], fixed_resolver({"h1": H}))
        detail = result.analysis.hostages_close_to_mercenaries

        assert _ids(detail) == ["h1"]
        assert detail.customers[0].riskScore == 50

    def test_predicates(self, classifier):
        assert classifier.can_boundary_position_belong_to_quadrant(5, 4, D)
        assert classifier.can_boundary_position_belong_to_quadrant(4, 5, D)
        assert not classifier.can_boundary_position_belong_to_quadrant(5, 5, D)
        assert not classifier.can_boundary_position_belong_to_quadrant(6, 4, H)
        assert classifier.is_strictly_in_quadrant(5, 5, L)
        assert classifier.is_strictly_in_quadrant(5, 4, M)
        assert not classifier.is_strictly_in_quadrant(5, 4, D)


# =============================================================================
# Test Class: TestSpecialZoneRelationships
# =============================================================================

class TestSpecialZoneRelationships:
    """Tests for the four special-zone relationships and their gating."""

    def test_loyalist_next_to_apostles(self, zone_classifier, make_point, fixed_resolver):
        data = [make_point("l1", 8, 8), make_point("l2", 9, 9)]
        result = zone_classifier.analyze_proximity(
            data, fixed_resolver({"l1": L, "l2": L}), show_special_zones=True
        )
        detail = result.analysis.loyalists_close_to_apostles

        assert _ids(detail) == ["l1"]
        assert detail.customers[0].distanceFromBoundary == 1
        assert detail.customers[0].riskScore == 50
        assert detail.customers[0].riskLevel == ProximityRiskLevel.MODERATE
        assert detail.customers[0].proximityTargets == [QuadrantType.APOSTLES]

    def test_special_zones_hidden(self, zone_classifier, make_point, fixed_resolver):
        result = zone_classifier.analyze_proximity([make_point("l1", 8, 8)], fixed_resolver({"l1": L}))

        assert result.analysis.loyalists_close_to_apostles.customerCount == 0

    def test_near_apostles_takes_precedence(self, zone_classifier, make_point, fixed_resolver):
        data = [make_point("l1", 7, 9), make_point("l2", 8, 9), make_point("n1", 8, 8)]
        result = zone_classifier.analyze_proximity(
            data,
            fixed_resolver({"l1": L, "l2": L, "n1": QuadrantType.NEAR_APOSTLES}),
            show_special_zones=True,
            show_near_apostles=True,
        )

        assert result.analysis.loyalists_close_to_apostles.customerCount == 0
        assert _ids(result.analysis.loyalists_close_to_near_apostles) == ["l1"]
        assert _ids(result.analysis.near_apostles_close_to_apostles) == ["n1"]

    def test_single_cell_apostles_skipped(self, classifier, make_point, fixed_resolver):
        result = classifier.analyze_proximity(
            [make_point("l1", 9, 9)], fixed_resolver({"l1": L}), show_special_zones=True
        )

        assert result.analysis.loyalists_close_to_apostles.customerCount == 0

    def test_defector_next_to_terrorists(self, zone_classifier, make_point, fixed_resolver):
        data = [make_point("d1", 2, 2), make_point("d2", 0, 0), make_point("d3", 3, 1)]
        result = zone_classifier.analyze_proximity(
            data, fixed_resolver({"d1": D, "d2": D, "d3": D}), show_special_zones=True
        )

        assert _ids(result.analysis.defectors_close_to_terrorists) == ["d1"]

    def test_gating_rules(self, classifier):
        gate = classifier.should_analyze_special_zone_proximity
        apostles = QuadrantType.APOSTLES
        near = QuadrantType.NEAR_APOSTLES

        assert gate(L, apostles, True, False)
        assert not gate(L, apostles, True, True)
        assert gate(L, near, False, True)
        assert gate(near, apostles, False, True)
        assert not gate(near, apostles, True, False)
        assert gate(D, QuadrantType.TERRORISTS, True, False)
        assert not gate(D, QuadrantType.TERRORISTS, False, True)


# =============================================================================
# Test Class: TestSummary
# =============================================================================

class TestSummary:
    """Tests for summary totals and indicators."""

    @pytest.mark.scenario
    def test_indicators_at_three_customers(self, classifier, make_point, fixed_resolver):
        data = [
            make_point("h1", 4, 7), make_point("h2", 4, 8), make_point("h3", 4, 9),
            make_point("l1", 7, 5), make_point("l2", 8, 5), make_point("l3", 9, 5),
        ]
        assignments = {"h1": H, "h2": H, "h3": H, "l1": L, "l2": L, "l3": L}

        summary = classifier.analyze_proximity(data, fixed_resolver(assignments)).summary

        assert summary.totalProximityCustomers == 6
        assert summary.totalProximityPositions == 6
        assert summary.averageRiskScore == 50
        assert summary.crisisIndicators == ["3 loyalists at risk of becoming mercenaries"]
        assert summary.opportunityIndicators == ["3 hostages moving toward loyalty"]

    def test_no_indicator_below_three(self, classifier, make_point, fixed_resolver):
        data = [make_point("h1", 4, 7), make_point("h2", 4, 8)]
        summary = classifier.analyze_proximity(data, fixed_resolver({"h1": H, "h2": H})).summary

        assert summary.opportunityIndicators == []
        assert summary.crisisIndicators == []


# =============================================================================
# Test Class: TestCrossroads
# =============================================================================

class TestCrossroads:
    """Tests for crossroads detection."""

    def test_three_relationships_is_high_value(self, classifier, make_point, fixed_resolver):
        result = classifier.analyze_proximity([make_point("h1", 4, 5)], fixed_resolver({"h1": H}))
        crossroads = result.crossroads

        assert crossroads.totalCount == 1
        assert crossroads.highValueCount == 1
        customer = crossroads.customers[0]
        assert customer.proximityRelationships == [
            "hostages_close_to_loyalists",
            "hostages_close_to_defectors",
            "hostages_close_to_mercenaries",
        ]
        assert customer.riskScore == 83
        assert customer.strategicValue == StrategicValue.HIGH

    def test_sorted_by_value_then_risk(self, classifier, make_point, fixed_resolver):
        data = [make_point("m1", 5.5, 4), make_point("h1", 4, 5)]
        result = classifier.analyze_proximity(
            data, fixed_resolver({"m1": M, "h1": H}), user_threshold=0.5
        )
        crossroads = result.crossroads

        assert [c.id for c in crossroads.customers] == ["h1", "m1"]
        hostage, mercenary = crossroads.customers
        assert hostage.proximityRelationships == [
            "hostages_close_to_defectors",
            "hostages_close_to_mercenaries",
        ]
        assert hostage.riskScore == 75
        assert hostage.strategicValue == StrategicValue.HIGH
        assert mercenary.proximityRelationships == [
            "mercenaries_close_to_defectors",
            "mercenaries_close_to_hostages",
        ]
        assert mercenary.riskScore == 25
        assert mercenary.strategicValue == StrategicValue.LOW
        assert crossroads.highValueCount == 1

    def test_single_relationship_is_not_crossroads(self, classifier, make_point, fixed_resolver):
        result = classifier.analyze_proximity([make_point("h1", 4, 7)], fixed_resolver({"h1": H}))

        assert result.crossroads.totalCount == 0


# =============================================================================
# Test Class: TestLogging
# =============================================================================

class TestLogging:
    """Tests for the injected logger."""

    def test_injected_logger_receives_outcome(self, midpoint_ten, make_point, fixed_resolver, caplog):
        custom = logging.getLogger("segment_compass.tests.classifier")
        classifier = EnhancedProximityClassifier("0-10", "0-10", midpoint_ten, logger=custom)

        with caplog.at_level(logging.INFO, logger="segment_compass.tests.classifier"):
            classifier.analyze_proximity([make_point("h1", 4, 5)], fixed_resolver({"h1": H}))

        messages = [r.getMessage() for r in caplog.records if r.name == "segment_compass.tests.classifier"]
        assert any("Proximity analysis complete" in message for message in messages)

    def test_unavailable_logged(self, make_point, fixed_resolver, caplog):
        custom = logging.getLogger("segment_compass.tests.unavailable")
        classifier = EnhancedProximityClassifier("1-3", "1-3", Midpoint(sat=2, loy=2), logger=custom)

        with caplog.at_level(logging.INFO, logger="segment_compass.tests.unavailable"):
            classifier.analyze_proximity([], fixed_resolver({}))

        assert any("Proximity unavailable" in r.getMessage() for r in caplog.records)
