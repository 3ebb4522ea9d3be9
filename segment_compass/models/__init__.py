"""
Package initialization file for the Segment Compass models.

This module exports all Pydantic schemas and enumerations from schemas.py and enums.py,
making them importable from segment_compass.models directly.

Usage:
    from segment_compass.models import (
        DataPoint,
        Midpoint,
        ProximityAnalysisResult,
        QuadrantType,
    )
"""

# =============================================================================
# Enums
# =============================================================================

from segment_compass.models.enums import (
    QuadrantType,
    ProximityRiskLevel,
    StrategicValue,
    ProximityKind,
    Severity,
    RelationshipPolarity,
    MAIN_QUADRANTS,
    SPECIAL_ZONES,
)

# =============================================================================
# Schemas
# =============================================================================

from segment_compass.models.schemas import (
    # Inputs
    Midpoint,
    DataPoint,
    # Proximity results
    CustomerProximityDetail,
    ProximityDetail,
    ProximityAnalysis,
    ProximitySummary,
    CrossroadsCustomer,
    CrossroadsSummary,
    ProximitySettings,
    ProximityAnalysisResult,
    # Evaluation
    RelationshipRisk,
    RelationshipOpportunity,
    ProximityEvaluation,
    # API
    ProximityAnalysisRequest,
    ProximityAvailabilityResponse,
)

__all__ = [
    # Enums
    "QuadrantType",
    "ProximityRiskLevel",
    "StrategicValue",
    "ProximityKind",
    "Severity",
    "RelationshipPolarity",
    "MAIN_QUADRANTS",
    "SPECIAL_ZONES",
    # Schemas
    "Midpoint",
    "DataPoint",
    "CustomerProximityDetail",
    "ProximityDetail",
    "ProximityAnalysis",
    "ProximitySummary",
    "CrossroadsCustomer",
    "CrossroadsSummary",
    "ProximitySettings",
    "ProximityAnalysisResult",
    "RelationshipRisk",
    "RelationshipOpportunity",
    "ProximityEvaluation",
    "ProximityAnalysisRequest",
    "ProximityAvailabilityResponse",
]
