"""
Pydantic request/response models for the Segment Compass backend.

This module provides type-safe data validation and serialization for the proximity
engine contracts: customer data points, the proximity analysis result (relationship
details, summary, crossroads, settings), the report-level proximity evaluation, and
the API request bodies.

Field names use camelCase to match the JSON contract consumed by the dashboard.
Relationship keys inside ProximityAnalysis keep the "<from>_close_to_<to>" form.

All models use Pydantic v2 syntax with proper field validation and examples.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ConfigDict

from segment_compass.models.enums import (
    ProximityRiskLevel,
    QuadrantType,
    Severity,
    StrategicValue,
)


# =============================================================================
# Input Models
# =============================================================================


class Midpoint(BaseModel):
    """
    Point dividing the grid into four quadrants. Values may be non-integer.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={"example": {"sat": 5, "loy": 5}},
    )

    sat: float = Field(..., description="Satisfaction coordinate of the midpoint")
    loy: float = Field(..., description="Loyalty coordinate of the midpoint")


class DataPoint(BaseModel):
    """
    A single customer response plotted on the satisfaction/loyalty grid.

    Data points are consumed read-only by the proximity engine.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "id": "CUST-001",
                "name": "Jane Doe",
                "satisfaction": 4,
                "loyalty": 5,
                "excluded": False,
            }
        }
    )

    id: str = Field(..., min_length=1, description="Customer identifier")
    name: str = Field(default="", description="Customer display name")
    email: Optional[str] = Field(default=None, description="Customer email")
    satisfaction: float = Field(..., description="Satisfaction score within the satisfaction scale")
    loyalty: float = Field(..., description="Loyalty score within the loyalty scale")
    date: Optional[str] = Field(default=None, description="Response date as entered")
    group: Optional[str] = Field(default=None, description="Free-form segment label")
    excluded: bool = Field(default=False, description="Excluded from all analysis when true")


# =============================================================================
# Proximity Result Models
# =============================================================================


class CustomerProximityDetail(BaseModel):
    """
    A customer matched by one proximity relationship.
    """
    id: str
    name: str = ""
    satisfaction: float
    loyalty: float
    distanceFromBoundary: float = Field(
        ...,
        ge=0.0,
        description="Distance to the boundary that qualified the customer"
    )
    currentQuadrant: QuadrantType = Field(
        ...,
        description="Source quadrant or zone of the relationship"
    )
    proximityTargets: List[QuadrantType] = Field(
        default_factory=list,
        description="Quadrants or zones the customer is close to"
    )
    riskScore: int = Field(..., ge=0, le=100, description="0-100, higher is closer")
    riskLevel: ProximityRiskLevel


class ProximityDetail(BaseModel):
    """
    Aggregate over one directional relationship (from -> to).

    positionCount counts unique (satisfaction, loyalty) pairs and is always
    less than or equal to customerCount.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "customerCount": 3,
                "positionCount": 2,
                "averageDistance": 1.0,
                "riskLevel": "LOW",
                "customers": [],
            }
        }
    )

    customerCount: int = Field(default=0, ge=0)
    positionCount: int = Field(default=0, ge=0)
    averageDistance: float = Field(default=0.0, ge=0.0)
    riskLevel: ProximityRiskLevel = ProximityRiskLevel.LOW
    customers: List[CustomerProximityDetail] = Field(
        default_factory=list,
        description="Matching customers sorted by descending risk score"
    )


class ProximityAnalysis(BaseModel):
    """
    All proximity relationships computed by the classifier.

    Lateral (8): adjacent quadrants across one midpoint line.
    Diagonal (4): opposite quadrants across the midpoint.
    Special zone (4): corner zones, gated by the zone display toggles.
    """
    # Lateral relationships
    loyalists_close_to_mercenaries: ProximityDetail = Field(default_factory=ProximityDetail)
    loyalists_close_to_hostages: ProximityDetail = Field(default_factory=ProximityDetail)
    mercenaries_close_to_loyalists: ProximityDetail = Field(default_factory=ProximityDetail)
    mercenaries_close_to_defectors: ProximityDetail = Field(default_factory=ProximityDetail)
    hostages_close_to_loyalists: ProximityDetail = Field(default_factory=ProximityDetail)
    hostages_close_to_defectors: ProximityDetail = Field(default_factory=ProximityDetail)
    defectors_close_to_mercenaries: ProximityDetail = Field(default_factory=ProximityDetail)
    defectors_close_to_hostages: ProximityDetail = Field(default_factory=ProximityDetail)

    # Diagonal relationships
    loyalists_close_to_defectors: ProximityDetail = Field(
        default_factory=ProximityDetail,
        description="Crisis diagonal: complete collapse"
    )
    mercenaries_close_to_hostages: ProximityDetail = Field(
        default_factory=ProximityDetail,
        description="Disappointment diagonal"
    )
    hostages_close_to_mercenaries: ProximityDetail = Field(
        default_factory=ProximityDetail,
        description="Switching diagonal"
    )
    defectors_close_to_loyalists: ProximityDetail = Field(
        default_factory=ProximityDetail,
        description="Redemption diagonal"
    )

    # Special zone relationships
    loyalists_close_to_apostles: ProximityDetail = Field(default_factory=ProximityDetail)
    loyalists_close_to_near_apostles: ProximityDetail = Field(default_factory=ProximityDetail)
    near_apostles_close_to_apostles: ProximityDetail = Field(default_factory=ProximityDetail)
    defectors_close_to_terrorists: ProximityDetail = Field(default_factory=ProximityDetail)

    def details(self) -> Dict[str, ProximityDetail]:
        """Return relationship key -> detail, in declaration order."""
        return {name: getattr(self, name) for name in type(self).model_fields}


class ProximitySummary(BaseModel):
    """Summary metrics across every proximity relationship."""
    totalProximityCustomers: int = Field(default=0, ge=0)
    totalProximityPositions: int = Field(default=0, ge=0)
    averageRiskScore: int = Field(default=0, ge=0, le=100)
    crisisIndicators: List[str] = Field(default_factory=list)
    opportunityIndicators: List[str] = Field(default_factory=list)


class CrossroadsCustomer(BaseModel):
    """
    A customer appearing in two or more proximity relationships.
    """
    id: str
    name: str = ""
    satisfaction: float
    loyalty: float
    currentQuadrant: QuadrantType
    proximityRelationships: List[str] = Field(
        ...,
        min_length=2,
        description="Relationship labels such as 'loyalists_close_to_mercenaries'"
    )
    strategicValue: StrategicValue
    riskScore: int = Field(
        ...,
        ge=0,
        le=100,
        description="Average risk score across the customer's relationships"
    )


class CrossroadsSummary(BaseModel):
    """Crossroads customers with counts."""
    customers: List[CrossroadsCustomer] = Field(default_factory=list)
    totalCount: int = Field(default=0, ge=0)
    highValueCount: int = Field(default=0, ge=0)


class ProximitySettings(BaseModel):
    """Configuration the analysis ran with."""
    proximityThreshold: float = Field(default=0.0, ge=0.0)
    showSpecialZones: bool = False
    showNearApostles: bool = False
    isPremium: bool = False
    totalCustomers: int = Field(default=0, ge=0)
    isAvailable: bool = True
    unavailabilityReason: Optional[str] = None


class ProximityAnalysisResult(BaseModel):
    """
    Full output of EnhancedProximityClassifier.analyze_proximity.
    """
    analysis: ProximityAnalysis = Field(default_factory=ProximityAnalysis)
    summary: ProximitySummary = Field(default_factory=ProximitySummary)
    crossroads: CrossroadsSummary = Field(default_factory=CrossroadsSummary)
    settings: ProximitySettings = Field(default_factory=ProximitySettings)


# =============================================================================
# Evaluation Models (report generation)
# =============================================================================


class RelationshipRisk(BaseModel):
    """A warning relationship with matching customers."""
    type: str = Field(..., description="Relationship key")
    count: int = Field(..., ge=0, description="Unique customers in the relationship")
    severity: Severity


class RelationshipOpportunity(BaseModel):
    """An opportunity relationship with matching customers."""
    type: str = Field(..., description="Relationship key")
    count: int = Field(..., ge=0, description="Unique customers in the relationship")
    impact: Severity


class ProximityEvaluation(BaseModel):
    """
    Risks and opportunities extracted from a proximity analysis for reporting.
    """
    hasRisks: bool = False
    hasOpportunities: bool = False
    highRiskCount: int = Field(default=0, ge=0)
    highOpportunityCount: int = Field(default=0, ge=0)
    crisisIndicators: List[str] = Field(default_factory=list)
    opportunityIndicators: List[str] = Field(default_factory=list)
    topRisks: List[RelationshipRisk] = Field(default_factory=list)
    topOpportunities: List[RelationshipOpportunity] = Field(default_factory=list)


# =============================================================================
# API Request/Response Models
# =============================================================================


class ProximityAnalysisRequest(BaseModel):
    """
    Request body for the proximity endpoints.

    Quadrant assignment is resolved in this order: an explicit entry in
    `quadrants` (customer id -> quadrant), then `manualAssignments`
    (keyed by "<id>_<satisfaction>_<loyalty>"), then the natural quadrant.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "data": [
                    {"id": "c1", "satisfaction": 4, "loyalty": 5},
                    {"id": "c2", "satisfaction": 6, "loyalty": 6},
                ],
                "satisfactionScale": "0-10",
                "loyaltyScale": "0-10",
                "midpoint": {"sat": 5, "loy": 5},
                "showSpecialZones": False,
                "showNearApostles": False,
            }
        }
    )

    data: List[DataPoint] = Field(default_factory=list)
    satisfactionScale: str = Field(..., description="Inclusive bounds, e.g. '1-5'")
    loyaltyScale: str = Field(..., description="Inclusive bounds, e.g. '0-10'")
    midpoint: Midpoint
    apostlesZoneSize: Optional[int] = Field(default=None, ge=0)
    terroristsZoneSize: Optional[int] = Field(default=None, ge=0)
    isPremium: bool = False
    userThreshold: Optional[float] = Field(default=None, gt=0.0)
    showSpecialZones: bool = False
    showNearApostles: bool = False
    manualAssignments: Dict[str, QuadrantType] = Field(default_factory=dict)
    quadrants: Optional[Dict[str, QuadrantType]] = Field(
        default=None,
        description="Pre-assigned quadrant per customer id"
    )


class ProximityAvailabilityResponse(BaseModel):
    """Whether proximity analysis is meaningful for a scale configuration."""
    isAvailable: bool
    unavailabilityReason: Optional[str] = None
    defaultThreshold: float
    directionalThresholds: Dict[str, float] = Field(default_factory=dict)
    boundaryDistances: Dict[str, float] = Field(default_factory=dict)
