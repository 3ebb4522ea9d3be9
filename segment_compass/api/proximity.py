"""
FastAPI router module for proximity analysis endpoints.

This module implements endpoints for:
- Proximity analysis: lateral, diagonal and special-zone relationships,
  summary metrics, and crossroads customers
- Proximity evaluation: ranked risks and opportunities for reports
- CSV export of every matched customer
- Availability check for a scale configuration

Quadrant assignment per customer comes from the request's `quadrants` map when
present, then `manualAssignments`, then the natural quadrant of the position.
"""

import logging
from typing import Callable

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response

from segment_compass.core.config import Settings
from segment_compass.core.dependencies import SettingsDep
from segment_compass.models import (
    DataPoint,
    Midpoint,
    ProximityAnalysisRequest,
    ProximityAnalysisResult,
    ProximityAvailabilityResponse,
    ProximityEvaluation,
    QuadrantType,
)
from segment_compass.services.distance_calculator import DistanceCalculator
from segment_compass.services.export import proximity_to_csv
from segment_compass.services.proximity_classifier import EnhancedProximityClassifier
from segment_compass.services.proximity_evaluator import evaluate_proximity
from segment_compass.services.quadrant_assignment import (
    QuadrantConfig,
    build_quadrant_resolver,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/proximity", tags=["proximity"])


# =============================================================================
# Helper Functions
# =============================================================================


def _build_resolver(
    request: ProximityAnalysisRequest,
    settings: Settings,
) -> Callable[[DataPoint], QuadrantType]:
    """Resolver honouring pre-assigned quadrants, then manual assignments."""
    config = QuadrantConfig(
        satisfaction_scale=request.satisfactionScale,
        loyalty_scale=request.loyaltyScale,
        midpoint=request.midpoint,
        apostles_zone_size=_apostles_zone_size(request, settings),
        terrorists_zone_size=_terrorists_zone_size(request, settings),
        show_special_zones=request.showSpecialZones,
        show_near_apostles=request.showNearApostles,
    )
    default_resolver = build_quadrant_resolver(config, request.manualAssignments)

    if not request.quadrants:
        return default_resolver

    assigned = request.quadrants

    def resolve(point: DataPoint) -> QuadrantType:
        quadrant = assigned.get(point.id)
        if quadrant is not None:
            return quadrant
        return default_resolver(point)

    return resolve


def _apostles_zone_size(request: ProximityAnalysisRequest, settings: Settings) -> int:
    if request.apostlesZoneSize is None:
        return settings.default_apostles_zone_size
    return request.apostlesZoneSize


def _terrorists_zone_size(request: ProximityAnalysisRequest, settings: Settings) -> int:
    if request.terroristsZoneSize is None:
        return settings.default_terrorists_zone_size
    return request.terroristsZoneSize


def run_proximity_analysis(
    request: ProximityAnalysisRequest,
    settings: Settings,
) -> ProximityAnalysisResult:
    """
    Build a classifier for the request and run the analysis.

    Raises:
        ValueError: If a scale string is invalid
    """
    classifier = EnhancedProximityClassifier(
        satisfaction_scale=request.satisfactionScale,
        loyalty_scale=request.loyaltyScale,
        midpoint=request.midpoint,
        apostles_zone_size=_apostles_zone_size(request, settings),
        terrorists_zone_size=_terrorists_zone_size(request, settings),
        logger=logger,
        settings=settings,
    )
    return classifier.analyze_proximity(
        request.data,
        _build_resolver(request, settings),
        is_premium=request.isPremium,
        user_threshold=request.userThreshold,
        show_special_zones=request.showSpecialZones,
        show_near_apostles=request.showNearApostles,
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/analyze", response_model=ProximityAnalysisResult)
async def analyze_proximity_endpoint(
    request: ProximityAnalysisRequest,
    settings: SettingsDep,
) -> ProximityAnalysisResult:
    """
    Run the full proximity analysis for a data set.

    Args:
        request: Data, scales, midpoint, zone sizes and display toggles

    Returns:
        ProximityAnalysisResult with the sixteen relationships, summary,
        crossroads and the settings used. Scales too small for proximity
        return an empty result with settings.isAvailable set to false.

    Raises:
        HTTPException 400: If a scale string is invalid
        HTTPException 500: If the analysis fails unexpectedly
    """
    try:
        return run_proximity_analysis(request, settings)

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error analyzing proximity: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error analyzing proximity: {str(e)}",
        )


@router.post("/evaluate", response_model=ProximityEvaluation)
async def evaluate_proximity_endpoint(
    request: ProximityAnalysisRequest,
    settings: SettingsDep,
) -> ProximityEvaluation:
    """
    Analyze proximity and return the top risks and opportunities.

    Raises:
        HTTPException 400: If a scale string is invalid
        HTTPException 500: If the evaluation fails unexpectedly
    """
    try:
        result = run_proximity_analysis(request, settings)
        return evaluate_proximity(result)

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error evaluating proximity: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error evaluating proximity: {str(e)}",
        )


@router.post("/export")
async def export_proximity_endpoint(
    request: ProximityAnalysisRequest,
    settings: SettingsDep,
) -> Response:
    """
    Analyze proximity and return every matched customer as CSV.

    One row per customer per relationship.
    """
    try:
        result = run_proximity_analysis(request, settings)
        csv_text = proximity_to_csv(result)
        return Response(
            content=csv_text,
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="proximity.csv"'},
        )

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error exporting proximity: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error exporting proximity: {str(e)}",
        )


@router.get("/availability", response_model=ProximityAvailabilityResponse)
async def get_proximity_availability(
    settings: SettingsDep,
    satisfaction_scale: str = Query(..., description="Satisfaction scale, e.g. '1-5'"),
    loyalty_scale: str = Query(..., description="Loyalty scale, e.g. '0-10'"),
    mid_sat: float = Query(..., description="Midpoint satisfaction"),
    mid_loy: float = Query(..., description="Midpoint loyalty"),
) -> ProximityAvailabilityResponse:
    """
    Report whether proximity analysis is meaningful for a scale configuration.

    Returns:
        ProximityAvailabilityResponse with the default and directional
        thresholds and the midpoint-to-bound distances

    Raises:
        HTTPException 400: If a scale string is invalid
    """
    try:
        calculator = DistanceCalculator(
            satisfaction_scale,
            loyalty_scale,
            Midpoint(sat=mid_sat, loy=mid_loy),
            settings=settings,
        )
        reason = calculator.get_unavailability_reason()
        return ProximityAvailabilityResponse(
            isAvailable=reason is None,
            unavailabilityReason=reason,
            defaultThreshold=calculator.get_default_threshold(),
            directionalThresholds=calculator.get_directional_thresholds(),
            boundaryDistances=calculator.get_boundary_distances().as_dict(),
        )

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error checking proximity availability: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error checking proximity availability: {str(e)}",
        )
