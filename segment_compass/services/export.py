"""
Tabular export of proximity results.

One row per customer per relationship, with a fixed column order so the CSV
can be diffed between runs.
"""

import logging
from typing import List

import pandas as pd

from segment_compass.models.schemas import ProximityAnalysisResult
from segment_compass.services.relationships import get_relationship


logger = logging.getLogger(__name__)

EXPORT_COLUMNS: List[str] = [
    "relationship",
    "kind",
    "polarity",
    "customer_id",
    "name",
    "satisfaction",
    "loyalty",
    "current_quadrant",
    "proximity_targets",
    "distance_from_boundary",
    "risk_score",
    "risk_level",
]


def proximity_to_dataframe(result: ProximityAnalysisResult) -> pd.DataFrame:
    """
    Flatten every relationship's customers into a DataFrame.

    Returns:
        DataFrame with EXPORT_COLUMNS; empty (columns only) when nothing matched
    """
    rows = []
    for key, detail in result.analysis.details().items():
        relationship = get_relationship(key)
        for customer in detail.customers:
            rows.append({
                "relationship": key,
                "kind": relationship.kind.value,
                "polarity": relationship.polarity.value,
                "customer_id": customer.id,
                "name": customer.name,
                "satisfaction": customer.satisfaction,
                "loyalty": customer.loyalty,
                "current_quadrant": customer.currentQuadrant.value,
                "proximity_targets": ";".join(t.value for t in customer.proximityTargets),
                "distance_from_boundary": customer.distanceFromBoundary,
                "risk_score": customer.riskScore,
                "risk_level": customer.riskLevel.value,
            })

    if not rows:
        return pd.DataFrame(columns=EXPORT_COLUMNS)

    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    logger.debug(f"Exported {len(df)} proximity rows")
    return df


def proximity_to_csv(result: ProximityAnalysisResult) -> str:
    """Render proximity_to_dataframe as CSV text without the index."""
    return proximity_to_dataframe(result).to_csv(index=False)
