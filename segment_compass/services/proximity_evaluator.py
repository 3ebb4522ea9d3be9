"""
Proximity Evaluator

Extracts the risks and opportunities a report needs from a proximity analysis.

Warning relationships become risks with a severity that follows the
relationship risk level (HIGH -> high). Opportunity relationships become
opportunities with the impact inverted (LOW -> high).
"""

import logging
from typing import List, Optional

from segment_compass.models.enums import ProximityRiskLevel, Severity
from segment_compass.models.schemas import (
    ProximityAnalysisResult,
    ProximityDetail,
    ProximityEvaluation,
    RelationshipOpportunity,
    RelationshipRisk,
)
from segment_compass.services.relationships import (
    OPPORTUNITY_RELATIONSHIPS,
    WARNING_RELATIONSHIPS,
)


logger = logging.getLogger(__name__)

TOP_N = 5

_SEVERITY = {
    ProximityRiskLevel.HIGH: Severity.HIGH,
    ProximityRiskLevel.MODERATE: Severity.MEDIUM,
    ProximityRiskLevel.LOW: Severity.LOW,
}

_IMPACT = {
    ProximityRiskLevel.LOW: Severity.HIGH,
    ProximityRiskLevel.MODERATE: Severity.MEDIUM,
    ProximityRiskLevel.HIGH: Severity.LOW,
}


def unique_customer_count(detail: ProximityDetail) -> int:
    """Distinct customer ids in a relationship, falling back to customerCount."""
    ids = {customer.id for customer in detail.customers if customer.id}
    return len(ids) if ids else detail.customerCount


def evaluate_proximity(result: Optional[ProximityAnalysisResult]) -> ProximityEvaluation:
    """
    Summarize a proximity analysis into ranked risks and opportunities.

    Args:
        result: Analysis to evaluate; None or an unavailable result yields an
            empty evaluation

    Returns:
        ProximityEvaluation with the top five risks and opportunities by count
    """
    if result is None or not result.settings.isAvailable:
        return ProximityEvaluation()

    details = result.analysis.details()

    risks: List[RelationshipRisk] = []
    for key in WARNING_RELATIONSHIPS:
        detail = details[key]
        count = unique_customer_count(detail)
        if count > 0:
            risks.append(RelationshipRisk(type=key, count=count, severity=_SEVERITY[detail.riskLevel]))

    opportunities: List[RelationshipOpportunity] = []
    for key in OPPORTUNITY_RELATIONSHIPS:
        detail = details[key]
        count = unique_customer_count(detail)
        if count > 0:
            opportunities.append(
                RelationshipOpportunity(type=key, count=count, impact=_IMPACT[detail.riskLevel])
            )

    risks.sort(key=lambda r: r.count, reverse=True)
    opportunities.sort(key=lambda o: o.count, reverse=True)

    evaluation = ProximityEvaluation(
        hasRisks=bool(risks),
        hasOpportunities=bool(opportunities),
        highRiskCount=sum(1 for r in risks if r.severity == Severity.HIGH),
        highOpportunityCount=sum(1 for o in opportunities if o.impact == Severity.HIGH),
        crisisIndicators=list(result.summary.crisisIndicators),
        opportunityIndicators=list(result.summary.opportunityIndicators),
        topRisks=risks[:TOP_N],
        topOpportunities=opportunities[:TOP_N],
    )
    logger.info(
        f"Proximity evaluation: {len(risks)} risks ({evaluation.highRiskCount} high), "
        f"{len(opportunities)} opportunities ({evaluation.highOpportunityCount} high)"
    )
    return evaluation
