"""
Proximity Relationship Registry

Every directional relationship the classifier reports, in the order they appear
in ProximityAnalysis. A relationship is keyed "<from>_close_to_<to>" and carries:
- kind: the geometry used to evaluate it (lateral, diagonal, special zone)
- polarity: whether the movement is a warning or an opportunity
- indicator: phrase used when the relationship raises a summary indicator

The classifier, the report evaluator and the tabular export all read this
registry, so adding a relationship here is the single place to change.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from segment_compass.models.enums import (
    ProximityKind,
    QuadrantType,
    RelationshipPolarity,
)


@dataclass(frozen=True)
class Relationship:
    """One directional proximity relationship (source -> target)."""
    source: QuadrantType
    target: QuadrantType
    kind: ProximityKind
    polarity: RelationshipPolarity
    indicator: str

    @property
    def key(self) -> str:
        return relationship_key(self.source, self.target)


def relationship_key(source: QuadrantType, target: QuadrantType) -> str:
    """Label used for a relationship, e.g. 'loyalists_close_to_mercenaries'."""
    return f"{source.value}_close_to_{target.value}"


_L = QuadrantType.LOYALISTS
_M = QuadrantType.MERCENARIES
_H = QuadrantType.HOSTAGES
_D = QuadrantType.DEFECTORS
_WARN = RelationshipPolarity.WARNING
_OPP = RelationshipPolarity.OPPORTUNITY


# =============================================================================
# Registry
# =============================================================================

RELATIONSHIPS: Tuple[Relationship, ...] = (
    # Lateral
    Relationship(_L, _M, ProximityKind.LATERAL, _WARN, "loyalists at risk of becoming mercenaries"),
    Relationship(_L, _H, ProximityKind.LATERAL, _WARN, "loyalists at risk of becoming hostages"),
    Relationship(_M, _L, ProximityKind.LATERAL, _OPP, "mercenaries moving toward loyalty"),
    Relationship(_M, _D, ProximityKind.LATERAL, _WARN, "mercenaries at risk of defection"),
    Relationship(_H, _L, ProximityKind.LATERAL, _OPP, "hostages moving toward loyalty"),
    Relationship(_H, _D, ProximityKind.LATERAL, _WARN, "hostages at risk of defection"),
    Relationship(_D, _M, ProximityKind.LATERAL, _OPP, "defectors recovering toward mercenaries"),
    Relationship(_D, _H, ProximityKind.LATERAL, _OPP, "defectors recovering toward hostages"),
    # Diagonal
    Relationship(_L, _D, ProximityKind.DIAGONAL, _WARN, "loyalists at risk of complete collapse"),
    Relationship(_M, _H, ProximityKind.DIAGONAL, _WARN, "mercenaries at risk of becoming hostages"),
    Relationship(_H, _M, ProximityKind.DIAGONAL, _OPP, "hostages ready to switch toward mercenaries"),
    Relationship(_D, _L, ProximityKind.DIAGONAL, _OPP, "defectors close to redemption"),
    # Special zones
    Relationship(_L, QuadrantType.APOSTLES, ProximityKind.SPECIAL_ZONE, _OPP,
                 "loyalists close to becoming apostles"),
    Relationship(_L, QuadrantType.NEAR_APOSTLES, ProximityKind.SPECIAL_ZONE, _OPP,
                 "loyalists close to becoming near-apostles"),
    Relationship(QuadrantType.NEAR_APOSTLES, QuadrantType.APOSTLES, ProximityKind.SPECIAL_ZONE, _OPP,
                 "near-apostles close to becoming apostles"),
    Relationship(_D, QuadrantType.TERRORISTS, ProximityKind.SPECIAL_ZONE, _WARN,
                 "defectors at risk of becoming terrorists"),
)

RELATIONSHIPS_BY_KEY: Dict[str, Relationship] = {rel.key: rel for rel in RELATIONSHIPS}

WARNING_RELATIONSHIPS: Tuple[str, ...] = tuple(
    rel.key for rel in RELATIONSHIPS if rel.polarity == RelationshipPolarity.WARNING
)

OPPORTUNITY_RELATIONSHIPS: Tuple[str, ...] = tuple(
    rel.key for rel in RELATIONSHIPS if rel.polarity == RelationshipPolarity.OPPORTUNITY
)


def get_relationship(key: str) -> Relationship:
    """
    Look up a relationship by key.

    Raises:
        KeyError: If no relationship has that key
    """
    return RELATIONSHIPS_BY_KEY[key]


__all__ = [
    "Relationship",
    "relationship_key",
    "RELATIONSHIPS",
    "RELATIONSHIPS_BY_KEY",
    "WARNING_RELATIONSHIPS",
    "OPPORTUNITY_RELATIONSHIPS",
    "get_relationship",
]
