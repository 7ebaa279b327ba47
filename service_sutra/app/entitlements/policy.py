"""
Tool-access policy: which tools an entitlement unlocks.
"""

from typing import FrozenSet, Optional

from .models import Entitlement, Tier
from .resolver import is_valid

CONSTRAINTS_TOOL = "mahakalp_sf_constraints"
DOC_SEARCH_TOOL = "mahakalp_sf_doc_search"
RELEASES_TOOL = "mahakalp_sf_releases"
RULES_TOOL = "mahakalp_sf_rules"
PATTERNS_TOOL = "mahakalp_sf_patterns"
DECISION_GUIDES_TOOL = "mahakalp_sf_decision_guides"

FREE_TOOLS: FrozenSet[str] = frozenset({CONSTRAINTS_TOOL, DOC_SEARCH_TOOL, RELEASES_TOOL})
PRO_TOOLS: FrozenSet[str] = frozenset({RULES_TOOL, PATTERNS_TOOL, DECISION_GUIDES_TOOL})
ALL_TOOLS: FrozenSet[str] = FREE_TOOLS | PRO_TOOLS

_PAID_TIERS = frozenset({Tier.PRO, Tier.ENTERPRISE})


def resolve_allowed_tools(entitlement: Optional[Entitlement], now: Optional[float] = None) -> FrozenSet[str]:
    """Map an entitlement (or its absence) to the set of permitted tool names."""
    if entitlement is None or entitlement.tier not in _PAID_TIERS:
        return FREE_TOOLS
    if not is_valid(entitlement, now):
        return FREE_TOOLS
    return ALL_TOOLS


def effective_tier(entitlement: Optional[Entitlement], now: Optional[float] = None) -> Tier:
    """Tier actually granted, after validity checks."""
    if resolve_allowed_tools(entitlement, now) == ALL_TOOLS:
        return entitlement.tier
    return Tier.FREE
