from .models import Entitlement, EntitlementEnvelope, EntitlementStatus, Tier
from .policy import ALL_TOOLS, FREE_TOOLS, PRO_TOOLS, effective_tier, resolve_allowed_tools
from .resolver import EntitlementResolver, is_valid

__all__ = [
    "ALL_TOOLS",
    "Entitlement",
    "EntitlementEnvelope",
    "EntitlementResolver",
    "EntitlementStatus",
    "FREE_TOOLS",
    "PRO_TOOLS",
    "Tier",
    "effective_tier",
    "is_valid",
    "resolve_allowed_tools",
]
