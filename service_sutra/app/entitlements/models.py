"""
Entitlement data models.
"""

from typing import Dict, Optional
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Tier(str, Enum):
    """Subscription tiers, lowest first."""
    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class EntitlementStatus(str, Enum):
    """Billing status of a subscription."""
    ACTIVE = "active"
    TRIALING = "trialing"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    DELETED = "deleted"


class Entitlement(BaseModel):
    """Access grant resolved from the Yantra API. Immutable once fetched."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    subscription_id: str
    org_id: str
    tier: Tier
    seats: int = Field(default=1, ge=0)
    expires_at: int = Field(..., description="Expiry as epoch seconds")
    status: EntitlementStatus
    features: Dict[str, bool] = Field(default_factory=dict)


class EntitlementEnvelope(BaseModel):
    """Body of the entitlement endpoint."""

    model_config = ConfigDict(extra="ignore")

    entitlement: Optional[Entitlement] = None
    warning: Optional[str] = None
