"""
Entitlement resolution.

Resolution fails open: any problem reaching or reading the billing backend
yields no entitlement, which the access policy treats as the free tier.
"""

import time
from typing import Optional

from sutra_shared.errors import EntitlementUnavailable, SutraException
from sutra_shared.logging import get_logger
from sutra_shared.metrics import MetricsCollector, get_metrics_collector

from .models import Entitlement, EntitlementStatus

_ALWAYS_VALID = frozenset({EntitlementStatus.ACTIVE, EntitlementStatus.TRIALING})
_NEVER_VALID = frozenset({EntitlementStatus.PAST_DUE, EntitlementStatus.DELETED})


def is_valid(entitlement: Optional[Entitlement], now: Optional[float] = None) -> bool:
    """Check whether an entitlement currently grants its tier.

    A canceled subscription stays valid until ``expires_at`` (grace period).
    """
    if entitlement is None:
        return False
    if entitlement.status in _ALWAYS_VALID:
        return True
    if entitlement.status in _NEVER_VALID:
        return False
    if entitlement.status == EntitlementStatus.CANCELED:
        current = time.time() if now is None else now
        return entitlement.expires_at > current
    return False


class EntitlementResolver:
    """Fetches the caller's entitlement from the Yantra API."""

    def __init__(self, client, metrics: Optional[MetricsCollector] = None):
        self.client = client
        self.logger = get_logger("sutra.entitlements")
        self.metrics = metrics or get_metrics_collector("sutra")
        self.warning: Optional[str] = None

    async def fetch_entitlement(self) -> Optional[Entitlement]:
        """Resolve the entitlement, or None on any failure. Never raises."""
        try:
            envelope = await self.client.get_entitlement()
            self.warning = envelope.warning
            if envelope.entitlement is None:
                raise EntitlementUnavailable("Response carried no entitlement")

            entitlement = envelope.entitlement
            self.metrics.record_entitlement_resolution("resolved")
            self.logger.info(
                "Entitlement resolved",
                tier=entitlement.tier.value,
                status=entitlement.status.value,
                expires_at=entitlement.expires_at,
                org_id=entitlement.org_id
            )
            return entitlement

        except SutraException as e:
            self.metrics.record_entitlement_resolution("absent")
            self.logger.warning(
                "Entitlement unavailable, falling back to free tier",
                code=e.code,
                error=e.message
            )
            return None
        except Exception as e:
            self.metrics.record_entitlement_resolution("absent")
            self.logger.error(
                "Unexpected error resolving entitlement, falling back to free tier",
                error=str(e),
                error_type=type(e).__name__
            )
            return None
