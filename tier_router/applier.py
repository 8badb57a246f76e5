"""Applies a routing decision to the host, switching tiers only when needed."""

from __future__ import annotations

from loguru import logger

from tier_router.catalog import TierCatalog
from tier_router.errors import SwitchRejected
from tier_router.host import HostContext
from tier_router.models import Provenance, RoutingDecision, RoutingState

_STATUS_PREFIX = {
    Provenance.PINNED: "📌",
}


class DecisionApplier:
    """Idempotent switcher.

    A decision counts as committed only once the host is on the target
    tier; ``state.last_routed`` is never updated for a failed switch, so the
    next cycle retries it.
    """

    def __init__(self, catalog: TierCatalog, *, status_label: str = "router"):
        self._catalog = catalog
        self._status_label = status_label

    def status_message(self, decision: RoutingDecision) -> str:
        tier = self._catalog.get(decision.tier_id)
        label = tier.label if tier else decision.tier_id
        if decision.degraded:
            return f"⚠ {label} ({decision.provenance.value} {decision.reason})"
        prefix = _STATUS_PREFIX.get(decision.provenance, "→")
        return f"{prefix} {label} ({decision.provenance.value})"

    async def apply(self, state: RoutingState, decision: RoutingDecision, host: HostContext) -> bool:
        """Make the host's active tier match ``decision``. Returns True if committed."""
        try:
            await self._switch(decision, host)
        except SwitchRejected as e:
            logger.warning(f"Route: {e}")
            host.set_status(self._status_label, f"⚠ {e}")
            host.notify(f"Tier router: {e}", "warning")
            return False

        state.last_routed = decision.tier_id
        host.set_status(self._status_label, self.status_message(decision))
        return True

    async def _switch(self, decision: RoutingDecision, host: HostContext) -> None:
        tier = self._catalog.get(decision.tier_id)
        if tier is None:
            raise SwitchRejected(decision.tier_id, "unknown tier")

        if host.active_tier() == tier.id:
            logger.debug(f"Route: already on {tier.id} ({decision.provenance.value})")
            return

        try:
            ok = await host.switch_tier(tier.id)
        except Exception as e:
            raise SwitchRejected(tier.id, str(e)) from e
        if not ok:
            raise SwitchRejected(tier.id, "host refused")
        logger.info(f"Route: switched to {tier.id} ({decision.provenance.value})")
