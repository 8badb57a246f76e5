"""Routing engine — per-prompt tier selection with pin and manual-override modes."""

from __future__ import annotations

from typing import Awaitable, Callable, Iterable

from loguru import logger

from tier_router.applier import DecisionApplier
from tier_router.arbiter import UNAVAILABLE, ArbiterClient
from tier_router.catalog import Tier, TierCatalog
from tier_router.errors import ConfigInvalid
from tier_router.heuristics import HIGH_TIER_SIGNALS, LONG_PROMPT_CHARS, classify
from tier_router.host import HostContext, PromptEvent, TierSelectEvent
from tier_router.models import (
    Auto,
    Classification,
    OverridePending,
    Pinned,
    Provenance,
    RoutingDecision,
    RoutingMode,
    RoutingState,
)

USER_SELECTION_SOURCES = frozenset({"cycle", "set"})


class RoutingEngine:
    """Decides which tier handles each prompt.

    The engine holds no session state. Every call takes the session's
    ``RoutingState`` and ``HostContext``, so one engine can serve many
    sessions. Mode handling per cycle:

      1. Pinned → ensure the pinned tier is active, no classification
      2. OverridePending → do nothing this cycle, then return to Auto
      3. Auto → heuristics, then the arbiter for uncertain prompts

    No failure inside a cycle propagates to the host; every fault degrades
    to "keep the current tier and show a warning".
    """

    def __init__(
        self,
        catalog: TierCatalog,
        arbiter: ArbiterClient,
        applier: DecisionApplier | None = None,
        *,
        signals: Iterable[str] = HIGH_TIER_SIGNALS,
        long_prompt_chars: int = LONG_PROMPT_CHARS,
        user_sources: Iterable[str] = USER_SELECTION_SOURCES,
        status_label: str = "router",
    ):
        self._catalog = catalog
        self._arbiter = arbiter
        self._applier = applier or DecisionApplier(catalog, status_label=status_label)
        self._signals = tuple(signals)
        self._long_prompt_chars = long_prompt_chars
        self._user_sources = frozenset(user_sources)
        self._status_label = status_label

    @property
    def catalog(self) -> TierCatalog:
        return self._catalog

    # --- Per-prompt cycle ---

    async def cycle(self, state: RoutingState, prompt: str, host: HostContext) -> RoutingDecision | None:
        """Run one routing cycle. Returns the decision, or None if nothing was routed."""
        if not prompt or not prompt.strip():
            logger.debug("Route: empty prompt, skipping")
            return None

        mode = state.mode

        if isinstance(mode, Pinned):
            decision = RoutingDecision(mode.tier_id, Provenance.PINNED, "pinned")
            state.last_decision = decision
            logger.info(f"Route: pinned → {mode.tier_id}")
            await self._applier.apply(state, decision, host)
            return decision

        if isinstance(mode, OverridePending):
            state.mode = Auto()
            tier_id = mode.selected_tier_id or host.active_tier()
            if tier_id is None:
                logger.info("Route: manual override consumed")
                return None
            decision = RoutingDecision(tier_id, Provenance.MANUAL, "manual override")
            state.last_decision = decision
            logger.info(f"Route: manual override → {tier_id} (routing resumes next prompt)")
            host.set_status(self._status_label, self._applier.status_message(decision))
            return decision

        decision = await self.decide(prompt, host)
        state.last_decision = decision
        logger.info(f"Route: {decision.provenance.value} ({decision.reason}) → {decision.tier_id}")
        await self._applier.apply(state, decision, host)
        return decision

    async def decide(self, prompt: str, host: HostContext) -> RoutingDecision:
        """Classify a prompt down to a concrete tier (Auto mode)."""
        quick = classify(prompt, self._signals, self._long_prompt_chars)
        if quick is not Classification.UNCERTAIN:
            return RoutingDecision(self._tier_for(quick).id, Provenance.HEURISTIC, quick.value)

        resolved, reason = await self._arbiter.arbitrate(prompt, host)
        return RoutingDecision(
            self._tier_for(resolved).id, Provenance.ARBITER, reason,
            degraded=reason == UNAVAILABLE,
        )

    def _tier_for(self, classification: Classification) -> Tier:
        if classification is Classification.HIGH:
            return self._catalog.high
        if classification is Classification.LOW:
            return self._catalog.low
        raise ValueError(f"cannot route an unresolved classification: {classification}")

    # --- Mode-change signals ---

    async def pin(self, state: RoutingState, tier_name: str, host: HostContext) -> bool:
        """Pin the session to a tier and switch to it now.

        A pin replaces any mode, including a pending manual override. If the
        host rejects the switch, the mode and last routed tier stay as they were.
        """
        try:
            tier = self._catalog.resolve(tier_name)
        except ConfigInvalid as e:
            logger.warning(f"Pin ignored: {e}")
            host.notify(f"Tier router: {e}", "warning")
            return False

        decision = RoutingDecision(tier.id, Provenance.PINNED, "pin command")
        if not await self._applier.apply(state, decision, host):
            logger.warning(f"Pin to {tier.id} not applied, mode unchanged")
            return False

        state.mode = Pinned(tier.id)
        state.last_decision = decision
        logger.info(f"Pinned to {tier.id}")
        return True

    def unpin(self, state: RoutingState, host: HostContext) -> None:
        was = state.mode
        state.mode = Auto()
        logger.info(f"Auto routing resumed (was {type(was).__name__})")
        host.set_status(self._status_label, "auto")

    def observe_selection(self, state: RoutingState, event: TierSelectEvent) -> None:
        """Track tier changes made outside the router."""
        if event.source not in self._user_sources:
            return
        if isinstance(state.mode, Pinned):
            logger.debug(f"Manual selection of {event.tier_id} while pinned, ignoring")
            return
        state.mode = OverridePending(event.tier_id)
        logger.info(f"Manual selection of {event.tier_id} ({event.source}), skipping next route")


class RoutingSession:
    """Binds an engine to one host session: event handlers and commands."""

    def __init__(self, engine: RoutingEngine, host: HostContext, state: RoutingState | None = None):
        self.engine = engine
        self.host = host
        self.state = state or RoutingState()

    @property
    def mode(self) -> RoutingMode:
        return self.state.mode

    @property
    def last_routed(self) -> str | None:
        return self.state.last_routed

    @property
    def last_decision(self) -> RoutingDecision | None:
        return self.state.last_decision

    async def on_before_agent_start(self, event: PromptEvent) -> RoutingDecision | None:
        return await self.engine.cycle(self.state, event.prompt, self.host)

    async def on_tier_select(self, event: TierSelectEvent) -> None:
        self.engine.observe_selection(self.state, event)

    async def pin(self, tier_name: str) -> bool:
        return await self.engine.pin(self.state, tier_name, self.host)

    async def unpin(self) -> None:
        self.engine.unpin(self.state, self.host)

    def commands(self) -> dict[str, Callable[[], Awaitable[object]]]:
        """No-argument commands: ``route-<tier>`` for each tier, plus ``route-auto``."""
        cmds: dict[str, Callable[[], Awaitable[object]]] = {}
        for tier in self.engine.catalog:
            cmds[f"route-{tier.keyword}"] = self._pin_command(tier.id)
        cmds["route-auto"] = self.unpin
        return cmds

    def _pin_command(self, tier_id: str) -> Callable[[], Awaitable[bool]]:
        async def _run() -> bool:
            return await self.pin(tier_id)
        return _run
