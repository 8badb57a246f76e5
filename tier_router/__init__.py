"""tier-router: per-prompt cost tier routing with heuristics, an arbiter, and pinning."""

from tier_router.anthropic_provider import AnthropicProvider
from tier_router.applier import DecisionApplier
from tier_router.arbiter import ArbiterClient, ArbiterPolicy, DefaultedUnrecognized, Resolved, parse_arbiter_answer
from tier_router.catalog import DEFAULT_CATALOG, Tier, TierCatalog
from tier_router.config import RouterConfig, build_engine
from tier_router.errors import ClassificationUnavailable, ConfigInvalid, RouterError, SwitchRejected
from tier_router.heuristics import HIGH_TIER_SIGNALS, classify
from tier_router.host import HostContext, PromptEvent, TierSelectEvent
from tier_router.models import (
    Auto,
    Classification,
    LLMProvider,
    LLMResponse,
    OverridePending,
    Pinned,
    Provenance,
    RoutingDecision,
    RoutingState,
)
from tier_router.router import RoutingEngine, RoutingSession

__all__ = [
    "AnthropicProvider",
    "ArbiterClient",
    "ArbiterPolicy",
    "Auto",
    "Classification",
    "ClassificationUnavailable",
    "ConfigInvalid",
    "DEFAULT_CATALOG",
    "DecisionApplier",
    "DefaultedUnrecognized",
    "HIGH_TIER_SIGNALS",
    "HostContext",
    "LLMProvider",
    "LLMResponse",
    "OverridePending",
    "Pinned",
    "PromptEvent",
    "Provenance",
    "Resolved",
    "RouterConfig",
    "RouterError",
    "RoutingDecision",
    "RoutingEngine",
    "RoutingSession",
    "RoutingState",
    "SwitchRejected",
    "Tier",
    "TierCatalog",
    "TierSelectEvent",
    "build_engine",
    "classify",
    "parse_arbiter_answer",
]
