"""Router configuration and engine wiring."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping

from loguru import logger

from tier_router.applier import DecisionApplier
from tier_router.arbiter import ARBITER_MAX_TOKENS, ARBITER_MODEL, ArbiterClient, ArbiterPolicy
from tier_router.catalog import DEFAULT_CATALOG, TierCatalog
from tier_router.errors import ConfigInvalid
from tier_router.heuristics import HIGH_TIER_SIGNALS, LONG_PROMPT_CHARS, check_signals
from tier_router.models import LLMProvider
from tier_router.router import USER_SELECTION_SOURCES, RoutingEngine


@dataclass
class RouterConfig:
    """Everything that varies between deployments of the router."""

    catalog: TierCatalog = DEFAULT_CATALOG
    signals: tuple[str, ...] = HIGH_TIER_SIGNALS
    long_prompt_chars: int = LONG_PROMPT_CHARS
    arbiter_model: str = ARBITER_MODEL
    arbiter_max_tokens: int = ARBITER_MAX_TOKENS
    arbiter_instructions: str | None = None
    user_sources: frozenset[str] = field(default_factory=lambda: USER_SELECTION_SOURCES)
    status_label: str = "router"

    def __post_init__(self) -> None:
        self.signals = tuple(self.signals)
        self.user_sources = frozenset(self.user_sources)
        self.validate()

    def validate(self) -> None:
        problems = check_signals(self.signals)
        if self.long_prompt_chars <= 0:
            problems.append(f"long_prompt_chars must be positive, got {self.long_prompt_chars}")
        if self.arbiter_max_tokens <= 0:
            problems.append(f"arbiter_max_tokens must be positive, got {self.arbiter_max_tokens}")
        if self.arbiter_model not in self.catalog:
            problems.append(f"arbiter model '{self.arbiter_model}' is not in the tier catalog")
        if not self.status_label:
            problems.append("status_label must not be empty")
        if problems:
            raise ConfigInvalid("; ".join(problems))

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "RouterConfig":
        """Build a config from a plain mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in raw.items():
            if key not in known:
                logger.warning(f"RouterConfig: ignoring unknown key '{key}'")
                continue
            kwargs[key] = value
        return cls(**kwargs)

    @property
    def arbiter_policy(self) -> ArbiterPolicy:
        return ArbiterPolicy(
            model=self.arbiter_model,
            max_tokens=self.arbiter_max_tokens,
            instructions=self.arbiter_instructions,
        )


def build_engine(provider: LLMProvider, config: RouterConfig | None = None) -> RoutingEngine:
    """Wire classifier, arbiter and applier into one engine."""
    config = config or RouterConfig()
    arbiter = ArbiterClient(
        provider, config.catalog, config.arbiter_policy, status_label=config.status_label,
    )
    applier = DecisionApplier(config.catalog, status_label=config.status_label)
    logger.info(
        f"Tier router: {len(config.catalog)} tiers, low={config.catalog.low.id} "
        f"high={config.catalog.high.id} arbiter={config.arbiter_model}"
    )
    return RoutingEngine(
        config.catalog,
        arbiter,
        applier,
        signals=config.signals,
        long_prompt_chars=config.long_prompt_chars,
        user_sources=config.user_sources,
        status_label=config.status_label,
    )
