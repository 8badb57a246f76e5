"""Core data models for tier-router."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Classification(str, Enum):
    """Outcome of classifying a prompt."""

    LOW = "low"
    HIGH = "high"
    UNCERTAIN = "uncertain"


class Provenance(str, Enum):
    """Which mechanism produced a routing decision."""

    HEURISTIC = "heuristic"
    ARBITER = "arbiter"
    PINNED = "pinned"
    MANUAL = "manual"


@dataclass
class LLMResponse:
    """Response from an LLM provider."""
    content: str | None
    finish_reason: str = "stop"
    usage: dict[str, int] = field(default_factory=dict)
    model_used: str = ""


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    def __init__(self, api_key: str | None = None, api_base: str | None = None):
        self.api_key = api_key
        self.api_base = api_base

    @abstractmethod
    async def chat(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.0,
        system: str | None = None,
        api_key: str | None = None,
    ) -> LLMResponse:
        """Send a chat completion request."""
        ...

    @property
    def name(self) -> str:
        return self.__class__.__name__


@dataclass(frozen=True)
class RoutingDecision:
    """Result of one routing cycle."""
    tier_id: str
    provenance: Provenance
    reason: str = ""
    degraded: bool = False  # fell back because classification was unavailable


# --- Routing modes ---


@dataclass(frozen=True)
class Auto:
    """Classify every prompt and route automatically."""


@dataclass(frozen=True)
class Pinned:
    """Force every cycle onto one tier until unpinned."""
    tier_id: str


@dataclass(frozen=True)
class OverridePending:
    """The user picked a tier by hand; skip routing for one cycle."""
    selected_tier_id: str | None = None


RoutingMode = Auto | Pinned | OverridePending


@dataclass
class RoutingState:
    """Per-session mutable routing state.

    Owned by one session and passed into every cycle, so several sessions
    can share a single engine.
    """
    mode: RoutingMode = field(default_factory=Auto)
    last_routed: str | None = None  # tier id of the last committed switch
    last_decision: RoutingDecision | None = None
