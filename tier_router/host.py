"""Host collaborator interface and the events the router reacts to."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PromptEvent:
    """Fired before the agent starts working on a prompt."""
    prompt: str


@dataclass(frozen=True)
class TierSelectEvent:
    """Fired whenever the active tier changes.

    ``source`` tells user-initiated changes ("cycle", "set") apart from
    programmatic ones such as the router's own switches.
    """
    tier_id: str
    source: str


class HostContext(ABC):
    """What the hosting application provides to the router.

    Model lookup and credential lookup belong to the host; a missing model
    or key is reported, never fatal.
    """

    @abstractmethod
    def active_tier(self) -> str | None:
        """Id of the tier currently serving requests."""
        ...

    @abstractmethod
    async def switch_tier(self, tier_id: str) -> bool:
        """Make ``tier_id`` the active tier. Returns False on failure."""
        ...

    @abstractmethod
    def find_model(self, model_id: str) -> Any | None:
        """Look up a model handle by id, or None if the host does not know it."""
        ...

    @abstractmethod
    async def get_api_key(self, model: Any) -> str | None:
        ...

    @abstractmethod
    def set_status(self, label: str, message: str | None) -> None:
        """Set (or clear, with None) a status-bar entry."""
        ...

    def notify(self, message: str, level: str = "info") -> None:
        """Show a transient notification. Hosts without one just drop it."""
