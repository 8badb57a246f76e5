"""Routing error taxonomy.

None of these escape a routing cycle or a command handler; they are caught
at that boundary and surfaced as a warning status.
"""


class RouterError(RuntimeError):
    """Base class for all tier-router errors."""


class ClassificationUnavailable(RouterError):
    """The arbiter could not be consulted (credential, model lookup, transport)."""


class SwitchRejected(RouterError):
    """The host refused or failed to switch to the requested tier."""

    def __init__(self, tier_id: str, detail: str = ""):
        self.tier_id = tier_id
        self.detail = detail
        msg = f"switch to {tier_id} rejected"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class ConfigInvalid(RouterError):
    """A command or configuration value references something that does not exist."""
