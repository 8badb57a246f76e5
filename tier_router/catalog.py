"""Tier catalog and alias resolution — single source of truth for tier names.

Used by the pin commands and by the arbiter when it looks up its own model.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from typing import Iterable

from tier_router.errors import ConfigInvalid


@dataclass(frozen=True)
class Tier:
    """One cost/capability level of the downstream service."""

    id: str      # full model identifier, e.g. "claude-opus-4-6"
    rank: int    # lower = cheaper
    label: str   # shown in the status bar
    aliases: tuple[str, ...] = field(default_factory=tuple)

    @property
    def keyword(self) -> str:
        """Short name the arbiter is asked to answer with."""
        return self.aliases[0] if self.aliases else self.id


def _normalize(s: str) -> str:
    """Strip hyphens, underscores, spaces, dots and lowercase."""
    return s.lower().replace("-", "").replace("_", "").replace(" ", "").replace(".", "")


class TierCatalog:
    """Read-only, rank-ordered set of tiers.

    ``low`` and ``high`` name the tiers that the two non-ambiguous
    classifications map to; they default to the cheapest and the most
    expensive tier respectively.
    """

    def __init__(self, tiers: Iterable[Tier], *, low: str | None = None, high: str | None = None):
        ordered = sorted(tiers, key=lambda t: t.rank)
        if not ordered:
            raise ConfigInvalid("tier catalog is empty")

        by_id: dict[str, Tier] = {}
        for tier in ordered:
            if tier.id in by_id:
                raise ConfigInvalid(f"duplicate tier id '{tier.id}'")
            by_id[tier.id] = tier

        # Normalized key -> tier id, built once for fast lookup.
        names: dict[str, str] = {}
        for tier in ordered:
            for key in (tier.id, *tier.aliases):
                normed = _normalize(key)
                owner = names.get(normed)
                if owner is not None and owner != tier.id:
                    raise ConfigInvalid(f"alias '{key}' is shared by '{owner}' and '{tier.id}'")
                names[normed] = tier.id

        self._tiers: tuple[Tier, ...] = tuple(ordered)
        self._by_id = by_id
        self._names = names
        self._low = self._require(low or ordered[0].id)
        self._high = self._require(high or ordered[-1].id)

    def _require(self, tier_id: str) -> Tier:
        tier = self._by_id.get(tier_id)
        if tier is None:
            raise ConfigInvalid(f"tier '{tier_id}' is not in the catalog")
        return tier

    def __iter__(self):
        return iter(self._tiers)

    def __len__(self) -> int:
        return len(self._tiers)

    def __contains__(self, tier_id: object) -> bool:
        return tier_id in self._by_id

    @property
    def low(self) -> Tier:
        return self._low

    @property
    def high(self) -> Tier:
        return self._high

    def get(self, tier_id: str | None) -> Tier | None:
        if tier_id is None:
            return None
        return self._by_id.get(tier_id)

    def resolve(self, raw: str) -> Tier:
        """Resolve a user-typed tier name to a catalog tier.

        Tries the exact id or alias, then a normalized match, then a fuzzy
        match. Raises ConfigInvalid with suggestions when nothing fits.
        """
        if not raw or not raw.strip():
            raise ConfigInvalid("no tier given")

        lowered = raw.strip().lower()

        # 1. Exact id
        if lowered in self._by_id:
            return self._by_id[lowered]

        # 2. Normalized id/alias match
        normed = _normalize(lowered)
        if normed in self._names:
            return self._by_id[self._names[normed]]

        # 3. Fuzzy match via difflib
        candidates = difflib.get_close_matches(normed, self._names.keys(), n=2, cutoff=0.7)
        matched = {self._names[c] for c in candidates}
        if len(matched) == 1:
            return self._by_id[matched.pop()]

        if len(matched) > 1:
            raise ConfigInvalid(f"Ambiguous tier '{raw}'. Did you mean: {', '.join(sorted(matched))}?")

        # 4. No match
        valid = ", ".join(t.keyword for t in self._tiers)
        raise ConfigInvalid(f"Unknown tier '{raw}'. Short names: {valid}")


HAIKU = Tier("claude-haiku-4-5", 0, "haiku 4.5", ("haiku",))
SONNET = Tier("claude-sonnet-4-6", 1, "sonnet 4.6", ("sonnet",))
OPUS = Tier("claude-opus-4-6", 2, "opus 4.6", ("opus",))

# Haiku is listed so the arbiter can find it and so it can be pinned;
# automatic routing only ever lands on sonnet or opus.
DEFAULT_CATALOG = TierCatalog([HAIKU, SONNET, OPUS], low=SONNET.id, high=OPUS.id)
