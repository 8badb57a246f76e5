"""Local prompt classification — avoids an arbiter call for obvious cases.

- Prompts containing a strong high-tier signal -> high, at any length
- Short prompts (< 100 chars) are almost always simple tasks -> low
- Medium prompts (100-399 chars) without signals -> low as well
- Longer prompts without clear signals -> uncertain (ask the arbiter)
"""

from __future__ import annotations

from typing import Iterable

from tier_router.models import Classification

LONG_PROMPT_CHARS = 400

# Lowercase substrings that strongly indicate a prompt needs the high tier.
HIGH_TIER_SIGNALS: tuple[str, ...] = (
    # Debugging complexity
    "flaky test",
    "intermittent",
    "heisenbug",
    "deadlock",
    "race condition",
    "memory leak",
    "segfault",
    "corruption",
    "off-by-one",
    # Architecture / design
    "design a system",
    "architect",
    "trade-off",
    "migration strategy",
    "how should i structure",
    "what's the right abstraction",
    "what is the right abstraction",
    # Multi-file / large scope
    "refactor across",
    "rename throughout",
    "move this module",
    "split this into",
    "merge these into",
    "across the codebase",
    # Deep analysis
    "explain the root cause",
    "what's wrong with this approach",
    "what is wrong with this approach",
    "review this design",
    "security audit",
    "performance analysis",
    # Novel / algorithmic
    "implement an algorithm",
    "write a parser",
    "state machine",
    "lock-free",
    "backtracking",
    # Long-form writing
    "write a proposal",
    " rfc",
    "design doc",
    "architecture decision record",
    " adr",
    "technical spec",
    # Multi-step reasoning
    "step by step",
    "walk me through",
    "debug this with me",
    "figure out why",
    "trace through",
)


def check_signals(signals: Iterable[str]) -> list[str]:
    """Return a list of problems with a signal set (empty when valid)."""
    problems = []
    seen: set[str] = set()
    for s in signals:
        if not s:
            problems.append("empty signal")
        elif s != s.lower():
            problems.append(f"signal '{s}' is not lowercase")
        if s in seen:
            problems.append(f"duplicate signal '{s}'")
        seen.add(s)
    return problems


def classify(
    prompt: str,
    signals: Iterable[str] = HIGH_TIER_SIGNALS,
    long_prompt_chars: int = LONG_PROMPT_CHARS,
) -> Classification:
    """Classify a prompt as low, high or uncertain.

    Matching is plain substring containment on the lowercased prompt, so a
    signal inside a longer word still counts.
    """
    p = prompt.lower()

    # Strong signals take priority regardless of length
    if any(s in p for s in signals):
        return Classification.HIGH

    if len(prompt) < long_prompt_chars:
        return Classification.LOW

    return Classification.UNCERTAIN
