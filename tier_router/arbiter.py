"""Arbiter — asks a cheap model to settle prompts the heuristics can't."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from tier_router.catalog import TierCatalog
from tier_router.errors import ClassificationUnavailable
from tier_router.host import HostContext
from tier_router.models import Classification, LLMProvider

ARBITER_MODEL = "claude-haiku-4-5"
ARBITER_MAX_TOKENS = 16

# Reasons reported alongside a fallback classification
UNAVAILABLE = "unavailable"
UNRECOGNIZED = "unrecognized"

POLICY_TEMPLATE = """You are a model router. Given a user's prompt to a coding assistant, decide which model should handle it.

Reply with ONLY one word: "{low}" or "{high}".

Use {high} for:
- Complex architecture and system design
- Multi-file refactors with tricky interdependencies
- Subtle debugging (race conditions, memory leaks, flaky tests)
- Novel algorithm design
- Nuanced writing or deep analysis
- Tasks requiring long chains of reasoning

Use {low} for everything else:
- File reads, lookups, status checks
- Simple to moderate code edits
- Running commands
- Straightforward questions
- Standard refactors
- Writing tests for existing code
- Most everyday coding tasks

When in doubt, pick {low}. Only pick {high} when the task genuinely needs deeper reasoning."""


@dataclass(frozen=True)
class ArbiterPolicy:
    """Instruction, model and output cap for the arbiter request."""

    model: str = ARBITER_MODEL
    max_tokens: int = ARBITER_MAX_TOKENS
    instructions: str | None = None  # None -> POLICY_TEMPLATE filled from the catalog

    def render(self, catalog: TierCatalog) -> str:
        if self.instructions is not None:
            return self.instructions
        return POLICY_TEMPLATE.format(low=catalog.low.keyword, high=catalog.high.keyword)


# --- Parsed arbiter answers ---


@dataclass(frozen=True)
class Resolved:
    """The arbiter named a tier."""
    classification: Classification


@dataclass(frozen=True)
class DefaultedUnrecognized:
    """The answer named no tier; routing falls back to low."""
    answer: str

    @property
    def classification(self) -> Classification:
        return Classification.LOW


ArbiterVerdict = Resolved | DefaultedUnrecognized


def parse_arbiter_answer(answer: str | None, high_keyword: str, low_keyword: str | None = None) -> ArbiterVerdict:
    """Parse the arbiter's single-word answer.

    Containment of the high keyword wins. Anything else, including empty or
    malformed output, ends up low: as ``Resolved`` if the low keyword is
    present, otherwise as ``DefaultedUnrecognized``.
    """
    normalized = (answer or "").strip().lower()
    if high_keyword.lower() in normalized:
        return Resolved(Classification.HIGH)
    if low_keyword and low_keyword.lower() in normalized:
        return Resolved(Classification.LOW)
    return DefaultedUnrecognized(normalized)


class ArbiterClient:
    """Resolves ``uncertain`` prompts into low or high with one model call.

    Single attempt, no retries, fail-open: every failure resolves to low and
    is reported through the host's status channel.
    """

    def __init__(
        self,
        provider: LLMProvider,
        catalog: TierCatalog,
        policy: ArbiterPolicy | None = None,
        *,
        status_label: str = "router",
    ):
        self._provider = provider
        self._catalog = catalog
        self._policy = policy or ArbiterPolicy()
        self._status_label = status_label
        self._instructions = self._policy.render(catalog)

    @property
    def policy(self) -> ArbiterPolicy:
        return self._policy

    async def resolve(self, prompt: str, host: HostContext) -> Classification:
        classification, _ = await self.arbitrate(prompt, host)
        return classification

    async def arbitrate(self, prompt: str, host: HostContext) -> tuple[Classification, str]:
        """Like ``resolve``, also returning why: the classification, UNRECOGNIZED or UNAVAILABLE."""
        try:
            verdict = await self._ask(prompt, host)
        except Exception as e:
            logger.warning(f"Arbiter unavailable, defaulting to {self._catalog.low.id}: {e}")
            host.set_status(self._status_label, f"⚠ {e}")
            host.notify(f"Tier router: classification unavailable ({e})", "warning")
            return Classification.LOW, UNAVAILABLE

        if isinstance(verdict, DefaultedUnrecognized):
            logger.info(f"Arbiter answer '{verdict.answer}' unrecognized, defaulting to low")
            return verdict.classification, UNRECOGNIZED
        return verdict.classification, verdict.classification.value

    async def _ask(self, prompt: str, host: HostContext) -> ArbiterVerdict:
        model_id = self._policy.model
        if model_id not in self._catalog:
            raise ClassificationUnavailable(f"{model_id} not found")
        model = host.find_model(model_id)
        if model is None:
            raise ClassificationUnavailable(f"{model_id} not found")

        api_key = await host.get_api_key(model)
        if not api_key:
            raise ClassificationUnavailable(f"no API key for {model_id}")

        host.set_status(self._status_label, "routing…")
        response = await self._provider.chat(
            messages=[{"role": "user", "content": prompt}],
            model=model_id,
            max_tokens=self._policy.max_tokens,
            system=self._instructions,
            api_key=api_key,
        )
        if response.finish_reason == "error":
            raise ClassificationUnavailable(response.content or "arbiter returned an error")

        verdict = parse_arbiter_answer(
            response.content, self._catalog.high.keyword, self._catalog.low.keyword,
        )
        logger.debug(f"Arbiter ({model_id}) answered '{response.content}' -> {verdict}")
        return verdict
