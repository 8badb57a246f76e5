"""Shared fakes for tier-router tests."""

from typing import Any

import pytest

from tier_router import DEFAULT_CATALOG, HostContext, LLMProvider, LLMResponse, RoutingSession, build_engine


class FakeHost(HostContext):
    def __init__(self, active: str | None = "claude-sonnet-4-6", api_key: str | None = "sk-test"):
        self.active = active
        self.api_key = api_key
        self.known_models = {t.id for t in DEFAULT_CATALOG}
        self.switch_result: bool | Exception = True
        self.switch_calls: list[str] = []
        self.statuses: list[tuple[str, str | None]] = []
        self.notices: list[tuple[str, str]] = []

    def active_tier(self) -> str | None:
        return self.active

    async def switch_tier(self, tier_id: str) -> bool:
        self.switch_calls.append(tier_id)
        if isinstance(self.switch_result, Exception):
            raise self.switch_result
        if self.switch_result:
            self.active = tier_id
        return self.switch_result

    def find_model(self, model_id: str) -> Any | None:
        return {"id": model_id} if model_id in self.known_models else None

    async def get_api_key(self, model: Any) -> str | None:
        return self.api_key

    def set_status(self, label: str, message: str | None) -> None:
        self.statuses.append((label, message))

    def notify(self, message: str, level: str = "info") -> None:
        self.notices.append((message, level))

    @property
    def last_status(self) -> str | None:
        return self.statuses[-1][1] if self.statuses else None

    @property
    def warnings(self) -> list[str]:
        return [m for m, level in self.notices if level == "warning"]


class FakeProvider(LLMProvider):
    def __init__(self, answer: str | None = "sonnet", error: Exception | None = None):
        super().__init__()
        self.answer = answer
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def chat(self, messages, model=None, max_tokens=4096, temperature=0.0, system=None, api_key=None):
        self.calls.append({
            "messages": messages, "model": model, "max_tokens": max_tokens,
            "system": system, "api_key": api_key,
        })
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.answer, model_used=model or "")


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def engine(provider):
    return build_engine(provider)


@pytest.fixture
def session(engine, host):
    return RoutingSession(engine, host)
