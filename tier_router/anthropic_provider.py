"""AnthropicProvider — direct Messages API transport for the arbiter."""

from __future__ import annotations

import time
from typing import Any

import httpx
from loguru import logger

from tier_router.models import LLMProvider, LLMResponse

DEFAULT_API_BASE = "https://api.anthropic.com"
ANTHROPIC_VERSION = "2023-06-01"


class AnthropicProvider(LLMProvider):
    """Calls ``POST /v1/messages`` with httpx.

    The API key can be given at construction or per call; the per-call key
    wins, since credential lookup is owned by the host. HTTP errors are
    raised, not folded into the response, so callers decide how to degrade.
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_base: str | None = None,
        *,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(api_key=api_key, api_base=api_base or DEFAULT_API_BASE)
        self._timeout = timeout
        self._http = client

    async def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self._timeout)
        return self._http

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def chat(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.0,
        system: str | None = None,
        api_key: str | None = None,
    ) -> LLMResponse:
        key = api_key or self.api_key
        if not key:
            raise ValueError("AnthropicProvider: no API key")
        if not model:
            raise ValueError("AnthropicProvider: no model given")

        body: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": messages,
        }
        if system:
            body["system"] = system

        client = await self._client()
        t0 = time.monotonic()
        resp = await client.post(
            f"{self.api_base.rstrip('/')}/v1/messages",
            json=body,
            headers={
                "content-type": "application/json",
                "x-api-key": key,
                "anthropic-version": ANTHROPIC_VERSION,
            },
        )
        elapsed_ms = int((time.monotonic() - t0) * 1000)
        resp.raise_for_status()

        data = resp.json()
        text = "".join(
            block.get("text", "")
            for block in data.get("content") or []
            if isinstance(block, dict) and block.get("type") == "text"
        )
        usage = data.get("usage") or {}
        logger.debug(f"Anthropic {model} answered in {elapsed_ms}ms ({len(text)} chars)")

        return LLMResponse(
            content=text,
            finish_reason=data.get("stop_reason") or "stop",
            usage={
                "prompt_tokens": usage.get("input_tokens", 0),
                "completion_tokens": usage.get("output_tokens", 0),
            },
            model_used=data.get("model", model),
        )
