"""OpenAI-compatible adapter - LM Studio, vLLM, LocalAI (/chat/completions)."""

import logging

import httpx

from jium.domain.ports.config import OpenAICompatibleConfig
from jium.domain.ports.llm import LLMMessage, LLMResponse
from jium.infrastructure.resilience import CircuitBreakerConfig, get_circuit_breaker

logger = logging.getLogger(__name__)

# Local servers answer with whatever model is loaded.
DEFAULT_MODEL = "default"


class OpenAICompatibleAdapter:
    """Implements LLMPort for servers speaking the OpenAI chat API."""

    def __init__(self, config: OpenAICompatibleConfig) -> None:
        self._config = config
        self._base_url = config.base_url.rstrip("/")
        self._headers = {"Content-Type": "application/json"}
        if config.api_key:
            self._headers["Authorization"] = f"Bearer {config.api_key}"
        self._client: httpx.AsyncClient | None = None
        self._breaker = get_circuit_breaker(
            "openai_compatible",
            CircuitBreakerConfig(failure_threshold=5, recovery_timeout=30.0, success_threshold=1),
        )

    def _http(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._config.timeout, headers=self._headers)
        return self._client

    async def close(self) -> None:
        """Close the pooled HTTP client (app shutdown)."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    @staticmethod
    def _first_choice_text(data: dict) -> str:
        choices = data.get("choices") or []
        if not choices:
            return ""
        return (choices[0].get("message") or {}).get("content") or ""

    async def generate(
        self,
        messages: list[LLMMessage],
        model: str | None = None,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """Generate a single completion.

        Raises:
            httpx.HTTPStatusError: the server answered with an error status.
            CircuitOpenError: the server failed repeatedly and is being skipped.

        """
        model = model or DEFAULT_MODEL
        payload: dict = {
            "model": model,
            "messages": [m.model_dump() for m in messages],
            "temperature": temperature,
            "stream": False,
        }
        if self._config.max_tokens is not None:
            payload["max_tokens"] = self._config.max_tokens

        async def _post() -> httpx.Response:
            resp = await self._http().post(f"{self._base_url}/chat/completions", json=payload)
            if resp.status_code >= 400:
                logger.error("Chat completions error %s: %s", resp.status_code, resp.text[:500])
            resp.raise_for_status()
            return resp

        data = (await self._breaker.call(_post)).json()
        return LLMResponse(content=self._first_choice_text(data), model=data.get("model") or model)

    async def is_available(self) -> bool:
        """True when GET /models answers 200."""
        try:
            async with httpx.AsyncClient(timeout=5.0) as client:
                resp = await client.get(f"{self._base_url}/models", headers=self._headers)
        except (httpx.HTTPError, OSError) as e:
            logger.debug("OpenAI-compatible server unreachable: %s", e)
            return False
        return resp.status_code == 200
