"""Gemini adapter - Google Generative Language REST API (models/*:generateContent)."""

import logging

import httpx

from jium.domain.ports.config import GeminiConfig
from jium.domain.ports.llm import LLMMessage, LLMResponse
from jium.infrastructure.resilience import CircuitBreakerConfig, get_circuit_breaker

logger = logging.getLogger(__name__)


class GeminiAdapter:
    """Implements LLMPort on top of generateContent."""

    def __init__(self, config: GeminiConfig) -> None:
        self._config = config
        self._base_url = config.base_url.rstrip("/")
        self._headers = {"Content-Type": "application/json", "x-goog-api-key": config.api_key}
        self._client: httpx.AsyncClient | None = None
        self._breaker = get_circuit_breaker(
            "gemini",
            CircuitBreakerConfig(failure_threshold=5, recovery_timeout=30.0, success_threshold=1),
        )

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._config.timeout, headers=self._headers)
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client (call during app shutdown)."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _request_body(self, messages: list[LLMMessage], temperature: float) -> dict:
        """System messages become systemInstruction; assistant turns use role "model"."""
        system = [m.content for m in messages if m.role == "system"]
        contents = [
            {"role": "model" if m.role == "assistant" else "user", "parts": [{"text": m.content}]}
            for m in messages
            if m.role != "system"
        ]
        generation_config: dict = {"temperature": temperature}
        if self._config.max_output_tokens is not None:
            generation_config["maxOutputTokens"] = self._config.max_output_tokens
        body: dict = {"contents": contents, "generationConfig": generation_config}
        if system:
            body["systemInstruction"] = {"parts": [{"text": "\n\n".join(system)}]}
        return body

    @staticmethod
    def _extract_text(data: dict) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            feedback = data.get("promptFeedback") or {}
            logger.warning("Gemini returned no candidates (blockReason=%s)", feedback.get("blockReason"))
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(p.get("text", "") for p in parts)

    async def generate(
        self,
        messages: list[LLMMessage],
        model: str | None = None,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """Generate a single completion.

        Raises:
            httpx.HTTPStatusError: Gemini answered with an error status.
            CircuitOpenError: Gemini failed repeatedly and is being skipped.

        """
        model = model or self._config.model
        body = self._request_body(messages, temperature)

        async def _call() -> httpx.Response:
            resp = await self._get_client().post(f"{self._base_url}/models/{model}:generateContent", json=body)
            if resp.status_code >= 400:
                logger.error("Gemini API error %s: %s", resp.status_code, resp.text[:500])
            resp.raise_for_status()
            return resp

        resp = await self._breaker.call(_call)
        data = resp.json()
        return LLMResponse(content=self._extract_text(data), model=data.get("modelVersion") or model, done=True)

    async def is_available(self) -> bool:
        """Check that the API key can list models."""
        if not self._config.api_key:
            return False
        try:
            async with httpx.AsyncClient(timeout=5.0) as client:
                resp = await client.get(f"{self._base_url}/models", headers=self._headers)
                return resp.status_code == 200
        except httpx.HTTPError as e:
            logger.debug("Gemini availability check failed: %s", e)
            return False
