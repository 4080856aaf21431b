"""Ollama adapter - implements LLMPort with Circuit Breaker."""

import logging

import httpx
from ollama import AsyncClient

from jium.domain.ports.config import OllamaConfig
from jium.domain.ports.llm import LLMMessage, LLMResponse
from jium.infrastructure.resilience import CircuitBreakerConfig, get_circuit_breaker

logger = logging.getLogger(__name__)

# Fail fast when the host is down; the read timeout comes from config.
DEFAULT_CONNECT_TIMEOUT = 5.0
DEFAULT_MODEL = "qwen2.5:7b"


class OllamaAdapter:
    """Ollama implementation of LLMPort with Circuit Breaker protection."""

    def __init__(self, config: OllamaConfig) -> None:
        self._config = config
        read_timeout = float(config.timeout) if config.timeout else 120.0
        timeout = httpx.Timeout(
            connect=DEFAULT_CONNECT_TIMEOUT,
            read=read_timeout,
            write=read_timeout,
            pool=30.0,
        )
        self._client = AsyncClient(host=config.host, timeout=timeout)
        self._breaker = get_circuit_breaker(
            "ollama",
            CircuitBreakerConfig(failure_threshold=5, recovery_timeout=30.0, success_threshold=2),
        )

    def _ollama_options(self, temperature: float) -> dict:
        """Build options dict: temperature + optional num_ctx, num_predict from config."""
        opts: dict = {"temperature": temperature}
        if self._config.num_ctx is not None:
            opts["num_ctx"] = self._config.num_ctx
        if self._config.num_predict is not None:
            opts["num_predict"] = self._config.num_predict
        return opts

    async def generate(
        self,
        messages: list[LLMMessage],
        model: str | None = None,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """Generate a single completion.

        Raises:
            CircuitOpenError: Ollama failed repeatedly and is being skipped.

        """
        model = model or DEFAULT_MODEL
        msg_dicts = [{"role": m.role, "content": m.content} for m in messages]
        options = self._ollama_options(temperature)

        async def _call() -> LLMResponse:
            response = await self._client.chat(model=model, messages=msg_dicts, options=options)
            content = response.message.content if response.message else ""
            return LLMResponse(content=content or "", model=response.model or model, done=True)

        return await self._breaker.call(_call)

    async def is_available(self) -> bool:
        """Check if Ollama server is available. Fail-fast, no stale cache."""
        try:
            async with httpx.AsyncClient(timeout=5.0) as client:
                resp = await client.get(f"{self._config.host.rstrip('/')}/api/tags")
                if resp.status_code == 200:
                    return True
        except httpx.HTTPError as e:
            logger.debug("Ollama availability check failed: %s", e)
        return False
