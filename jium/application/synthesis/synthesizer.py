"""Prompt synthesizer - meta-instruction construction plus one delegated generation.

Correctness of the assembled instruction is owned here. The backend's text
is returned exactly as received; nothing post-validates it.
"""

import asyncio
import logging
from collections.abc import Mapping

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from jium.domain.errors import GenerationFailedError, UnknownTemplateError
from jium.domain.ports.config import SynthesisConfig
from jium.domain.ports.llm import LLMMessage, LLMPort
from jium.domain.services.prompt_renderer import build_meta_instruction
from jium.domain.services.template_registry import TemplateRegistry

logger = logging.getLogger(__name__)

# Transport-level failures worth one more try; HTTP error statuses are not.
RETRYABLE_ERRORS = (httpx.TransportError, ConnectionError)


class PromptSynthesizer:
    """Builds the meta-instruction and asks the backend for the artifact."""

    def __init__(
        self,
        llm: LLMPort,
        registry: TemplateRegistry,
        config: SynthesisConfig | None = None,
    ) -> None:
        self._llm = llm
        self._registry = registry
        self._config = config or SynthesisConfig()

    def build_instruction(self, template_type: str, inputs: Mapping[str, str]) -> str:
        """Stage A: deterministic meta-instruction for validated inputs."""
        definition = self._registry.lookup(template_type)
        if definition is None:
            raise UnknownTemplateError()
        return build_meta_instruction(definition, inputs, language=self._config.target_language)

    async def _generate(self, instruction: str) -> str:
        messages = [LLMMessage(role="user", content=instruction)]
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._config.retry_attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            reraise=True,
        ):
            with attempt:
                response = await self._llm.generate(
                    messages=messages,
                    model=self._config.model,
                    temperature=self._config.temperature,
                )
        return response.content

    async def synthesize(self, template_type: str, inputs: Mapping[str, str]) -> str:
        """Build the instruction, generate, and return the backend's text verbatim.

        Raises:
            GenerationFailedError: backend unreachable, error status, timeout
                or empty output. The cause is logged, never attached.

        """
        instruction = self.build_instruction(template_type, inputs)
        try:
            content = await asyncio.wait_for(self._generate(instruction), timeout=self._config.timeout_seconds)
        except TimeoutError:
            logger.error(
                "Generation timed out after %.1fs for template=%s",
                self._config.timeout_seconds,
                template_type,
            )
            raise GenerationFailedError() from None
        except Exception:
            logger.exception("Generation failed for template=%s", template_type)
            raise GenerationFailedError() from None

        if not content or not content.strip():
            logger.error("Generation returned empty output for template=%s", template_type)
            raise GenerationFailedError()
        return content
