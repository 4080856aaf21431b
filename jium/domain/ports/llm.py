"""LLM Port - interface for generation backends."""

from typing import Protocol

from pydantic import BaseModel


class LLMMessage(BaseModel):
    """Single message sent to the backend."""

    role: str  # "system" | "user" | "assistant"
    content: str


class LLMResponse(BaseModel):
    """Completion returned by the backend."""

    content: str
    model: str
    done: bool = True


class LLMPort(Protocol):
    """Interface for generation backends (Ollama, LM Studio, Gemini)."""

    async def generate(
        self,
        messages: list[LLMMessage],
        model: str | None = None,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """Generate a single completion."""
        ...

    async def is_available(self) -> bool:
        """Check if the backend is reachable."""
        ...
