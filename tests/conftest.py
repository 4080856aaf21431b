"""Pytest configuration and shared fixtures."""

import asyncio

import pytest

from jium.api.container import Container, reset_container, set_container
from jium.api.dependencies import limiter
from jium.domain.ports.config import AppConfig
from jium.domain.ports.llm import LLMMessage, LLMResponse
from jium.infrastructure.resilience import reset_all_breakers


class FakeLLM:
    """In-memory LLMPort: records calls, returns fixed text or raises."""

    def __init__(self, content: str = "너는 대학생을 위한 IT 콘텐츠 크리에이터야. AI 윤리에 대한 글을 써줘.") -> None:
        self.content = content
        self.error: Exception | None = None
        self.delay = 0.0
        self.available = True
        self.calls: list[list[LLMMessage]] = []

    async def generate(self, messages, model=None, temperature=0.7) -> LLMResponse:
        self.calls.append(list(messages))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.content, model=model or "fake")

    async def is_available(self) -> bool:
        return self.available


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def make_container(fake_llm):
    """Build a Container on *config* with the fake LLM wired in."""

    def _make(config: AppConfig | None = None, llm=None) -> Container:
        container = Container(config or AppConfig())
        container.__dict__["llm"] = llm or fake_llm
        return container

    return _make


@pytest.fixture
def app_container(make_container):
    """Install a fresh container for API tests; limiter and breakers reset after."""
    container = make_container()
    set_container(container)
    yield container
    reset_container()
    limiter.reset()
    reset_all_breakers()


@pytest.fixture
def blog_inputs() -> dict[str, str]:
    return {
        "topic": "AI 윤리",
        "targetAudience": "대학생",
        "tone": "전문적으로",
        "constraints": "없음",
    }
