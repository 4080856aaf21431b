"""Tests for PromptSynthesizer and SynthesisUseCase."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from jium.application.synthesis.dto import SynthesisRequest
from jium.application.synthesis.synthesizer import PromptSynthesizer
from jium.application.synthesis.use_case import SynthesisUseCase
from jium.domain.errors import (
    FieldValidationError,
    GenerationFailedError,
    MalformedRequestError,
    ThrottledError,
    UnknownTemplateError,
)
from jium.domain.ports.admission import AdmissionDecision
from jium.domain.ports.config import AdmissionConfig, SynthesisConfig
from jium.domain.ports.llm import LLMResponse
from jium.domain.services.field_validator import FieldValidator
from jium.domain.services.template_registry import TemplateRegistry
from jium.domain.templates import BUILTIN_SCHEMAS, BUILTIN_TEMPLATES
from jium.infrastructure.admission.controller import AdmissionController


@pytest.fixture
def registry():
    return TemplateRegistry(BUILTIN_TEMPLATES)


@pytest.fixture
def synthesizer(fake_llm, registry):
    return PromptSynthesizer(fake_llm, registry, SynthesisConfig(timeout_seconds=0.5, retry_attempts=2))


@pytest.fixture
def admission():
    mock = MagicMock()
    mock.admit = AsyncMock(return_value=AdmissionDecision.ALLOWED)
    return mock


@pytest.fixture
def use_case(admission, synthesizer):
    return SynthesisUseCase(admission, FieldValidator(BUILTIN_SCHEMAS), synthesizer)


class TestPromptSynthesizer:
    @pytest.mark.asyncio
    async def test_sends_meta_instruction_as_single_user_message(self, synthesizer, fake_llm, blog_inputs):
        artifact = await synthesizer.synthesize("blog", blog_inputs)
        assert artifact == fake_llm.content
        [messages] = fake_llm.calls
        assert len(messages) == 1
        assert messages[0].role == "user"
        assert messages[0].content == synthesizer.build_instruction("blog", blog_inputs)

    @pytest.mark.asyncio
    async def test_output_returned_verbatim(self, synthesizer, fake_llm, blog_inputs):
        fake_llm.content = "  ### 결과\n본문  \n"
        assert await synthesizer.synthesize("blog", blog_inputs) == "  ### 결과\n본문  \n"

    @pytest.mark.asyncio
    async def test_empty_output_fails(self, synthesizer, fake_llm, blog_inputs):
        fake_llm.content = "   "
        with pytest.raises(GenerationFailedError):
            await synthesizer.synthesize("blog", blog_inputs)

    @pytest.mark.asyncio
    async def test_timeout_fails(self, synthesizer, fake_llm, blog_inputs):
        fake_llm.delay = 2.0
        with pytest.raises(GenerationFailedError):
            await synthesizer.synthesize("blog", blog_inputs)

    @pytest.mark.asyncio
    async def test_transport_error_is_retried(self, registry, blog_inputs):
        llm = MagicMock()
        llm.generate = AsyncMock(
            side_effect=[httpx.ConnectError("refused"), LLMResponse(content="두 번째 시도", model="m")]
        )
        synthesizer = PromptSynthesizer(llm, registry, SynthesisConfig(timeout_seconds=5, retry_attempts=2))
        assert await synthesizer.synthesize("blog", blog_inputs) == "두 번째 시도"
        assert llm.generate.await_count == 2

    @pytest.mark.asyncio
    async def test_error_status_is_not_retried(self, registry, blog_inputs):
        request = httpx.Request("POST", "http://llm/chat")
        error = httpx.HTTPStatusError("boom", request=request, response=httpx.Response(500, request=request))
        llm = MagicMock()
        llm.generate = AsyncMock(side_effect=error)
        synthesizer = PromptSynthesizer(llm, registry, SynthesisConfig(timeout_seconds=5, retry_attempts=3))
        with pytest.raises(GenerationFailedError) as exc_info:
            await synthesizer.synthesize("blog", blog_inputs)
        assert llm.generate.await_count == 1
        assert exc_info.value.__cause__ is None

    def test_unknown_template(self, synthesizer):
        with pytest.raises(UnknownTemplateError):
            synthesizer.build_instruction("poem", {})

    def test_target_language_from_config(self, fake_llm, registry, blog_inputs):
        synthesizer = PromptSynthesizer(fake_llm, registry, SynthesisConfig(target_language="English"))
        assert "반드시 English로 작성해." in synthesizer.build_instruction("blog", blog_inputs)


class TestSynthesisUseCase:
    @pytest.mark.asyncio
    async def test_valid_blog_request(self, use_case, fake_llm, blog_inputs):
        response = await use_case.execute({"templateType": "blog", "inputs": blog_inputs}, "10.0.0.1")
        assert response.final_artifact
        assert len(fake_llm.calls) == 1

    @pytest.mark.asyncio
    async def test_accepts_request_model(self, use_case, blog_inputs):
        request = SynthesisRequest(template_type="blog", inputs=blog_inputs)
        response = await use_case.execute(request, "10.0.0.1")
        assert response.model_dump(by_alias=True) == {"finalArtifact": response.final_artifact}

    @pytest.mark.asyncio
    async def test_missing_topic(self, use_case, fake_llm, blog_inputs):
        del blog_inputs["topic"]
        with pytest.raises(FieldValidationError) as exc_info:
            await use_case.execute({"templateType": "blog", "inputs": blog_inputs}, "10.0.0.1")
        assert exc_info.value.code == "INVALID_INPUT"
        assert "topic" in exc_info.value.field_errors
        assert fake_llm.calls == []

    @pytest.mark.asyncio
    async def test_unknown_template(self, use_case, fake_llm):
        with pytest.raises(UnknownTemplateError) as exc_info:
            await use_case.execute({"templateType": "poem", "inputs": {"topic": "봄"}}, "10.0.0.1")
        assert exc_info.value.code == "INVALID_TEMPLATE_TYPE"
        assert fake_llm.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [None, [], {"inputs": {}}, {"templateType": "blog"}, {"templateType": "", "inputs": {}}, {"templateType": "blog", "inputs": "x"}],
    )
    async def test_malformed_request(self, use_case, payload):
        with pytest.raises(MalformedRequestError):
            await use_case.execute(payload, "10.0.0.1")

    @pytest.mark.asyncio
    async def test_throttled_before_validation(self, use_case, admission, fake_llm):
        admission.admit.return_value = AdmissionDecision.THROTTLED
        with pytest.raises(ThrottledError):
            await use_case.execute({"templateType": "poem"}, "10.0.0.1")
        assert fake_llm.calls == []

    @pytest.mark.asyncio
    async def test_eleventh_request_in_window_is_throttled(self, synthesizer, blog_inputs):
        admission = AdmissionController(AdmissionConfig(limit=10, window_seconds=60))
        validator = MagicMock(wraps=FieldValidator(BUILTIN_SCHEMAS))
        use_case = SynthesisUseCase(admission, validator, synthesizer)
        payload = {"templateType": "blog", "inputs": blog_inputs}
        for _ in range(10):
            await use_case.execute(payload, "10.0.0.1")
        validator.validate.reset_mock()
        with pytest.raises(ThrottledError) as exc_info:
            await use_case.execute(payload, "10.0.0.1")
        assert exc_info.value.status_code == 429
        validator.validate.assert_not_called()

    @pytest.mark.asyncio
    async def test_backend_failure_is_generic(self, use_case, fake_llm, blog_inputs):
        fake_llm.error = RuntimeError("secret upstream detail")
        with pytest.raises(GenerationFailedError) as exc_info:
            await use_case.execute({"templateType": "blog", "inputs": blog_inputs}, "10.0.0.1")
        payload = exc_info.value.to_payload()
        assert payload == {"error": "GENERATION_FAILED", "message": "프롬프트 생성에 실패했습니다."}
        assert "secret" not in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_backend_timeout_is_generic(self, use_case, fake_llm, blog_inputs):
        fake_llm.delay = 2.0
        with pytest.raises(GenerationFailedError):
            await use_case.execute({"templateType": "blog", "inputs": blog_inputs}, "10.0.0.1")

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, use_case, fake_llm, blog_inputs):
        fake_llm.delay = 0.3
        task = asyncio.create_task(use_case.execute({"templateType": "blog", "inputs": blog_inputs}, "10.0.0.1"))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
