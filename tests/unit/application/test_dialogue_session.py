"""Tests for DialogueSession."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from jium.application.dialogue.engine import DialogueEngine
from jium.application.dialogue.session import DialogueSession
from jium.application.synthesis.dto import SynthesisResponse
from jium.domain.entities.conversation import ConversationState, MessageKind, SuggestedReply
from jium.domain.errors import ConversationBusyError
from jium.domain.services.field_validator import FieldValidator
from jium.domain.services.template_registry import TemplateRegistry
from jium.domain.templates import BUILTIN_SCHEMAS, BUILTIN_TEMPLATES

GENERATE = SuggestedReply(label="✨ 프롬프트 생성하기", triggers_final=True)


@pytest.fixture
def gate():
    return asyncio.Event()


@pytest.fixture
def use_case(gate):
    async def execute(request, caller_identity):
        await gate.wait()
        return SynthesisResponse(final_artifact="완성된 프롬프트")

    mock = MagicMock()
    mock.execute = AsyncMock(side_effect=execute)
    return mock


@pytest.fixture
def session(use_case):
    engine = DialogueEngine(
        TemplateRegistry(BUILTIN_TEMPLATES),
        FieldValidator(BUILTIN_SCHEMAS),
        synthesis=use_case,
        timeout=5.0,
    )
    return DialogueSession(engine, caller_identity="10.0.0.7")


async def _fill_blog(session: DialogueSession) -> None:
    session.start()
    for utterance in ("블로그 글쓰기", "AI 윤리", "대학생", "전문적으로", "없음"):
        await session.send(utterance)


class TestDialogueSession:
    @pytest.mark.asyncio
    async def test_collects_and_synthesizes(self, session, gate, use_case):
        await _fill_blog(session)
        gate.set()
        result = await session.send("", GENERATE)
        assert result.messages[0].kind is MessageKind.FINAL
        assert session.state == ConversationState()
        assert not session.busy
        assert use_case.execute.call_args.args[1] == "10.0.0.7"

    @pytest.mark.asyncio
    async def test_second_send_while_synthesizing_is_refused(self, session, gate):
        await _fill_blog(session)
        task = asyncio.create_task(session.send("", GENERATE))
        await asyncio.sleep(0)
        assert session.busy
        with pytest.raises(ConversationBusyError):
            await session.send("안녕하세요")
        with pytest.raises(ConversationBusyError):
            session.start()
        gate.set()
        result = await task
        assert result.messages[0].kind is MessageKind.FINAL
        assert not session.busy

    @pytest.mark.asyncio
    async def test_cancel_resets_to_idle(self, session):
        await _fill_blog(session)
        task = asyncio.create_task(session.send("", GENERATE))
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert session.state == ConversationState()
        assert not session.busy

    @pytest.mark.asyncio
    async def test_plain_turn_updates_state(self, session):
        session.start()
        result = await session.send("블로그 글쓰기")
        assert session.state == result.state
        assert session.state.template_type == "blog"


class TestContainerSession:
    @pytest.mark.asyncio
    async def test_embedded_conversation_reaches_artifact(self, make_container, fake_llm):
        session = make_container().session("embedded")
        await _fill_blog(session)
        result = await session.send("", GENERATE)
        assert result.messages[0].kind is MessageKind.FINAL
        assert result.messages[0].text == fake_llm.content
        assert session.state == ConversationState()
