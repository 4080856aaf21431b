"""Dialogue engine - the slot-filling state machine.

``step`` is synchronous and pure: it takes a state plus the user's turn and
returns a new state, the assistant messages to show and the suggestions to
offer. When a turn triggers synthesis, ``step`` only reports it through
``StepResult.pending``; ``finish`` performs the suspending call and always
lands back in Idle, with the artifact or the failure message.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from jium.application.synthesis.dto import SynthesisRequest
from jium.application.synthesis.use_case import SynthesisUseCase
from jium.domain.entities.conversation import (
    ConversationState,
    ConversationStep,
    DialoguePhase,
    Message,
    MessageKind,
    SuggestedReply,
    TemplateDefinition,
)
from jium.domain.errors import FieldValidationError, GenerationFailedError, SynthesisFailure
from jium.domain.services.field_validator import FieldValidator
from jium.domain.services.template_registry import TemplateRegistry

logger = logging.getLogger(__name__)

GREETING = "안녕하세요! 저는 당신의 AI 어시스턴트, 지음입니다. 어떤 결과물을 만들고 싶으신가요?"
CLARIFICATION = "어떤 결과물을 만들고 싶은지 잘 모르겠어요. 아래에서 하나를 골라 주세요."
STATE_LOST = "대화 상태를 이어갈 수 없어 처음부터 다시 시작할게요. 어떤 결과물을 만들고 싶으신가요?"
DEFAULT_REPROMPT = "조금 더 자세히 알려주세요."
DEFAULT_ELABORATION = "답변이 아직 짧아요. 한 문장 정도로 조금만 더 풀어서 적어 주세요."
FAILURE_PREFIX = "죄송해요, 생성 중 문제가 발생했어요."
FOLLOW_UP = "다른 결과물도 만들어 볼까요?"
RESTART_COMMANDS = ("처음으로", "다시 시작")


@dataclass(frozen=True)
class StepResult:
    """Outcome of one turn.

    ``phase`` is the phase this turn reached; after a failed synthesis it is
    FAILED while ``state`` is already the fresh Idle state.
    """

    state: ConversationState
    messages: list[Message] = field(default_factory=list)
    suggestions: list[SuggestedReply] = field(default_factory=list)
    phase: DialoguePhase = DialoguePhase.IDLE
    pending: SynthesisRequest | None = None


class DialogueEngine:
    """Decides what to ask next and when to synthesize."""

    def __init__(
        self,
        registry: TemplateRegistry,
        validator: FieldValidator,
        synthesis: SynthesisUseCase | None = None,
        timeout: float | None = None,
    ) -> None:
        """Create the engine.

        Args:
            registry: Dialogue flows.
            validator: Schemas; supplies each template's skip sentinels.
            synthesis: Synthesis endpoint used by ``finish``.
            timeout: Upper bound for one ``finish`` call, admission included.

        """
        self._registry = registry
        self._validator = validator
        self._synthesis = synthesis
        self._timeout = timeout

    # -- queries ---------------------------------------------------------

    def _is_consistent(self, state: ConversationState) -> bool:
        if state.is_idle:
            return state.step_index == 0 and not state.collected_inputs
        definition = self._registry.lookup(state.template_type)
        if definition is None or state.step_index >= len(definition.steps):
            return False
        return set(state.collected_inputs) <= set(definition.field_keys)

    def phase(self, state: ConversationState) -> DialoguePhase:
        """Phase of a resting state (Idle, Collecting or AwaitingConfirmation)."""
        definition = self._registry.lookup(state.template_type)
        if definition is None or state.step_index >= len(definition.steps):
            return DialoguePhase.IDLE
        if definition.steps[state.step_index].terminal:
            return DialoguePhase.AWAITING_CONFIRMATION
        return DialoguePhase.COLLECTING

    # -- transitions -----------------------------------------------------

    def restart(self) -> StepResult:
        """Fresh conversation: greeting plus the template menu."""
        return StepResult(
            state=ConversationState(),
            messages=[Message(text=GREETING, kind=MessageKind.GREETING)],
            suggestions=self._registry.menu(),
        )

    def step(
        self,
        state: ConversationState,
        utterance: str,
        selected: SuggestedReply | None = None,
    ) -> StepResult:
        """Advance the dialogue by one user turn."""
        text = (selected.label if selected is not None and not utterance.strip() else utterance).strip()
        if text in RESTART_COMMANDS:
            return self.restart()
        if not self._is_consistent(state):
            logger.warning("Inconsistent dialogue state for template=%s; restarting", state.template_type)
            return StepResult(
                state=ConversationState(),
                messages=[Message(text=STATE_LOST, kind=MessageKind.CLARIFICATION)],
                suggestions=self._registry.menu(),
            )
        if state.is_idle:
            return self._select_template(text)

        definition = self._registry.lookup(state.template_type)
        current = definition.steps[state.step_index]
        chosen = self._offered(current, selected, text)

        if chosen is not None and chosen.triggers_final:
            request = SynthesisRequest(template_type=definition.template_type, inputs=dict(state.collected_inputs))
            return StepResult(state=state, phase=DialoguePhase.SYNTHESIZING, pending=request)

        if current.terminal:
            return StepResult(
                state=state,
                messages=[Message(text=current.question, kind=MessageKind.CLARIFICATION)],
                suggestions=list(current.suggestions),
                phase=DialoguePhase.AWAITING_CONFIRMATION,
            )

        if chosen is not None:
            text = chosen.label
        elif self._too_short(definition, current, text):
            return self._reject(state, current)

        return self._advance(state, definition, {**state.collected_inputs, current.field_key: text})

    def _select_template(self, text: str) -> StepResult:
        definition = self._registry.match(text)
        if definition is None:
            return StepResult(
                state=ConversationState(),
                messages=[Message(text=CLARIFICATION, kind=MessageKind.CLARIFICATION)],
                suggestions=self._registry.menu(),
            )
        logger.debug("Template selected: %s", definition.template_type)
        first = definition.steps[0]
        return StepResult(
            state=ConversationState(template_type=definition.template_type),
            messages=[Message(text=first.question)],
            suggestions=list(first.suggestions),
            phase=DialoguePhase.AWAITING_CONFIRMATION if first.terminal else DialoguePhase.COLLECTING,
        )

    @staticmethod
    def _offered(
        current: ConversationStep,
        selected: SuggestedReply | None,
        text: str,
    ) -> SuggestedReply | None:
        """The suggestion this turn picked, if the current step really offers it.

        At the terminal step typing the label of a terminal suggestion counts
        as pressing it.
        """
        if selected is not None:
            return selected if selected in current.suggestions else None
        if current.terminal:
            for s in current.suggestions:
                if s.triggers_final and s.label == text:
                    return s
        return None

    def _too_short(self, definition: TemplateDefinition, current: ConversationStep, text: str) -> bool:
        if not text:
            return True
        if not current.min_length or len(text) >= current.min_length:
            return False
        schema = self._validator.schema_for(definition.template_type)
        return not (schema is not None and schema.accepts_as_skip(current.field_key, text))

    @staticmethod
    def _reject(state: ConversationState, current: ConversationStep) -> StepResult:
        """Re-ask the same step; a repeated rejection gets the escalated copy."""
        first = current.reprompt or DEFAULT_REPROMPT
        if state.rejected_field == current.field_key:
            text = current.elaboration or DEFAULT_ELABORATION
            if text == first:
                text = DEFAULT_ELABORATION
        else:
            text = first
        return StepResult(
            state=state.model_copy(update={"rejected_field": current.field_key}),
            messages=[Message(text=text, kind=MessageKind.REJECTION)],
            suggestions=list(current.suggestions),
            phase=DialoguePhase.COLLECTING,
        )

    @staticmethod
    def _advance(state: ConversationState, definition: TemplateDefinition, inputs: dict[str, str]) -> StepResult:
        index = state.step_index + 1
        nxt = definition.steps[index]
        return StepResult(
            state=ConversationState(template_type=definition.template_type, step_index=index, collected_inputs=inputs),
            messages=[Message(text=nxt.question)],
            suggestions=list(nxt.suggestions),
            phase=DialoguePhase.AWAITING_CONFIRMATION if nxt.terminal else DialoguePhase.COLLECTING,
        )

    # -- synthesis -------------------------------------------------------

    def _reset(self, message: Message, phase: DialoguePhase) -> StepResult:
        return StepResult(
            state=ConversationState(),
            messages=[message, Message(text=FOLLOW_UP)],
            suggestions=self._registry.menu(),
            phase=phase,
        )

    @staticmethod
    def failure_text(failure: SynthesisFailure) -> str:
        """Conversational rendering of a synthesis failure."""
        text = f"{FAILURE_PREFIX} {failure.message}"
        if isinstance(failure, FieldValidationError):
            details = " ".join(m for messages in failure.field_errors.values() for m in messages)
            text = f"{text} {details}"
        return text

    async def finish(
        self,
        state: ConversationState,
        request: SynthesisRequest,
        caller_identity: str | None = None,
    ) -> StepResult:
        """Run the synthesis the previous step asked for; always ends in Idle."""
        if self._synthesis is None:
            raise RuntimeError("DialogueEngine has no synthesis use case")
        try:
            response = await asyncio.wait_for(
                self._synthesis.execute(request, caller_identity),
                timeout=self._timeout,
            )
        except SynthesisFailure as failure:
            logger.info("Synthesis failed for template=%s: %s", state.template_type, failure.code)
            return self._reset(Message(text=self.failure_text(failure), kind=MessageKind.ERROR), DialoguePhase.FAILED)
        except TimeoutError:
            logger.error("Synthesis for template=%s exceeded %ss", state.template_type, self._timeout)
            failure = GenerationFailedError()
            return self._reset(Message(text=self.failure_text(failure), kind=MessageKind.ERROR), DialoguePhase.FAILED)
        return self._reset(Message(text=response.final_artifact, kind=MessageKind.FINAL), DialoguePhase.IDLE)

    async def respond(
        self,
        state: ConversationState,
        utterance: str,
        selected: SuggestedReply | None = None,
        caller_identity: str | None = None,
    ) -> StepResult:
        """``step``, followed by ``finish`` when the turn triggered synthesis."""
        result = self.step(state, utterance, selected)
        if result.pending is None:
            return result
        return await self.finish(result.state, result.pending, caller_identity)
