"""Dialogue DTOs."""

from pydantic import Field

from jium.application.dialogue.engine import StepResult
from jium.domain.entities.conversation import (
    ConversationState,
    DialoguePhase,
    Message,
    SuggestedReply,
    WireModel,
)


class StepRequest(WireModel):
    """One user turn. The client sends back the state it last received."""

    state: ConversationState = Field(default_factory=ConversationState)
    utterance: str = Field(default="", max_length=2000)
    suggestion: SuggestedReply | None = None


class TurnResponse(WireModel):
    """What the client renders after a turn: ``{state, messages, suggestions, phase}``."""

    state: ConversationState
    messages: list[Message]
    suggestions: list[SuggestedReply]
    phase: DialoguePhase

    @classmethod
    def from_result(cls, result: StepResult) -> "TurnResponse":
        return cls(
            state=result.state,
            messages=result.messages,
            suggestions=result.suggestions,
            phase=result.phase,
        )


class TemplateSummary(WireModel):
    """Catalog entry for ``GET /templates``."""

    template_type: str
    label: str
    description: str
    fields: list[str]
