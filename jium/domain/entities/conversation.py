"""Conversation entities: templates, steps, suggestions and dialogue state."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for models exchanged with the browser (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class SuggestedReply(WireModel):
    """Pre-canned answer the user can pick instead of typing."""

    label: str
    triggers_final: bool = False


@dataclass(frozen=True)
class ConversationStep:
    """One question of a dialogue flow."""

    question: str
    field_key: str | None = None  # None only for the terminal step
    suggestions: tuple[SuggestedReply, ...] = ()
    min_length: int | None = None
    reprompt: str | None = None  # First rejection of a too-short answer
    elaboration: str | None = None  # Second consecutive rejection of the same field
    terminal: bool = False


@dataclass(frozen=True)
class TemplateDefinition:
    """A named dialogue flow producing one kind of artifact."""

    template_type: str
    label: str
    steps: tuple[ConversationStep, ...]
    # Brief rendered from validated inputs and embedded in the meta-instruction.
    render: Callable[[Mapping[str, str]], str]
    keywords: tuple[str, ...] = ()
    shape: str = "하나의 자연스러운 문단"
    description: str = ""

    @property
    def field_keys(self) -> tuple[str, ...]:
        """Field keys in the order they are asked."""
        return tuple(s.field_key for s in self.steps if s.field_key)


class DialoguePhase(Enum):
    """Coarse dialogue phase derived from a state."""

    IDLE = "idle"
    COLLECTING = "collecting"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    SYNTHESIZING = "synthesizing"
    FAILED = "failed"


class ConversationState(WireModel):
    """Immutable dialogue state; the engine returns a new one per turn."""

    template_type: str | None = None
    step_index: int = Field(default=0, ge=0)
    collected_inputs: dict[str, str] = Field(default_factory=dict)
    rejected_field: str | None = None  # Field whose last answer was rejected

    @property
    def is_idle(self) -> bool:
        """True while no template has been chosen."""
        return self.template_type is None


class MessageKind(Enum):
    """What an emitted assistant message represents."""

    GREETING = "greeting"
    QUESTION = "question"
    CLARIFICATION = "clarification"
    REJECTION = "rejection"
    FINAL = "final"
    ERROR = "error"


class Message(WireModel):
    """Assistant message to show in the conversation."""

    text: str
    kind: MessageKind = MessageKind.QUESTION
