"""In-process conversation holder.

DialogueSession is the entry point for embedding the dialogue in a Python
process without the HTTP layer: it keeps the ConversationState between
turns and runs synthesis itself. ``Container.session`` builds one on the
shared engine. The HTTP dialogue routes are stateless and use
DialogueEngine directly, with the client carrying the state.
"""

import asyncio
import logging

from jium.application.dialogue.engine import DialogueEngine, StepResult
from jium.domain.entities.conversation import ConversationState, SuggestedReply
from jium.domain.errors import ConversationBusyError

logger = logging.getLogger(__name__)


class DialogueSession:
    """One conversation with at most one outstanding synthesis.

    While a synthesis is in flight further input is refused with
    ConversationBusyError. Cancelling an in-flight ``send`` discards its
    result and puts the conversation back in Idle.
    """

    def __init__(self, engine: DialogueEngine, caller_identity: str | None = None) -> None:
        self._engine = engine
        self._caller_identity = caller_identity
        self._state = ConversationState()
        self._busy = False

    @property
    def state(self) -> ConversationState:
        return self._state

    @property
    def busy(self) -> bool:
        """True while a synthesis is in flight."""
        return self._busy

    def start(self) -> StepResult:
        """Greeting and menu; resets the conversation."""
        if self._busy:
            raise ConversationBusyError("synthesis in progress")
        result = self._engine.restart()
        self._state = result.state
        return result

    async def send(self, utterance: str, selected: SuggestedReply | None = None) -> StepResult:
        """Submit one user turn."""
        if self._busy:
            raise ConversationBusyError("synthesis in progress")

        result = self._engine.step(self._state, utterance, selected)
        if result.pending is None:
            self._state = result.state
            return result

        self._busy = True
        try:
            result = await self._engine.finish(result.state, result.pending, self._caller_identity)
        except asyncio.CancelledError:
            logger.info("Synthesis cancelled; conversation reset")
            self._state = ConversationState()
            raise
        finally:
            self._busy = False
        self._state = result.state
        return result
