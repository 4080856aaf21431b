"""Dialogue API - stateless turns; the client carries the conversation state."""

from fastapi import APIRouter, Depends, Request

from jium.api.dependencies import caller_identity, get_dialogue_engine, limiter, route_limit
from jium.application.dialogue.dto import StepRequest, TurnResponse
from jium.application.dialogue.engine import DialogueEngine


router = APIRouter(prefix="/dialogue", tags=["dialogue"])


@router.post("/start", response_model=TurnResponse, response_model_by_alias=True)
@limiter.limit(route_limit)
async def start(
    request: Request,
    engine: DialogueEngine = Depends(get_dialogue_engine),
) -> TurnResponse:
    """Greeting, empty state and the template menu."""
    return TurnResponse.from_result(engine.restart())


@router.post("/step", response_model=TurnResponse, response_model_by_alias=True)
@limiter.limit(route_limit)
async def step(
    request: Request,
    body: StepRequest,
    engine: DialogueEngine = Depends(get_dialogue_engine),
) -> TurnResponse:
    """Apply one user turn; runs the synthesis when the turn asks for it."""
    result = await engine.respond(
        body.state,
        body.utterance,
        body.suggestion,
        caller_identity(request),
    )
    return TurnResponse.from_result(result)
