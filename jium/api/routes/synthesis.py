"""Synthesis API - one-shot artifact generation from template inputs."""

import json

from fastapi import APIRouter, Depends, Request

from jium.api.dependencies import caller_identity, get_synthesis_use_case
from jium.application.synthesis.dto import ErrorResponse, SynthesisResponse
from jium.application.synthesis.use_case import SynthesisUseCase


router = APIRouter(prefix="/api", tags=["synthesis"])


@router.post(
    "/generate-prompt",
    response_model=SynthesisResponse,
    response_model_by_alias=True,
    responses={
        400: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def generate_prompt(
    request: Request,
    use_case: SynthesisUseCase = Depends(get_synthesis_use_case),
) -> SynthesisResponse:
    """Generate the final artifact for ``{templateType, inputs}``.

    The body is read raw so admission is decided before its shape is checked.
    Failures are rendered by the SynthesisFailure handler in main.
    """
    try:
        payload = json.loads(await request.body() or b"null")
    except (ValueError, RecursionError):
        payload = None
    return await use_case.execute(payload, caller_identity(request))
