"""Synthesis use case - the synthesis endpoint behind HTTP and the dialogue engine."""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from jium.application.synthesis.dto import SynthesisRequest, SynthesisResponse
from jium.application.synthesis.synthesizer import PromptSynthesizer
from jium.domain.errors import (
    FieldValidationError,
    MalformedRequestError,
    ThrottledError,
    UnknownTemplateError,
)
from jium.domain.ports.admission import AdmissionDecision, AdmissionPort
from jium.domain.services.field_validator import FieldValidator

logger = logging.getLogger(__name__)


class SynthesisUseCase:
    """Admission, then shape check, then schema validation, then synthesis.

    Admission runs first so a throttled caller learns nothing about why its
    input would have been rejected.
    """

    def __init__(
        self,
        admission: AdmissionPort,
        validator: FieldValidator,
        synthesizer: PromptSynthesizer,
    ) -> None:
        self._admission = admission
        self._validator = validator
        self._synthesizer = synthesizer

    @staticmethod
    def _parse(payload: SynthesisRequest | Mapping[str, Any] | Any) -> SynthesisRequest:
        if isinstance(payload, SynthesisRequest):
            return payload
        try:
            return SynthesisRequest.model_validate(payload)
        except ValidationError as e:
            logger.info("Malformed synthesis request: %d shape error(s)", e.error_count())
            raise MalformedRequestError() from None

    async def execute(
        self,
        payload: SynthesisRequest | Mapping[str, Any] | Any,
        caller_identity: str | None,
    ) -> SynthesisResponse:
        """Run one synthesis attempt for *caller_identity*.

        Raises:
            ThrottledError: admission denied; nothing else was evaluated.
            MalformedRequestError: top-level fields missing or mistyped.
            UnknownTemplateError: no schema for the template tag.
            FieldValidationError: every failing field, with messages.
            GenerationFailedError: the backend did not produce an artifact.

        """
        if await self._admission.admit(caller_identity) is AdmissionDecision.THROTTLED:
            raise ThrottledError()

        request = self._parse(payload)

        result = self._validator.validate(request.template_type, request.inputs)
        if result.unsupported_template:
            logger.info("Unsupported template type %r", request.template_type)
            raise UnknownTemplateError()
        if not result.ok:
            logger.info(
                "Validation failed for template=%s fields=%s",
                request.template_type,
                sorted(result.field_errors),
            )
            raise FieldValidationError(result.field_errors)

        artifact = await self._synthesizer.synthesize(request.template_type, result.inputs)
        logger.info("Synthesized artifact for template=%s (%d chars)", request.template_type, len(artifact))
        return SynthesisResponse(final_artifact=artifact)
