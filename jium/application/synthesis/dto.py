"""Synthesis DTOs."""

from pydantic import ConfigDict, Field

from jium.domain.entities.conversation import WireModel


class SynthesisRequest(WireModel):
    """Body of the synthesis endpoint: ``{templateType, inputs}``."""

    model_config = ConfigDict(extra="ignore")

    template_type: str = Field(..., min_length=1, max_length=50)
    inputs: dict[str, str] = Field(..., max_length=50)


class SynthesisResponse(WireModel):
    """Successful synthesis: ``{finalArtifact}``."""

    final_artifact: str


class ErrorResponse(WireModel):
    """Failure body: ``{error, message, fieldErrors?}``."""

    error: str
    message: str
    field_errors: dict[str, list[str]] | None = None
