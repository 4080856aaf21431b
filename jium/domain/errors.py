"""Synthesis failures - one exception per externally visible outcome.

Every failure carries a stable ``code`` (the wire error tag), an HTTP
``status_code`` and a ``message`` that is safe to show to the end user.
Internal causes are logged where they happen and never stored here.
"""


class SynthesisFailure(Exception):
    """Base class for failures of a synthesis attempt."""

    code: str = "GENERATION_FAILED"
    status_code: int = 500
    default_message: str = "프롬프트 생성에 실패했습니다."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> dict:
        """Serialize to the wire error shape."""
        return {"error": self.code, "message": self.message}


class MalformedRequestError(SynthesisFailure):
    """Top-level fields missing or of the wrong shape."""

    code = "INVALID_INPUT"
    status_code = 400
    default_message = "필수 입력값이 누락되었습니다."


class FieldValidationError(SynthesisFailure):
    """One or more fields failed their schema rule."""

    code = "INVALID_INPUT"
    status_code = 400
    default_message = "입력값을 다시 확인해 주세요."

    def __init__(self, field_errors: dict[str, list[str]], message: str | None = None) -> None:
        super().__init__(message)
        self.field_errors = field_errors

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["fieldErrors"] = self.field_errors
        return payload


class UnknownTemplateError(SynthesisFailure):
    """Template tag has no registered schema."""

    code = "INVALID_TEMPLATE_TYPE"
    status_code = 400
    default_message = "지원하지 않는 템플릿 종류입니다."


class ThrottledError(SynthesisFailure):
    """Admission controller denied the attempt."""

    code = "TOO_MANY_REQUESTS"
    status_code = 429
    default_message = "요청이 너무 많습니다. 잠시 후 다시 시도해 주세요."


class GenerationFailedError(SynthesisFailure):
    """Backend unreachable, failed, timed out or returned nothing."""


class ConversationBusyError(Exception):
    """A conversation already has a synthesis call in flight."""
