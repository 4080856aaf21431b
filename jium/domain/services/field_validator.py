"""Field validator - per-template schemas dispatched by template tag.

Each template owns exactly one ValidationSchema. There is no shared
"everything optional" schema: a field name is only meaningful inside the
schema selected by the tag, so inputs for one template can never satisfy
another template's rules by accident.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

DEFAULT_SKIP_VALUES: tuple[str, ...] = ("없음",)
DEFAULT_MISSING_MESSAGE = "필수 항목입니다."
EXTRA_FIELD_MESSAGE = "허용되지 않는 항목입니다."


@dataclass(frozen=True)
class FieldRule:
    """Constraint on a single field."""

    key: str
    required: bool = True
    min_length: int = 0
    message: str = "내용이 너무 짧습니다."  # Present but shorter than min_length
    missing_message: str = DEFAULT_MISSING_MESSAGE


@dataclass(frozen=True)
class ValidationSchema:
    """Validation rules for one template tag."""

    template_type: str
    rules: tuple[FieldRule, ...]
    # Answers meaning "nothing to add"; accepted for optional fields regardless of length.
    skip_values: tuple[str, ...] = DEFAULT_SKIP_VALUES
    allow_extra: bool = True

    def rule(self, key: str) -> FieldRule | None:
        """Rule for *key*, if declared."""
        for r in self.rules:
            if r.key == key:
                return r
        return None

    def is_skip(self, value: str) -> bool:
        """Check whether *value* is a skip sentinel."""
        return value.strip() in self.skip_values

    def accepts_as_skip(self, key: str, value: str) -> bool:
        """Skip sentinel answered for an optional (or undeclared) field."""
        r = self.rule(key)
        return self.is_skip(value) and (r is None or not r.required)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validate(): accepted inputs or every problem found."""

    template_type: str
    inputs: dict[str, str] = field(default_factory=dict)
    field_errors: dict[str, list[str]] = field(default_factory=dict)
    unsupported_template: bool = False

    @property
    def ok(self) -> bool:
        return not self.unsupported_template and not self.field_errors


class FieldValidator:
    """Validates completed input sets against the schema picked by tag."""

    def __init__(self, schemas: Iterable[ValidationSchema]) -> None:
        self._schemas: dict[str, ValidationSchema] = {}
        for schema in schemas:
            if schema.template_type in self._schemas:
                raise ValueError(f"Duplicate schema for template {schema.template_type!r}")
            self._schemas[schema.template_type] = schema

    def schema_for(self, template_type: str) -> ValidationSchema | None:
        """Schema registered for *template_type*."""
        return self._schemas.get(template_type)

    def supports(self, template_type: str) -> bool:
        return template_type in self._schemas

    def validate(self, template_type: str, inputs: Mapping[str, str]) -> ValidationResult:
        """Check *inputs* against the schema for *template_type*.

        All field errors are collected before returning. Accepted inputs are
        ordered by schema declaration, so key order of *inputs* never matters.
        """
        schema = self._schemas.get(template_type)
        if schema is None:
            return ValidationResult(template_type=template_type, unsupported_template=True)

        errors: dict[str, list[str]] = {}
        accepted: dict[str, str] = {}
        for rule in schema.rules:
            raw = inputs.get(rule.key)
            value = raw.strip() if isinstance(raw, str) else ""
            if not value:
                if rule.required:
                    errors.setdefault(rule.key, []).append(rule.missing_message)
                continue
            skipped = not rule.required and schema.is_skip(value)
            if not skipped and len(value) < rule.min_length:
                errors.setdefault(rule.key, []).append(rule.message)
                continue
            accepted[rule.key] = value

        if not schema.allow_extra:
            declared = {r.key for r in schema.rules}
            for key in sorted(k for k in inputs if k not in declared):
                errors.setdefault(key, []).append(EXTRA_FIELD_MESSAGE)

        if errors:
            return ValidationResult(template_type=template_type, field_errors=errors)
        return ValidationResult(template_type=template_type, inputs=accepted)
