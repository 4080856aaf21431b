"""Template registry - read-only catalog of dialogue flows."""

from collections.abc import Iterable

from jium.domain.entities.conversation import SuggestedReply, TemplateDefinition


class TemplateRegistry:
    """Looks up dialogue flows by tag or by what the user typed."""

    def __init__(self, templates: Iterable[TemplateDefinition]) -> None:
        """Index templates by tag; flows must end with exactly one terminal step."""
        self._templates: dict[str, TemplateDefinition] = {}
        for t in templates:
            if t.template_type in self._templates:
                raise ValueError(f"Duplicate template {t.template_type!r}")
            if not t.steps or not t.steps[-1].terminal:
                raise ValueError(f"Template {t.template_type!r} must end with a terminal step")
            if sum(1 for s in t.steps if s.terminal) != 1:
                raise ValueError(f"Template {t.template_type!r} must have exactly one terminal step")
            self._templates[t.template_type] = t

    def lookup(self, template_type: str | None) -> TemplateDefinition | None:
        """Definition for *template_type*, or None."""
        if template_type is None:
            return None
        return self._templates.get(template_type)

    def match(self, utterance: str) -> TemplateDefinition | None:
        """Resolve a template-selection attempt.

        Exact tag or menu label wins; otherwise the first template whose
        keyword occurs in the utterance (case-sensitive).
        """
        text = utterance.strip()
        if not text:
            return None
        for t in self._templates.values():
            if text == t.template_type or text == t.label:
                return t
        for t in self._templates.values():
            if any(k in text for k in t.keywords):
                return t
        return None

    def menu(self) -> list[SuggestedReply]:
        """Top-level template menu."""
        return [SuggestedReply(label=t.label) for t in self._templates.values()]

    def templates(self) -> list[TemplateDefinition]:
        """All registered templates in registration order."""
        return list(self._templates.values())

    def __contains__(self, template_type: object) -> bool:
        return template_type in self._templates
