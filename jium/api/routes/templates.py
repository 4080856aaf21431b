"""Templates API - catalog of dialogue flows."""

from fastapi import APIRouter, Depends, Request

from jium.api.dependencies import get_registry, limiter, route_limit
from jium.application.dialogue.dto import TemplateSummary
from jium.domain.services.template_registry import TemplateRegistry

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("", response_model=list[TemplateSummary], response_model_by_alias=True)
@limiter.limit(route_limit)
async def list_templates(
    request: Request,
    registry: TemplateRegistry = Depends(get_registry),
) -> list[TemplateSummary]:
    """Available templates in menu order."""
    return [
        TemplateSummary(
            template_type=t.template_type,
            label=t.label,
            description=t.description,
            fields=list(t.field_keys),
        )
        for t in registry.templates()
    ]
