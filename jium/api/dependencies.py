"""FastAPI dependencies - DI container."""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from jium.api.container import get_container
from jium.application.dialogue.engine import DialogueEngine
from jium.application.synthesis.use_case import SynthesisUseCase
from jium.domain.ports.config import AppConfig
from jium.domain.services.template_registry import TemplateRegistry

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)


def get_config() -> AppConfig:
    """Config of the active container."""
    return get_container().config


def caller_identity(request: Request) -> str | None:
    """Client address the admission controller counts against, if known."""
    if request.client and request.client.host:
        return request.client.host
    logger.debug("Request without client address on %s", request.url.path)
    return None


def get_synthesis_use_case() -> SynthesisUseCase:
    return get_container().synthesis_use_case


def get_dialogue_engine() -> DialogueEngine:
    return get_container().dialogue_engine


def get_registry() -> TemplateRegistry:
    return get_container().registry


def route_limit() -> str:
    """Per-client limit for the cheap routes, from ``security``."""
    return f"{get_config().security.rate_limit_requests_per_minute}/minute"
