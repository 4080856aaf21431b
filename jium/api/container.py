"""Dependency Injection Container - centralized service management."""

from functools import cached_property

from jium.application.dialogue.engine import DialogueEngine
from jium.application.dialogue.session import DialogueSession
from jium.application.synthesis.synthesizer import PromptSynthesizer
from jium.application.synthesis.use_case import SynthesisUseCase
from jium.domain.ports.admission import AdmissionPort
from jium.domain.ports.config import AppConfig
from jium.domain.ports.llm import LLMPort
from jium.domain.services.field_validator import FieldValidator
from jium.domain.services.template_registry import TemplateRegistry
from jium.domain.templates import BUILTIN_SCHEMAS, BUILTIN_TEMPLATES
from jium.infrastructure.config import load_config

# Slack on top of the generation timeout for admission and validation.
FINISH_GRACE_SECONDS = 5.0


class Container:
    """Dependency Injection Container with lazy initialization.

    All dependencies are created on first access and cached.
    Tests pass a config, or assign fakes before first access:

        container = Container(AppConfig())
        container.__dict__["llm"] = FakeLLM()
        engine = container.dialogue_engine
    """

    def __init__(self, config: AppConfig | None = None):
        """Initialize container with optional config override."""
        self._config_override = config

    @cached_property
    def config(self) -> AppConfig:
        """Application configuration."""
        if self._config_override:
            return self._config_override
        return load_config()

    @cached_property
    def llm(self) -> LLMPort:
        """LLM adapter based on config provider."""
        provider = self.config.llm.provider
        if provider == "lm_studio":
            from jium.infrastructure.llm.openai_compatible import OpenAICompatibleAdapter
            return OpenAICompatibleAdapter(self.config.openai_compatible)
        if provider == "gemini":
            from jium.infrastructure.llm.gemini import GeminiAdapter
            return GeminiAdapter(self.config.gemini)

        from jium.infrastructure.llm.ollama import OllamaAdapter
        return OllamaAdapter(self.config.ollama)

    @cached_property
    def registry(self) -> TemplateRegistry:
        """Built-in dialogue flows."""
        return TemplateRegistry(BUILTIN_TEMPLATES)

    @cached_property
    def validator(self) -> FieldValidator:
        """Validation schemas for the built-in templates."""
        return FieldValidator(BUILTIN_SCHEMAS)

    @cached_property
    def admission(self) -> AdmissionPort:
        """Moving-window admission controller."""
        from jium.infrastructure.admission.controller import AdmissionController
        return AdmissionController(self.config.admission)

    @cached_property
    def synthesizer(self) -> PromptSynthesizer:
        """Meta-instruction builder plus generation call."""
        return PromptSynthesizer(self.llm, self.registry, self.config.synthesis)

    @cached_property
    def synthesis_use_case(self) -> SynthesisUseCase:
        """Synthesis endpoint: admission, validation, synthesis."""
        return SynthesisUseCase(
            admission=self.admission,
            validator=self.validator,
            synthesizer=self.synthesizer,
        )

    @cached_property
    def dialogue_engine(self) -> DialogueEngine:
        """Slot-filling dialogue engine."""
        return DialogueEngine(
            registry=self.registry,
            validator=self.validator,
            synthesis=self.synthesis_use_case,
            timeout=self.config.synthesis.timeout_seconds + FINISH_GRACE_SECONDS,
        )

    def session(self, caller_identity: str | None = None) -> DialogueSession:
        """New in-process conversation on the shared dialogue engine."""
        return DialogueSession(self.dialogue_engine, caller_identity)

    def reset(self) -> None:
        """Reset all cached instances (useful for testing)."""
        for attr in list(self.__dict__.keys()):
            if not attr.startswith("_"):
                delattr(self, attr)


# Global container instance
_container: Container | None = None


def get_container() -> Container:
    """Get or create global container instance."""
    global _container
    if _container is None:
        _container = Container()
    return _container


def set_container(container: Container) -> None:
    """Install *container* as the global instance (tests, embedding)."""
    global _container
    _container = container


def reset_container() -> None:
    """Reset global container (for testing)."""
    global _container
    if _container:
        _container.reset()
    _container = None
