"""Config models - typed application configuration."""

from typing import Literal

from pydantic import BaseModel, Field


class LLMConfig(BaseModel):
    """Generation backend selection."""

    provider: str = "ollama"  # "ollama" | "lm_studio" | "gemini"


class OllamaConfig(BaseModel):
    """Ollama connection configuration."""

    host: str = "http://localhost:11434"
    timeout: int = 120
    num_ctx: int | None = None  # Context window. None = model default.
    num_predict: int | None = None  # Max tokens to generate. None = model default.


class OpenAICompatibleConfig(BaseModel):
    """LM Studio, vLLM, LocalAI - OpenAI-compatible API."""

    base_url: str = "http://localhost:1234/v1"
    api_key: str = ""
    timeout: int = 120
    max_tokens: int | None = None


class GeminiConfig(BaseModel):
    """Google Gemini REST API (generativelanguage.googleapis.com)."""

    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    api_key: str = ""
    model: str = "gemini-2.5-flash"
    timeout: int = 60
    max_output_tokens: int | None = None


class SynthesisConfig(BaseModel):
    """Prompt synthesis settings."""

    model: str | None = None  # None = adapter default
    temperature: float = 0.7
    # Upper bound for one generation call, retries included.
    timeout_seconds: float = Field(default=45.0, gt=0)
    retry_attempts: int = Field(default=2, ge=1)
    target_language: str = "한국어"


class AdmissionConfig(BaseModel):
    """Sliding-window admission control for synthesis attempts."""

    limit: int = Field(default=10, ge=1)
    window_seconds: int = Field(default=60, ge=1)
    # limits storage URI: "async+memory://" or "async+redis://host:6379"
    storage_uri: str = "async+memory://"
    fallback_identity: str = "unknown-origin"
    # "shared": all callers without an address share one bucket; "deny": always throttle them
    unknown_origin_policy: Literal["shared", "deny"] = "shared"


class SecurityConfig(BaseModel):
    """Security settings."""

    rate_limit_requests_per_minute: int = 100
    cors_origins: list[str] = ["http://localhost:3000"]


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = "0.0.0.0"
    port: int = 8000


class AppConfig(BaseModel):
    """Full application configuration."""

    server: ServerConfig = ServerConfig()
    llm: LLMConfig = LLMConfig()
    ollama: OllamaConfig = OllamaConfig()
    openai_compatible: OpenAICompatibleConfig = OpenAICompatibleConfig()
    gemini: GeminiConfig = GeminiConfig()
    synthesis: SynthesisConfig = SynthesisConfig()
    admission: AdmissionConfig = AdmissionConfig()
    security: SecurityConfig = SecurityConfig()
    log_level: str = "INFO"
    # Log file: path relative to cwd or absolute. Empty = only stdout.
    log_file: str = ""
    log_rotation_max_mb: int = 5
    log_rotation_backups: int = 3
