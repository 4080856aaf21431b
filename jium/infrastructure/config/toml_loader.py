"""TOML configuration loader with env overrides."""

import logging
import os
import tomllib
from pathlib import Path

from jium.domain.ports.config import (
    AdmissionConfig,
    AppConfig,
    GeminiConfig,
    LLMConfig,
    OllamaConfig,
    OpenAICompatibleConfig,
    SecurityConfig,
    ServerConfig,
    SynthesisConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent.parent.parent / "config"


def _load_toml(path: Path) -> dict:
    """Load TOML file."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def _set_int(config: dict, section: str, key: str, env_name: str) -> None:
    if raw := os.getenv(env_name):
        try:
            config.setdefault(section, {})[key] = int(raw)
        except ValueError:
            logger.warning("Invalid %s env value: %r, ignoring", env_name, raw)


def _apply_env_overrides(config: dict) -> dict:
    """Apply environment variable overrides."""
    if provider := os.getenv("LLM_PROVIDER"):
        config.setdefault("llm", {})["provider"] = provider
    if host := os.getenv("OLLAMA_HOST"):
        config.setdefault("ollama", {})["host"] = host
    if base_url := os.getenv("OPENAI_BASE_URL"):
        config.setdefault("openai_compatible", {})["base_url"] = base_url
    if key := os.getenv("GEMINI_API_KEY"):
        config.setdefault("gemini", {})["api_key"] = key.strip()
    if model := os.getenv("GEMINI_MODEL"):
        config.setdefault("gemini", {})["model"] = model.strip()
    _set_int(config, "server", "port", "PORT")
    if level := os.getenv("LOG_LEVEL"):
        config.setdefault("logging", {})["level"] = level.upper()
    if path := os.getenv("LOG_FILE"):
        config.setdefault("logging", {})["file"] = path.strip()
    if origins := os.getenv("CORS_ORIGINS"):
        config.setdefault("security", {})["cors_origins"] = [o.strip() for o in origins.split(",")]
    _set_int(config, "admission", "limit", "ADMISSION_LIMIT")
    _set_int(config, "admission", "window_seconds", "ADMISSION_WINDOW_SECONDS")
    if uri := os.getenv("ADMISSION_STORAGE_URI"):
        config.setdefault("admission", {})["storage_uri"] = uri.strip()
    if timeout := os.getenv("SYNTHESIS_TIMEOUT"):
        try:
            config.setdefault("synthesis", {})["timeout_seconds"] = float(timeout)
        except ValueError:
            logger.warning("Invalid SYNTHESIS_TIMEOUT env value: %r, ignoring", timeout)
    return config


def load_config(config_dir: Path | None = None) -> AppConfig:
    """Load configuration from TOML files with env overrides.

    Loads default.toml, then development.toml if exists.
    """
    if config_dir is None:
        config_dir = DEFAULT_CONFIG_DIR

    config: dict = {}

    default_path = config_dir / "default.toml"
    if default_path.exists():
        config = _load_toml(default_path)

    dev_path = config_dir / "development.toml"
    if dev_path.exists():
        dev_config = _load_toml(dev_path)
        for key, value in dev_config.items():
            if isinstance(value, dict) and key in config and isinstance(config[key], dict):
                config[key] = {**config[key], **value}
            else:
                config[key] = value

    config = _apply_env_overrides(config)

    logging_raw = config.get("logging") or {}
    return AppConfig(
        server=ServerConfig(**(config.get("server") or {})),
        llm=LLMConfig(**(config.get("llm") or {})),
        ollama=OllamaConfig(**(config.get("ollama") or {})),
        openai_compatible=OpenAICompatibleConfig(**(config.get("openai_compatible") or {})),
        gemini=GeminiConfig(**(config.get("gemini") or {})),
        synthesis=SynthesisConfig(**(config.get("synthesis") or {})),
        admission=AdmissionConfig(**(config.get("admission") or {})),
        security=SecurityConfig(**(config.get("security") or {})),
        log_level=logging_raw.get("level", "INFO"),
        log_file=(logging_raw.get("file") or "").strip(),
        log_rotation_max_mb=int(logging_raw.get("log_rotation_max_mb", 5)),
        log_rotation_backups=int(logging_raw.get("log_rotation_backups", 3)),
    )
