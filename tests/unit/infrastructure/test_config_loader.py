"""Tests for TOML config loader."""

from pathlib import Path

import pytest

from jium.infrastructure.config.toml_loader import _apply_env_overrides, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "LLM_PROVIDER",
        "OLLAMA_HOST",
        "GEMINI_API_KEY",
        "GEMINI_MODEL",
        "PORT",
        "LOG_LEVEL",
        "LOG_FILE",
        "CORS_ORIGINS",
        "ADMISSION_LIMIT",
        "ADMISSION_WINDOW_SECONDS",
        "ADMISSION_STORAGE_URI",
        "SYNTHESIS_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    """Tests for load_config function."""

    def test_loads_default_config(self):
        config = load_config()
        assert config.admission.limit == 10
        assert config.admission.window_seconds == 60
        assert config.admission.unknown_origin_policy == "shared"
        assert config.synthesis.target_language == "한국어"

    def test_missing_dir_gives_defaults(self, tmp_path: Path):
        config = load_config(tmp_path)
        assert config.llm.provider == "ollama"
        assert config.admission.storage_uri == "async+memory://"

    def test_merges_development_config(self, tmp_path: Path):
        (tmp_path / "default.toml").write_text('[admission]\nlimit = 10\nwindow_seconds = 60\n', encoding="utf-8")
        (tmp_path / "development.toml").write_text("[admission]\nlimit = 3\n", encoding="utf-8")
        config = load_config(tmp_path)
        assert config.admission.limit == 3
        assert config.admission.window_seconds == 60

    def test_logging_section(self, tmp_path: Path):
        (tmp_path / "default.toml").write_text('[logging]\nlevel = "DEBUG"\nfile = " logs/jium.log "\n', encoding="utf-8")
        config = load_config(tmp_path)
        assert config.log_level == "DEBUG"
        assert config.log_file == "logs/jium.log"


class TestEnvOverrides:
    def test_env_overrides(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("LLM_PROVIDER", "gemini")
        monkeypatch.setenv("GEMINI_API_KEY", " key ")
        monkeypatch.setenv("ADMISSION_LIMIT", "20")
        monkeypatch.setenv("SYNTHESIS_TIMEOUT", "12.5")
        monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
        config = load_config(tmp_path)
        assert config.llm.provider == "gemini"
        assert config.gemini.api_key == "key"
        assert config.admission.limit == 20
        assert config.synthesis.timeout_seconds == 12.5
        assert config.security.cors_origins == ["http://a.test", "http://b.test"]

    def test_invalid_numbers_are_ignored(self, monkeypatch):
        monkeypatch.setenv("ADMISSION_LIMIT", "many")
        monkeypatch.setenv("SYNTHESIS_TIMEOUT", "soon")
        config = _apply_env_overrides({"admission": {"limit": 10}})
        assert config["admission"]["limit"] == 10
        assert "synthesis" not in config
