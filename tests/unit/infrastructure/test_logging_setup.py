"""Tests for logging setup."""

import logging

from jium.shared.logging import _redact_secrets, setup_logging


class TestLogging:
    def test_redacts_secret_keys(self):
        event = _redact_secrets(None, "info", {"event": "call", "api_key": "g-key", "model": "m"})
        assert event == {"event": "call", "api_key": "***", "model": "m"}

    def test_file_handler_added(self, tmp_path):
        path = tmp_path / "logs" / "jium.log"
        root = logging.getLogger()
        saved = list(root.handlers), root.level
        try:
            setup_logging(level="WARNING", file_path=str(path))
            assert root.level == logging.WARNING
            assert any(getattr(h, "baseFilename", None) == str(path.resolve()) for h in root.handlers)
            assert path.parent.is_dir()
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved[0]
            root.setLevel(saved[1])
