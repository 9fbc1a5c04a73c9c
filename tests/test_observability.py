"""
Tests for logging setup.
"""

import logging

import pytest

from toolprep.core.observability.logging_config import _parse_level, resolve_level, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger(monkeypatch):
    monkeypatch.delenv("TOOLPREP_LOG_LEVEL", raising=False)
    monkeypatch.delenv("TOOLPREP_LOG_FILE", raising=False)
    monkeypatch.delenv("TOOLPREP_LOG_FILE_LEVEL", raising=False)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestParseLevel:
    def test_names(self):
        assert _parse_level("debug") == logging.DEBUG
        assert _parse_level("ERROR") == logging.ERROR

    def test_fallback(self):
        assert _parse_level(None) == logging.WARNING
        assert _parse_level("chatty") == logging.WARNING


class TestResolveLevel:
    def test_flag_precedence(self):
        assert resolve_level(debug=True, verbose=True, quiet=True) == "DEBUG"
        assert resolve_level(verbose=True, quiet=True) == "INFO"
        assert resolve_level(quiet=True) == "ERROR"

    def test_env_fallback(self, monkeypatch):
        assert resolve_level() == "WARNING"
        monkeypatch.setenv("TOOLPREP_LOG_LEVEL", "INFO")
        assert resolve_level() == "INFO"
        assert resolve_level(quiet=True) == "ERROR"


class TestSetupLogging:
    def test_console_level(self):
        setup_logging(level="INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "toolprep.log"
        setup_logging(level="WARNING", log_file=str(log_file), log_file_level="DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2

        logging.getLogger("toolprep.test").debug("to file only")
        for handler in root.handlers:
            handler.flush()
        assert "to file only" in log_file.read_text()

    def test_file_from_environment(self, tmp_path, monkeypatch):
        log_file = tmp_path / "env.log"
        monkeypatch.setenv("TOOLPREP_LOG_FILE", str(log_file))
        setup_logging(level="ERROR")
        logging.getLogger("toolprep.test").error("from env")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "from env" in log_file.read_text()

    def test_repeat_setup_replaces_handlers(self):
        setup_logging(level="INFO")
        setup_logging(level="ERROR")
        assert len(logging.getLogger().handlers) == 1
