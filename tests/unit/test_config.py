"""
Unit tests -- settings defaults and logger setup.
"""
import logging
import sys

from reportes.core.config import Settings, get_settings
from reportes.core.logging import get_logger, resolve_stream


def test_defaults():
    s = Settings()
    assert s.history_limit == 100
    assert s.history_url.endswith("/api/registros")
    assert s.token_key == "token"
    assert s.landmark_tag == "unesco"


def test_history_url_strips_trailing_slash():
    s = Settings(api_base_url="http://api.example:5001/")
    assert s.history_url == "http://api.example:5001/api/registros"


def test_env_override(monkeypatch):
    monkeypatch.setenv("REPORTES_HISTORY_LIMIT", "25")
    assert Settings().history_limit == 25


def test_get_settings_cached():
    assert get_settings() is get_settings()


def test_logger_single_handler():
    a = get_logger("reportes.test")
    b = get_logger("reportes.test")
    assert a is b
    assert len(a.handlers) == 1
    assert a.level in (logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR)


def test_log_stream_defaults_to_stderr():
    assert Settings().log_stream == "stderr"


def test_resolve_stream():
    assert resolve_stream("stdout") is sys.stdout
    assert resolve_stream("STDOUT ") is sys.stdout
    assert resolve_stream("stderr") is sys.stderr
    assert resolve_stream("bogus") is sys.stderr


def test_logger_does_not_propagate():
    assert get_logger("reportes.test.propagate").propagate is False


def test_cli_stdout_free_of_log_lines(capsys):
    from reportes.cli import main
    from reportes.history.loader import HistoryLoader

    assert main(["list"], loader=HistoryLoader(fetch=lambda: [])) == 0
    out = capsys.readouterr().out
    assert "| INFO" not in out
