"""
Tests for logging setup module.
"""
from __future__ import annotations

import logging
import pytest
from logging.handlers import RotatingFileHandler
from unittest.mock import patch

from core.logging_setup import setup_logging

pytestmark = [pytest.mark.unit, pytest.mark.usefixtures("restore_root_logger")]


def test_setup_logging_creates_log_directory(tmp_path):
    """setup_logging should create log directory if it doesn't exist"""
    with patch('core.logging_setup.Path.home', return_value=tmp_path):
        log_file = setup_logging()

    log_dir = tmp_path / ".gotchi_closet"

    assert log_dir.exists()
    assert log_file == log_dir / "app.log"
    assert log_file.exists()


def test_setup_logging_sets_root_logger_level(tmp_path):
    """setup_logging should configure root logger with appropriate level"""
    with patch('core.logging_setup.Path.home', return_value=tmp_path):
        setup_logging(debug=True)
        assert logging.getLogger().level == logging.DEBUG

        setup_logging(debug=False)
        assert logging.getLogger().level == logging.INFO


def test_setup_logging_adds_file_and_console_handlers(tmp_path):
    """setup_logging should replace existing handlers with file + console"""
    root_logger = logging.getLogger()
    root_logger.addHandler(logging.NullHandler())

    with patch('core.logging_setup.Path.home', return_value=tmp_path):
        setup_logging()

    assert len(root_logger.handlers) == 2
    assert any(isinstance(h, RotatingFileHandler) for h in root_logger.handlers)


def test_setup_logging_is_idempotent(tmp_path):
    """Calling setup_logging twice should not stack handlers"""
    with patch('core.logging_setup.Path.home', return_value=tmp_path):
        setup_logging()
        setup_logging()

    assert len(logging.getLogger().handlers) == 2


def test_quiet_mode_raises_console_level(tmp_path):
    """quiet=True should only show warnings on the console"""
    with patch('core.logging_setup.Path.home', return_value=tmp_path):
        setup_logging(quiet=True)

    handlers = logging.getLogger().handlers
    console = [h for h in handlers if not isinstance(h, RotatingFileHandler)]
    file_handlers = [h for h in handlers if isinstance(h, RotatingFileHandler)]

    assert console[0].level == logging.WARNING
    assert file_handlers[0].level == logging.INFO


def test_messages_reach_log_file(tmp_path):
    """Module loggers should write into the rotating log file"""
    with patch('core.logging_setup.Path.home', return_value=tmp_path):
        log_file = setup_logging()

    logging.getLogger("core.rarity").info("breakdown computed")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "breakdown computed" in log_file.read_text(encoding="utf-8")


@pytest.fixture
def restore_noisy_loggers():
    saved = {name: logging.getLogger(name).level for name in ("urllib3", "requests")}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_log_dir_override(tmp_path):
    """An explicit log_dir should be used instead of the config directory"""
    with patch('core.logging_setup.Path.home', return_value=tmp_path / "home"):
        log_file = setup_logging(log_dir=tmp_path / "logs")

    assert log_file == tmp_path / "logs" / "app.log"
    assert not (tmp_path / "home").exists()


@pytest.mark.usefixtures("restore_noisy_loggers")
def test_http_client_loggers_quiet_unless_debug(tmp_path):
    """urllib3/requests chatter should only show up in debug mode"""
    setup_logging(log_dir=tmp_path)
    assert logging.getLogger("urllib3").level == logging.WARNING
    assert logging.getLogger("requests").level == logging.WARNING

    setup_logging(debug=True, log_dir=tmp_path)
    assert logging.getLogger("urllib3").getEffectiveLevel() == logging.DEBUG
