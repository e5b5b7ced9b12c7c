"""Tests for botrecap.logging_config."""

import logging
import sys
import threading

import pytest

from botrecap.logging_config import (
    LOGGER_NAME,
    NOISY_LOGGERS,
    reset_logging,
    resolve_level,
    setup_file_logging,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _reset():
    reset_logging()
    yield
    reset_logging()


class TestResolveLevel:
    def test_int_passthrough(self):
        assert resolve_level(logging.WARNING) == logging.WARNING

    @pytest.mark.parametrize("name", ["debug", "DEBUG", " Debug "])
    def test_name(self, name):
        assert resolve_level(name) == logging.DEBUG

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            resolve_level("chatty")


class TestSetupLogging:
    def test_default_level_is_info(self):
        setup_logging()
        assert logging.getLogger(LOGGER_NAME).level == logging.INFO

    def test_level_by_name(self):
        """LOG_LEVEL 설정값을 그대로 넘길 수 있다."""
        setup_logging("warning")
        assert logging.getLogger(LOGGER_NAME).level == logging.WARNING

    def test_outputs_to_stderr(self):
        setup_logging()
        root = logging.getLogger(LOGGER_NAME)
        assert len(root.handlers) == 1
        handler = root.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stderr

    def test_idempotent(self):
        setup_logging()
        setup_logging(logging.DEBUG)
        root = logging.getLogger(LOGGER_NAME)
        assert len(root.handlers) == 1
        assert root.level == logging.INFO

    def test_silences_noisy_loggers(self):
        setup_logging()
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING


class TestFileLogging:
    def test_captures_debug_with_thread_name(self, tmp_path):
        setup_logging()
        handler = setup_file_logging(tmp_path / ".log", prefix="cli")

        def work():
            logging.getLogger("botrecap.services.orchestrator").debug("processing item 7")

        worker = threading.Thread(target=work, name="worker-1")
        worker.start()
        worker.join()
        handler.flush()

        (log_file,) = (tmp_path / ".log").glob("cli_*.log")
        text = log_file.read_text(encoding="utf-8")
        assert "processing item 7" in text
        assert "[worker-1]" in text

    def test_stderr_handler_keeps_its_level(self, tmp_path):
        """파일 핸들러를 붙여도 stderr는 DEBUG로 시끄러워지지 않는다."""
        setup_logging()
        setup_file_logging(tmp_path / ".log")
        root = logging.getLogger(LOGGER_NAME)
        stderr_handler = root.handlers[0]
        assert root.level == logging.DEBUG
        assert stderr_handler.level == logging.INFO


class TestResetLogging:
    def test_reset_clears_handlers(self, tmp_path):
        setup_logging()
        setup_file_logging(tmp_path / ".log")
        root = logging.getLogger(LOGGER_NAME)
        assert len(root.handlers) == 2
        reset_logging()
        assert root.handlers == []
        assert root.level == logging.WARNING
