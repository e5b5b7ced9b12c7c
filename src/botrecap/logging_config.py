"""Logging setup for botrecap.

All package loggers hang off the ``botrecap`` logger:
- stderr handler for humans (stdout stays clean for CLI output / JSON)
- optional per-run file handler at DEBUG, tagged with the thread name because
  item processing runs in a worker pool
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

LOGGER_NAME = "botrecap"

NOISY_LOGGERS = ("httpx", "httpcore", "apscheduler", "urllib3")

_CONSOLE_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)-5s [%(threadName)s] [%(name)s] %(message)s"

_configured = False


def resolve_level(level: int | str) -> int:
    """logging.DEBUG 또는 "debug" 같은 이름 → 숫자 레벨."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(level: int | str = logging.INFO) -> None:
    """Attach the stderr handler to the botrecap logger.

    Idempotent. ``level`` may be a name so LOG_LEVEL can be passed through as-is.
    Third-party HTTP/scheduler loggers are capped at WARNING.
    """
    global _configured
    if _configured:
        return
    _configured = True

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(resolve_level(level))
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_file_logging(log_dir: Path, prefix: str = "botrecap") -> logging.FileHandler:
    """Capture DEBUG logs of one run in ``log_dir/<prefix>_YYYYMMDD_HHMMSS.log``.

    Returns the handler so the caller (or a test) can close it.
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    handler = logging.FileHandler(log_dir / f"{prefix}_{timestamp}.log", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger(LOGGER_NAME)
    # 기존 핸들러는 현재 레벨에 고정하고 logger는 DEBUG로 내려 파일에 전부 남긴다
    for existing in root.handlers:
        if existing.level == logging.NOTSET:
            existing.setLevel(root.getEffectiveLevel())
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)
    return handler


def reset_logging() -> None:
    """Reset logging state. For testing only."""
    global _configured
    _configured = False
    root = logging.getLogger(LOGGER_NAME)
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    root.setLevel(logging.WARNING)
