"""Проверки подсистемы логирования."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from ecs_local_endpoints.utils.logger import configure_logging, resolve_log_level


@pytest.fixture(autouse=True)
def drop_configured_handlers():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, RotatingFileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def test_configure_logging_creates_file(tmp_path: Path) -> None:
    """После конфигурации должны появиться файл лога и запись в нём."""

    log_dir = tmp_path / "logs"
    configure_logging(log_dir, level_name="INFO", max_bytes=1024, backup_count=1)

    logging.getLogger("ecs_local_endpoints.test").info("log entry")
    for handler in logging.getLogger().handlers:
        handler.flush()

    log_file = log_dir / "ecs-local-endpoints.log"
    assert log_file.exists()
    assert "| INFO | ecs_local_endpoints.test | log entry" in log_file.read_text(encoding="utf-8")


def test_configure_logging_stdout_only() -> None:
    """Без каталога логи пишутся только в stdout."""

    configure_logging(level_name="debug")

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert root.handlers[0].stream is sys.stdout


def test_resolve_log_level_invalid() -> None:
    """Неизвестный уровень логирования приводит к ValueError."""

    assert resolve_log_level("warning") == logging.WARNING
    with pytest.raises(ValueError):
        resolve_log_level("INVALID")
