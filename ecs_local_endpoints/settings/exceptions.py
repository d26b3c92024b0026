"""Исключения подсистемы настроек.

Любая ошибка конфигурации пишется в лог в момент создания: сервис не
стартует, и причина должна остаться в выводе контейнера.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

LOGGER = logging.getLogger(__name__)


class SettingsError(Exception):
    """Базовая ошибка конфигурации с контекстом для лога."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)
        details = ", ".join(f"{key}={value!r}" for key, value in sorted(context.items()))
        LOGGER.error("Configuration error: %s [%s]", message, details)


class SettingsNotFoundError(SettingsError):
    def __init__(self, group: str, key: Optional[str] = None) -> None:
        name = f"{group}.{key}" if key else group
        super().__init__(f"Unknown setting '{name}'", group=group, key=key)


class SettingsValidationError(SettingsError):
    """Недопустимое значение настройки.

    ``variable`` - переменная окружения, из которой пришло значение, если
    оно пришло из окружения.
    """

    def __init__(self, key: str, value: Any, reason: str, variable: str = "") -> None:
        self.key = key
        self.value = value
        self.reason = reason
        self.variable = variable
        source = variable or key
        super().__init__(
            f"Invalid value for {source}: {reason} (value={value!r})",
            key=key,
            value=value,
        )


class SettingsIOError(SettingsError):
    """Файл с пользовательскими метаданными не читается или не является JSON-объектом."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"I/O error with metadata file '{path}': {reason}", path=str(path))
