"""Реестр настроек сервиса.

Значения читаются из переменных окружения один раз при старте; во время
обработки запросов окружение не читается. Реестр передаётся в компоненты
явно, поэтому в тестах его легко заполнить произвольными значениями.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ecs_local_endpoints.settings.exceptions import (
    SettingsIOError,
    SettingsNotFoundError,
    SettingsValidationError,
)
from ecs_local_endpoints.settings.groups import (
    CredentialsSettings,
    LoggingSettings,
    ServerSettings,
    SettingsGroup,
    TaskSettings,
)
from ecs_local_endpoints.settings.schemas import ENVIRONMENT_BINDINGS


class SettingsRegistry:
    """Реестр, управляющий всеми группами настроек."""

    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self._settings: Dict[str, SettingsGroup] = {}
        self._task_metadata_override: Dict[str, Any] = {}
        self._container_metadata_override: Dict[str, Any] = {}
        self._register_groups()

    # --------------------------------------------------------------------- API
    def get_value(self, group: str, key: str, default: Any = None) -> Any:
        settings_group = self._settings.get(group)
        if not settings_group:
            if default is not None:
                return default
            raise SettingsNotFoundError(group, key)
        try:
            return settings_group.get(key)
        except SettingsNotFoundError:
            if default is not None:
                return default
            raise

    def set_value(self, group: str, key: str, value: Any) -> None:
        self._require_group(group).set(key, value)

    def get_group(self, group: str) -> SettingsGroup:
        return self._require_group(group)

    @property
    def task_metadata_override(self) -> Dict[str, Any]:
        """Пользовательские поля, добавляемые в ответ с метаданными задачи."""

        return dict(self._task_metadata_override)

    @property
    def container_metadata_override(self) -> Dict[str, Any]:
        """Пользовательские поля, добавляемые в ответ каждого контейнера."""

        return dict(self._container_metadata_override)

    def load_from_environment(self, environ: Mapping[str, str]) -> None:
        """Заполняет группы из переменных окружения и читает файлы переопределений."""

        for variable, (group, key, convert) in ENVIRONMENT_BINDINGS.items():
            raw_value = environ.get(variable, "")
            if raw_value == "":
                continue
            try:
                value = convert(raw_value)
            except ValueError as exc:
                error = str(exc) or "cannot be parsed"
            else:
                error = self.get_group(group).validate(key, value)
            if error:
                raise SettingsValidationError(f"{group}.{key}", raw_value, error, variable=variable)
            self.set_value(group, key, value)

        self._task_metadata_override = self._load_override(
            self.get_value("task", "task_metadata_path")
        )
        self._container_metadata_override = self._load_override(
            self.get_value("task", "container_metadata_path")
        )

    def read_metadata_file(self, path: Path) -> Dict[str, Any]:
        """Читает JSON-объект с пользовательскими метаданными."""

        try:
            content = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise SettingsIOError(path, str(exc)) from exc
        if not isinstance(content, dict):
            raise SettingsIOError(path, f"expected JSON object, got {type(content).__name__}")
        return content

    # ----------------------------------------------------------------- helpers
    def _register_groups(self) -> None:
        self._settings = {
            "server": ServerSettings(),
            "task": TaskSettings(),
            "credentials": CredentialsSettings(),
            "logging": LoggingSettings(),
        }

    def _require_group(self, group: str) -> SettingsGroup:
        try:
            return self._settings[group]
        except KeyError:
            raise SettingsNotFoundError(group, None) from None

    def _load_override(self, raw_path: Optional[str]) -> Dict[str, Any]:
        if not raw_path:
            return {}
        try:
            return self.read_metadata_file(Path(raw_path))
        except SettingsIOError:
            self._logger.error("Failed to read user defined metadata file: %s", raw_path)
            return {}
