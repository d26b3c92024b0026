"""Группы настроек сервиса.

Каждая группа описывается схемой: ключ -> значение по умолчанию и проверка.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional

from ecs_local_endpoints.settings.exceptions import SettingsNotFoundError, SettingsValidationError
from ecs_local_endpoints.settings.validators import (
    AllOf,
    InRange,
    Matches,
    OfType,
    OneOf,
    TagMapping,
    Validator,
)

DEFAULT_CLUSTER_NAME = "ecs-local-cluster"
DEFAULT_TASK_ARN = (
    "arn:aws:ecs:us-west-2:111111111111:task/ecs-local-cluster/37e873f6-37b4-42a7-af47-eac7275c6152"
)
DEFAULT_TASK_DEFINITION_FAMILY = "ecs-local-task-definition"
DEFAULT_TASK_DEFINITION_REVISION = "1"
# 12.5 минут, как у локальных эндпоинтов по умолчанию
DEFAULT_SHARED_TOKEN_EXPIRATION_SEC = 750

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

_endpoint_url = Matches(r"(https?://\S+)?", "is not an http(s) URL")


@dataclass(frozen=True)
class Setting:
    """Описание одного ключа группы."""

    default: Any
    check: Optional[Validator] = None


class SettingsGroup:
    """Именованный набор настроек с проверкой значений при записи."""

    group_name: ClassVar[str] = ""
    schema: ClassVar[Dict[str, Setting]] = {}

    def __init__(self) -> None:
        self._values: Dict[str, Any] = {}
        self.reset_to_defaults()

    def _setting(self, key: str) -> Setting:
        try:
            return self.schema[key]
        except KeyError:
            raise SettingsNotFoundError(self.group_name, key) from None

    def get(self, key: str, default: Any = None) -> Any:
        self._setting(key)
        return self._values.get(key, default)

    def validate(self, key: str, value: Any) -> str:
        """Текст ошибки для значения или "", если его можно записать."""

        check = self._setting(key).check
        return check(value) if check is not None else ""

    def set(self, key: str, value: Any) -> None:
        error = self.validate(key, value)
        if error:
            raise SettingsValidationError(f"{self.group_name}.{key}", value, error)
        self._values[key] = value

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._values)

    def reset_to_defaults(self) -> None:
        self._values = {key: copy.deepcopy(item.default) for key, item in self.schema.items()}


class ServerSettings(SettingsGroup):
    """HTTP-сервер и доступ к Docker."""

    group_name = "server"
    schema = {
        "port": Setting(80, AllOf(OfType(int), InRange(1, 65535))),
        "docker_timeout_sec": Setting(5, AllOf(OfType(int), InRange(1, 120))),
        # короткий ID собственного контейнера, Docker кладёт его в $HOSTNAME
        "own_container_id": Setting("", OfType(str)),
    }


class TaskSettings(SettingsGroup):
    """Имитируемые поля задачи ECS и пути к файлам переопределений."""

    group_name = "task"
    schema = {
        "cluster": Setting(DEFAULT_CLUSTER_NAME, OfType(str)),
        "task_arn": Setting(DEFAULT_TASK_ARN, OfType(str)),
        "family": Setting(DEFAULT_TASK_DEFINITION_FAMILY, OfType(str)),
        "revision": Setting(DEFAULT_TASK_DEFINITION_REVISION, Matches(r"[0-9]+", "is not a number")),
        "container_instance_tags": Setting({}, TagMapping()),
        "task_tags": Setting({}, TagMapping()),
        "task_metadata_path": Setting("", OfType(str)),
        "container_metadata_path": Setting("", OfType(str)),
    }


class CredentialsSettings(SettingsGroup):
    """Параметры выдачи учётных данных через IAM/STS."""

    group_name = "credentials"
    schema = {
        "iam_endpoint": Setting("", _endpoint_url),
        "sts_endpoint": Setting("", _endpoint_url),
        # "750s", "15m" или число секунд; разбирается при выдаче ключей
        "shared_token_expiration": Setting(f"{DEFAULT_SHARED_TOKEN_EXPIRATION_SEC}s", OfType(str)),
    }


class LoggingSettings(SettingsGroup):
    group_name = "logging"
    schema = {
        "level": Setting("INFO", OneOf(LOG_LEVELS)),
        "log_dir": Setting("", OfType(str)),
        "max_file_size_mb": Setting(10, AllOf(OfType(int), InRange(1, 1000))),
        "max_archived_files": Setting(5, AllOf(OfType(int), InRange(1, 50))),
    }
