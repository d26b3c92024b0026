"""Обёртка над docker-py с безопасной инициализацией."""

from __future__ import annotations

import logging
import os
from typing import Any, Mapping, MutableMapping, Optional

import docker
from docker.errors import DockerException

from ecs_local_endpoints.docker_api.exceptions import DockerAPIError

LOGGER = logging.getLogger(__name__)

# v1.27 - самая старая версия API, в которой есть всё используемое здесь
MIN_DOCKER_API_VERSION = "1.27"


class DockerClientWrapper:
    """Управляет созданием и использованием docker API client."""

    def __init__(
        self,
        raw_client: Any | None = None,
        *,
        timeout: Optional[int] = None,
        environ: Optional[MutableMapping[str, str]] = None,
    ) -> None:
        self._timeout = timeout
        self._environ = os.environ if environ is None else environ
        self._client = raw_client or self._create_client()  # Создаём docker client

    def _create_client(self) -> Any:
        # Клиент настраивается переменными окружения (DOCKER_HOST и т.д.), но без
        # DOCKER_API_VERSION SDK может выбрать версию новее локального Docker.
        environment: Mapping[str, str] = dict(self._environ)
        version = environment.get("DOCKER_API_VERSION") or MIN_DOCKER_API_VERSION
        kwargs: dict[str, Any] = {"version": version, "environment": environment}
        if self._timeout:
            kwargs["timeout"] = self._timeout
        try:
            return docker.from_env(**kwargs)
        except DockerException as exc:
            LOGGER.error(
                "Docker client init error (DOCKER_HOST=%s): %s",
                environment.get("DOCKER_HOST", "default"),
                exc,
            )
            raise DockerAPIError(str(exc)) from exc

    def get_raw_client(self) -> Any:
        """Возвращает внутренний docker client."""

        return self._client
