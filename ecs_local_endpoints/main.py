"""Точка входа: локальные эндпоинты метаданных и учётных данных ECS."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Mapping, Optional

from botocore.exceptions import BotoCoreError

from ecs_local_endpoints import __app_name__, __version__
from ecs_local_endpoints.app import create_application
from ecs_local_endpoints.docker_api.client import DockerClientWrapper
from ecs_local_endpoints.docker_api.data_provider import DockerDataProvider
from ecs_local_endpoints.docker_api.exceptions import DockerAPIError
from ecs_local_endpoints.handlers.credentials import CredentialService
from ecs_local_endpoints.settings.exceptions import SettingsError
from ecs_local_endpoints.settings.registry import SettingsRegistry
from ecs_local_endpoints.utils.logger import configure_logging

LOGGER = logging.getLogger(__name__)


def initialize_settings(environ: Mapping[str, str]) -> SettingsRegistry:
    """Создаёт реестр настроек и заполняет его из окружения."""

    registry = SettingsRegistry()
    registry.load_from_environment(environ)
    return registry


def setup_logging_from_settings(settings: SettingsRegistry) -> None:
    """Настраивает логирование в соответствии с LoggingSettings."""

    logging_settings = settings.get_group("logging")
    log_dir = logging_settings.get("log_dir")
    configure_logging(
        Path(log_dir) if log_dir else None,
        level_name=logging_settings.get("level", "INFO"),
        max_bytes=logging_settings.get("max_file_size_mb", 10) * 1024 * 1024,
        backup_count=logging_settings.get("max_archived_files", 5),
    )


def create_docker_data_provider(
    settings: SettingsRegistry, environ: Optional[Mapping[str, str]] = None
) -> DockerDataProvider:
    """Создаёт клиент Docker и поставщика снимков с таймаутом из настроек."""

    timeout = int(settings.get_value("server", "docker_timeout_sec"))
    client = DockerClientWrapper(
        timeout=timeout, environ=dict(os.environ if environ is None else environ)
    )
    return DockerDataProvider(client, timeout=timeout)


def main() -> int:
    """Основная точка входа: готовит окружение и запускает сервер."""

    configure_logging()
    try:
        settings = initialize_settings(os.environ)
    except SettingsError as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        return 1
    setup_logging_from_settings(settings)

    LOGGER.info("%s version %s", __app_name__, __version__)
    LOGGER.info("Running...")

    try:
        credential_service = CredentialService.from_settings(settings)
    except BotoCoreError as exc:
        LOGGER.error("Failed to create Credentials Service: %s", exc)
        return 1

    try:
        docker_data_provider = create_docker_data_provider(settings)
    except DockerAPIError as exc:
        LOGGER.error("Failed to create Metadata Service: %s", exc)
        return 1

    app = create_application(
        settings=settings,
        docker_data_provider=docker_data_provider,
        credential_service=credential_service,
    )
    try:
        return app.run()
    except OSError as exc:
        LOGGER.error("HTTP Server exited with error: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
