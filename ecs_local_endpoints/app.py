"""Высокоуровневые утилиты для создания и запуска HTTP-приложения."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from flask import Flask

from ecs_local_endpoints.docker_api.data_provider import DockerDataProvider
from ecs_local_endpoints.handlers.credentials import CredentialService
from ecs_local_endpoints.handlers.http import register_error_handlers
from ecs_local_endpoints.handlers.metadata import MetadataService
from ecs_local_endpoints.identity.resolver import ContainerResolver
from ecs_local_endpoints.settings.registry import SettingsRegistry

LISTEN_HOST = "0.0.0.0"


@dataclass
class EndpointsApp:
    """HTTP-сервер с маршрутами метаданных v2/v3 и учётных данных."""

    settings: SettingsRegistry
    docker_data_provider: DockerDataProvider
    credential_service: Optional[CredentialService] = None
    resolver: Optional[ContainerResolver] = None
    flask_app: Flask = field(init=False)

    def __post_init__(self) -> None:
        """Создаёт Flask-приложение и регистрирует маршруты."""

        self.flask_app = Flask(__name__)
        register_error_handlers(self.flask_app)

        metadata_service = MetadataService(
            self.docker_data_provider, self.settings, resolver=self.resolver
        )
        metadata_service.setup_v2_routes(self.flask_app)
        metadata_service.setup_v3_routes(self.flask_app)
        if self.credential_service is not None:
            self.credential_service.setup_routes(self.flask_app)

    def run(self) -> int:
        """Обслуживает запросы до остановки процесса; каждый запрос в своём потоке."""

        port = int(self.settings.get_value("server", "port"))
        self.flask_app.run(host=LISTEN_HOST, port=port, threaded=True)
        return 0


def create_application(
    settings: SettingsRegistry,
    docker_data_provider: DockerDataProvider,
    credential_service: Optional[CredentialService] = None,
) -> EndpointsApp:
    """Фабрика HTTP-приложения."""

    return EndpointsApp(
        settings=settings,
        docker_data_provider=docker_data_provider,
        credential_service=credential_service,
    )
