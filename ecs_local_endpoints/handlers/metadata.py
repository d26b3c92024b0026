"""Маршруты ECS Task Metadata v2 и v3.

Каждый запрос получает свежий снимок контейнеров. Идентификатор контейнера
из пути (если он есть) и IP-адрес вызывающего используются для поиска
вызывающего контейнера и его задачи.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Callable, Dict, Optional

from flask import Flask, Response, request

from ecs_local_endpoints.docker_api.data_provider import DockerDataProvider
from ecs_local_endpoints.handlers.http import json_response
from ecs_local_endpoints.identity.grouping import get_task_containers
from ecs_local_endpoints.identity.resolver import ContainerResolver
from ecs_local_endpoints.metadata import projector
from ecs_local_endpoints.settings.registry import SettingsRegistry

LOGGER = logging.getLogger(__name__)


class RequestType(enum.Enum):
    """Вид запроса к эндпоинтам метаданных."""

    TASK_METADATA = "task_metadata"
    TASK_STATS = "task_stats"
    CONTAINER_METADATA = "container_metadata"
    CONTAINER_STATS = "container_stats"


V2_ROUTES = (
    ("/v2/metadata", RequestType.TASK_METADATA),
    ("/v2/metadata/<identifier>", RequestType.CONTAINER_METADATA),
    ("/v2/stats", RequestType.TASK_STATS),
    ("/v2/stats/<identifier>", RequestType.CONTAINER_STATS),
)

V3_ROUTES = (
    ("/v3", RequestType.CONTAINER_METADATA),
    ("/v3/containers/<identifier>", RequestType.CONTAINER_METADATA),
    ("/v3/stats", RequestType.CONTAINER_STATS),
    ("/v3/containers/<identifier>/stats", RequestType.CONTAINER_STATS),
    ("/v3/task", RequestType.TASK_METADATA),
    ("/v3/containers/<identifier>/task", RequestType.TASK_METADATA),
    ("/v3/task/stats", RequestType.TASK_STATS),
    ("/v3/containers/<identifier>/task/stats", RequestType.TASK_STATS),
)


class MetadataService:
    """Отдаёт метаданные и статистику контейнеров Docker в формате ECS."""

    def __init__(
        self,
        docker_data_provider: DockerDataProvider,
        settings: SettingsRegistry,
        resolver: Optional[ContainerResolver] = None,
    ) -> None:
        self._provider = docker_data_provider
        self._settings = settings
        self._resolver = resolver or ContainerResolver(
            settings.get_value("server", "own_container_id", default="")
        )
        self._task_settings = settings.get_group("task").to_dict()
        self._task_override = settings.task_metadata_override
        self._container_override = settings.container_metadata_override

    # ------------------------------------------------------------------- routes
    def setup_v2_routes(self, app: Flask) -> None:
        self._register(app, "v2", V2_ROUTES)

    def setup_v3_routes(self, app: Flask) -> None:
        self._register(app, "v3", V3_ROUTES)

    def _register(self, app: Flask, prefix: str, routes: Any) -> None:
        # Flask требует один и тот же объект view для всех правил одного endpoint
        views: Dict[RequestType, Callable[..., Response]] = {}
        for rule, request_type in routes:
            endpoint = f"{prefix}_{request_type.value}"
            if request_type not in views:
                views[request_type] = self._get_metadata_handler(request_type)
            view = views[request_type]
            # каждый путь доступен и со слэшем в конце, и без него
            app.add_url_rule(rule, endpoint=endpoint, view_func=view)
            app.add_url_rule(f"{rule}/", endpoint=endpoint, view_func=view)

    def _get_metadata_handler(self, request_type: RequestType) -> Callable[..., Response]:
        def handler(identifier: str = "") -> Response:
            caller_ip = request.remote_addr or ""
            LOGGER.debug(
                "Received %s request (identifier=%r, caller=%s)",
                request_type.value,
                identifier,
                caller_ip,
            )
            return self.handle_request(request_type, identifier, caller_ip)

        return handler

    # ---------------------------------------------------------------- responses
    def handle_request(self, request_type: RequestType, identifier: str, caller_ip: str) -> Response:
        """Формирует ответ для запроса указанного вида."""

        responders: Dict[RequestType, Callable[[str, str], Any]] = {
            RequestType.TASK_METADATA: self.task_metadata_response,
            RequestType.TASK_STATS: self.task_stats_response,
            RequestType.CONTAINER_METADATA: self.container_metadata_response,
            RequestType.CONTAINER_STATS: self.container_stats_response,
        }
        return json_response(responders[request_type](identifier, caller_ip))

    def task_metadata_response(self, identifier: str, caller_ip: str) -> Dict[str, Any]:
        snapshot = self._provider.fetch_snapshot()
        task_containers = get_task_containers(snapshot, identifier, caller_ip, self._resolver)
        return projector.task_metadata(
            task_containers,
            self._task_settings,
            overrides=self._task_override,
            container_overrides=self._container_override,
        )

    def task_stats_response(self, identifier: str, caller_ip: str) -> Dict[str, Any]:
        snapshot = self._provider.fetch_snapshot()
        task_containers = get_task_containers(snapshot, identifier, caller_ip, self._resolver)
        return self._provider.fetch_task_stats(task_containers)

    def container_metadata_response(self, identifier: str, caller_ip: str) -> Dict[str, Any]:
        snapshot = self._provider.fetch_snapshot()
        container = self._resolver.resolve(snapshot, identifier, caller_ip)
        return projector.container_metadata(container, self._container_override)

    def container_stats_response(self, identifier: str, caller_ip: str) -> Dict[str, Any]:
        snapshot = self._provider.fetch_snapshot()
        container = self._resolver.resolve(snapshot, identifier, caller_ip)
        return self._provider.fetch_container_stats(container.id)
