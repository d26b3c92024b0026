"""Состав локальной "задачи".

Задача - это все контейнеры из того же проекта Docker Compose, что и
вызывающий контейнер, либо все запущенные контейнеры, если Compose не
используется или вызывающий контейнер определить не удалось. Пустой список
никогда не возвращается.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from ecs_local_endpoints.docker_api.models import ContainerRecord
from ecs_local_endpoints.identity.exceptions import ContainerNotFoundError
from ecs_local_endpoints.identity.resolver import ContainerResolver

LOGGER = logging.getLogger(__name__)


def filter_by_compose_project(
    snapshot: Sequence[ContainerRecord], project_name: str
) -> List[ContainerRecord]:
    """Контейнеры с тем же значением метки проекта Compose."""

    matched = [container for container in snapshot if container.compose_project == project_name]
    return matched or list(snapshot)


def get_task_containers(
    snapshot: Sequence[ContainerRecord],
    identifier: str,
    caller_ip: str,
    resolver: ContainerResolver,
) -> List[ContainerRecord]:
    """Возвращает контейнеры задачи вызывающего контейнера."""

    try:
        caller = resolver.resolve(snapshot, identifier, caller_ip)
    except ContainerNotFoundError as exc:
        LOGGER.warning("%s", exc)
        LOGGER.info("Will use all containers to represent one 'local task'")
        return list(snapshot)

    project_name = caller.compose_project
    if not project_name:
        LOGGER.info(
            "Will use all containers to represent one 'local task': "
            "The container which made the request is not in a Docker Compose Project"
        )
        return list(snapshot)

    return filter_by_compose_project(snapshot, project_name)
