"""Определение контейнера, сделавшего запрос, и состава его задачи."""

from ecs_local_endpoints.identity.exceptions import ContainerNotFoundError
from ecs_local_endpoints.identity.grouping import get_task_containers
from ecs_local_endpoints.identity.resolver import ContainerResolver

__all__ = [
    "ContainerNotFoundError",
    "ContainerResolver",
    "get_task_containers",
]
