"""Функции для работы с контейнерами через Docker client."""

from __future__ import annotations

import json
from typing import Any, Dict, Tuple

from docker.errors import DockerException

from ecs_local_endpoints.docker_api.client import DockerClientWrapper
from ecs_local_endpoints.docker_api.exceptions import DockerAPIError
from ecs_local_endpoints.docker_api.models import ContainerRecord


def list_containers(client: DockerClientWrapper) -> Tuple[ContainerRecord, ...]:
    """Возвращает снимок всех запущенных контейнеров."""

    raw = client.get_raw_client()
    try:
        payload = raw.api.containers()
    except DockerException as exc:
        raise DockerAPIError(f"failed to list docker containers: {exc}") from exc
    return tuple(ContainerRecord.from_api(item) for item in payload or ())


def fetch_stats(client: DockerClientWrapper, container_id: str) -> Dict[str, Any]:
    """Возвращает один замер docker stats в исходном формате Docker API."""

    raw = client.get_raw_client()
    try:
        data = raw.api.stats(container_id, stream=False)
    except DockerException as exc:
        raise DockerAPIError(f"failed to get docker stats for {container_id}: {exc}") from exc
    if isinstance(data, (bytes, str)):
        try:
            data = json.loads(data)
        except ValueError as exc:
            raise DockerAPIError(
                f"failed to get docker stats for {container_id}: {exc}"
            ) from exc
    if not isinstance(data, dict):
        raise DockerAPIError(
            f"failed to get docker stats for {container_id}: unexpected payload {type(data).__name__}"
        )
    return data
