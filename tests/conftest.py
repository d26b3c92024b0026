"""Общие фикстуры: построение записей контейнеров в формате Docker API."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import pytest
from docker.errors import NotFound

from ecs_local_endpoints.docker_api.client import DockerClientWrapper
from ecs_local_endpoints.docker_api.models import ContainerRecord

IMAGE = "ecs-local-metadata_shell"
IMAGE_ID = "sha256:11edcbc416845013254cbab0726bb65abcc6eea1981254a888659381a630aa20"
CREATED_AT = 1552368275


def docker_api_container(
    name: str,
    container_id: str,
    networks: Optional[Dict[str, str]] = None,
    project: Optional[str] = None,
) -> Dict[str, Any]:
    """Элемент ответа GET /containers/json."""

    payload: Dict[str, Any] = {
        "Id": container_id,
        "Names": [f"/{name}"],
        "Image": IMAGE,
        "ImageID": IMAGE_ID,
        "Created": CREATED_AT,
        "Ports": [{"IP": "0.0.0.0", "PrivatePort": 80, "PublicPort": 8000, "Type": "tcp"}],
        "Mounts": [{"Name": "volume0", "Source": "/var/run", "Destination": "/run"}],
        "Labels": {},
    }
    if networks is not None:
        payload["NetworkSettings"] = {
            "Networks": {
                network: {
                    "NetworkID": "e8884d2d5eb158e35d2d78d012e265834fb0da9cd42a288b6a5d70bfc735c84c",
                    "Gateway": "172.17.0.1",
                    "IPAddress": ip_address,
                }
                for network, ip_address in networks.items()
            }
        }
    if project is not None:
        payload["Labels"] = {
            "com.docker.compose.project": project,
            "com.docker.compose.service": "ecs-local",
            "com.docker.compose.oneoff": "False",
        }
    return payload


@pytest.fixture
def make_container() -> Callable[..., ContainerRecord]:
    """Фабрика ContainerRecord для тестов."""

    def factory(
        name: str,
        container_id: str,
        networks: Optional[Dict[str, str]] = None,
        project: Optional[str] = None,
    ) -> ContainerRecord:
        return ContainerRecord.from_api(docker_api_container(name, container_id, networks, project))

    return factory


@pytest.fixture
def make_api_payload() -> Callable[..., Dict[str, Any]]:
    """Фабрика сырых элементов ответа Docker API."""

    return docker_api_container


class FakeDockerAPI:
    """Низкоуровневый API docker-py: только используемые вызовы."""

    def __init__(
        self,
        payload: Optional[List[Dict[str, Any]]] = None,
        stats: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.payload = payload or []
        self.stats_by_id = stats or {}
        self.containers_error: Optional[Exception] = None
        self.stats_calls: List[str] = []

    def containers(self) -> List[Dict[str, Any]]:
        if self.containers_error is not None:
            raise self.containers_error
        return self.payload

    def stats(self, container_id: str, stream: bool = True) -> Any:
        assert stream is False
        self.stats_calls.append(container_id)
        value = self.stats_by_id.get(container_id)
        if isinstance(value, Exception):
            raise value
        if value is None:
            raise NotFound(f"No such container: {container_id}")
        return value


class FakeRawClient:
    """Заменитель docker.DockerClient."""

    def __init__(self, api: FakeDockerAPI) -> None:
        self.api = api


@pytest.fixture
def fake_docker_api() -> FakeDockerAPI:
    return FakeDockerAPI()


@pytest.fixture
def docker_client(fake_docker_api: FakeDockerAPI) -> DockerClientWrapper:
    """Обёртка с подменённым docker client."""

    return DockerClientWrapper(raw_client=FakeRawClient(fake_docker_api))
