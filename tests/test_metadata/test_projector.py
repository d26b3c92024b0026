"""Тесты формирования ответов ECS из записей Docker."""

from __future__ import annotations

from ecs_local_endpoints.docker_api.models import ContainerRecord
from ecs_local_endpoints.metadata.projector import (
    container_metadata,
    format_timestamp,
    task_metadata,
)


IMAGE = "ecs-local-metadata_shell"
IMAGE_ID = "sha256:11edcbc416845013254cbab0726bb65abcc6eea1981254a888659381a630aa20"
CONTAINER_ID = "457129ed3bd03f1fc70125c3be7bcbee760d5edf092e32155a5c6a730cd32020"
CREATED = "2019-03-12T05:24:35Z"

TASK_SETTINGS = {
    "cluster": "ecs-local-cluster",
    "task_arn": "arn:aws:ecs:us-west-2:111111111111:task/ecs-local-cluster/37e873f6-37b4-42a7-af47-eac7275c6152",
    "family": "ecs-local-task-definition",
    "revision": "1",
    "task_tags": {},
    "container_instance_tags": {},
}


def test_format_timestamp_is_utc() -> None:
    assert format_timestamp(1552368275) == CREATED
    assert format_timestamp(0) == "1970-01-01T00:00:00Z"


def test_container_metadata_full(make_container) -> None:
    record = make_container("container2-pudding", CONTAINER_ID, {"bridge": "172.17.0.3"}, "project")

    response = container_metadata(record)

    assert response["DockerId"] == CONTAINER_ID
    assert response["Name"] == "container2-pudding"
    assert response["DockerName"] == "container2-pudding"
    assert response["Image"] == IMAGE
    assert response["ImageID"] == IMAGE_ID
    assert response["DesiredStatus"] == "RUNNING"
    assert response["KnownStatus"] == "RUNNING"
    assert response["CreatedAt"] == CREATED
    assert response["StartedAt"] == CREATED
    assert response["Type"] == "NORMAL"
    assert response["Ports"] == [{"ContainerPort": 80, "Protocol": "tcp", "HostPort": 8000}]
    assert response["Networks"] == [{"NetworkMode": "bridge", "IPv4Addresses": ["172.17.0.3"]}]
    assert response["Volumes"] == [
        {"DockerName": "volume0", "Source": "/var/run", "Destination": "/run"}
    ]
    assert response["Labels"]["com.docker.compose.project"] == "project"


def test_container_metadata_omits_empty_fields() -> None:
    record = ContainerRecord.from_api(
        {"Id": CONTAINER_ID, "Names": ["/bare"], "Created": 0, "Ports": [{"PrivatePort": 53, "Type": "udp"}]}
    )

    response = container_metadata(record)

    for key in ("Labels", "Networks", "Volumes"):
        assert key not in response
    assert response["Ports"] == [{"ContainerPort": 53, "Protocol": "udp"}]


def test_container_metadata_ipv6_and_overrides(make_api_payload) -> None:
    payload = make_api_payload("ipv6", CONTAINER_ID, {"app-network": ""})
    payload["NetworkSettings"]["Networks"]["app-network"]["GlobalIPv6Address"] = "2001:db8::2"
    record = ContainerRecord.from_api(payload)

    response = container_metadata(record, {"Name": "web", "Limits": {"CPU": 256}})

    assert response["Networks"] == [{"NetworkMode": "app-network", "IPv6Addresses": ["2001:db8::2"]}]
    assert response["Name"] == "web"
    assert response["DockerName"] == "ipv6"
    assert response["Limits"] == {"CPU": 256}


def test_task_metadata(make_container) -> None:
    records = [
        make_container("container2-pudding", CONTAINER_ID),
        make_container("endpoints", "56771b9219b58c8b6a286830667b62475e79753db34a0b82a98efafb20718c0f9"),
    ]

    response = task_metadata(records, TASK_SETTINGS)

    assert response["Cluster"] == "ecs-local-cluster"
    assert response["TaskARN"] == TASK_SETTINGS["task_arn"]
    assert response["Family"] == "ecs-local-task-definition"
    assert response["Revision"] == "1"
    assert response["DesiredStatus"] == "RUNNING"
    assert response["KnownStatus"] == "RUNNING"
    assert [item["Name"] for item in response["Containers"]] == ["container2-pudding", "endpoints"]
    assert "TaskTags" not in response
    assert "ContainerInstanceTags" not in response


def test_task_metadata_tags_and_overrides(make_container) -> None:
    settings = dict(
        TASK_SETTINGS,
        task_tags={"team": "clyde"},
        container_instance_tags={"az": "local"},
    )

    response = task_metadata(
        [make_container("web", CONTAINER_ID)],
        settings,
        overrides={"Family": "custom", "AvailabilityZone": "us-west-2a"},
        container_overrides={"Image": "custom-image"},
    )

    assert response["TaskTags"] == {"team": "clyde"}
    assert response["ContainerInstanceTags"] == {"az": "local"}
    assert response["Family"] == "custom"
    assert response["AvailabilityZone"] == "us-west-2a"
    assert response["Containers"][0]["Image"] == "custom-image"


def test_task_metadata_without_containers() -> None:
    assert task_metadata([], TASK_SETTINGS)["Containers"] == []
