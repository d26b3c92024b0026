"""Формирование ответов ECS Task Metadata (v2/v3) из записей Docker.

Поля, которых у Docker нет, заполняются правдоподобными значениями:
статус всегда RUNNING, время запуска совпадает со временем создания.
Пустые необязательные поля опускаются, как это делает агент ECS.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ecs_local_endpoints.docker_api.models import ContainerRecord

STATUS_RUNNING = "RUNNING"
CONTAINER_TYPE_NORMAL = "NORMAL"


def format_timestamp(unix_seconds: int) -> str:
    """Время в формате RFC 3339 (UTC)."""

    moment = datetime.fromtimestamp(unix_seconds, tz=timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def _convert_ports(record: ContainerRecord) -> List[Dict[str, Any]]:
    ports = []
    for port in record.ports:
        item: Dict[str, Any] = {"ContainerPort": port.private_port, "Protocol": port.protocol}
        if port.public_port:
            item["HostPort"] = port.public_port
        ports.append(item)
    return ports


def _convert_networks(record: ContainerRecord) -> List[Dict[str, Any]]:
    networks = []
    for network_mode, settings in record.attachments():
        item: Dict[str, Any] = {"NetworkMode": network_mode}
        if settings.ip_address:
            item["IPv4Addresses"] = [settings.ip_address]
        if settings.global_ipv6_address:
            item["IPv6Addresses"] = [settings.global_ipv6_address]
        networks.append(item)
    return networks


def _convert_volumes(record: ContainerRecord) -> List[Dict[str, Any]]:
    return [
        {"DockerName": mount.name, "Source": mount.source, "Destination": mount.destination}
        for mount in record.mounts
    ]


def container_metadata(
    record: ContainerRecord, overrides: Optional[Mapping[str, Any]] = None
) -> Dict[str, Any]:
    """Ответ ECS с метаданными одного контейнера."""

    created_at = format_timestamp(record.created)
    response: Dict[str, Any] = {
        "DockerId": record.id,
        "Name": record.display_name,
        "DockerName": record.display_name,
        "Image": record.image,
        "ImageID": record.image_id,
        "DesiredStatus": STATUS_RUNNING,
        "KnownStatus": STATUS_RUNNING,
        # настоящего времени запуска Docker не сообщает
        "CreatedAt": created_at,
        "StartedAt": created_at,
        "Type": CONTAINER_TYPE_NORMAL,
    }
    optional = {
        "Ports": _convert_ports(record),
        "Labels": dict(record.labels),
        "Networks": _convert_networks(record),
        "Volumes": _convert_volumes(record),
    }
    response.update({key: value for key, value in optional.items() if value})
    if overrides:
        response.update(overrides)
    return response


def task_metadata(
    records: Iterable[ContainerRecord],
    task_settings: Mapping[str, Any],
    overrides: Optional[Mapping[str, Any]] = None,
    container_overrides: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Ответ ECS с метаданными задачи.

    ``task_settings`` - значения группы настроек ``task``.
    """

    response: Dict[str, Any] = {
        "Cluster": task_settings.get("cluster", ""),
        "TaskARN": task_settings.get("task_arn", ""),
        "Family": task_settings.get("family", ""),
        "Revision": task_settings.get("revision", ""),
        "DesiredStatus": STATUS_RUNNING,
        "KnownStatus": STATUS_RUNNING,
        "Containers": [container_metadata(record, container_overrides) for record in records],
    }
    if task_settings.get("task_tags"):
        response["TaskTags"] = dict(task_settings["task_tags"])
    if task_settings.get("container_instance_tags"):
        response["ContainerInstanceTags"] = dict(task_settings["container_instance_tags"])
    if overrides:
        response.update(overrides)
    return response
