"""Неизменяемые структуры данных для снимка контейнеров Docker."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

COMPOSE_PROJECT_LABEL = "com.docker.compose.project"


@dataclass(frozen=True, slots=True)
class NetworkAttachment:
    """Подключение контейнера к одной сети Docker."""

    ip_address: str = ""
    aliases: Tuple[str, ...] = ()
    global_ipv6_address: str = ""

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "NetworkAttachment":
        return cls(
            ip_address=payload.get("IPAddress") or "",
            aliases=tuple(payload.get("Aliases") or ()),
            global_ipv6_address=payload.get("GlobalIPv6Address") or "",
        )


@dataclass(frozen=True, slots=True)
class PortMapping:
    """Проброс порта в формате docker ps."""

    private_port: int
    public_port: int = 0
    protocol: str = "tcp"
    ip: str = ""


@dataclass(frozen=True, slots=True)
class MountPoint:
    """Точка монтирования тома."""

    name: str = ""
    source: str = ""
    destination: str = ""


@dataclass(frozen=True, slots=True)
class ContainerRecord:
    """Запись снимка: один контейнер в момент запроса.

    ``networks`` может быть ``None`` (у контейнера нет NetworkSettings), а
    отдельные значения словаря могут быть ``None`` - так Docker API иногда
    отдаёт сети без настроек.

    Словари ``labels`` и ``networks`` хранятся как ``MappingProxyType`` и не
    участвуют в хэше: запись можно класть в множества, и изменить её после
    создания нельзя.
    """

    id: str
    names: Tuple[str, ...] = ()
    labels: Mapping[str, str] = field(default_factory=dict, hash=False)
    networks: Optional[Mapping[str, Optional[NetworkAttachment]]] = field(default=None, hash=False)
    image: str = ""
    image_id: str = ""
    created: int = 0
    ports: Tuple[PortMapping, ...] = ()
    mounts: Tuple[MountPoint, ...] = ()

    def __post_init__(self) -> None:
        # frozen запрещает обычное присваивание
        object.__setattr__(self, "labels", MappingProxyType(dict(self.labels)))
        if self.networks is not None:
            object.__setattr__(self, "networks", MappingProxyType(dict(self.networks)))

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "ContainerRecord":
        """Строит запись из элемента ответа ``GET /containers/json``."""

        network_settings = payload.get("NetworkSettings") or {}
        raw_networks = network_settings.get("Networks")
        networks: Optional[Dict[str, Optional[NetworkAttachment]]] = None
        if raw_networks is not None:
            networks = {
                name: NetworkAttachment.from_api(settings) if settings is not None else None
                for name, settings in raw_networks.items()
            }

        ports = tuple(
            PortMapping(
                private_port=int(port.get("PrivatePort") or 0),
                public_port=int(port.get("PublicPort") or 0),
                protocol=port.get("Type") or "tcp",
                ip=port.get("IP") or "",
            )
            for port in payload.get("Ports") or ()
        )
        mounts = tuple(
            MountPoint(
                name=mount.get("Name") or "",
                source=mount.get("Source") or "",
                destination=mount.get("Destination") or "",
            )
            for mount in payload.get("Mounts") or ()
        )

        return cls(
            id=payload.get("Id") or payload.get("ID") or "",
            names=tuple(payload.get("Names") or ()),
            labels=dict(payload.get("Labels") or {}),
            networks=networks,
            image=payload.get("Image") or "",
            image_id=payload.get("ImageID") or "",
            created=int(payload.get("Created") or 0),
            ports=ports,
            mounts=mounts,
        )

    @property
    def compose_project(self) -> str:
        """Имя проекта Docker Compose или пустая строка."""

        return (self.labels or {}).get(COMPOSE_PROJECT_LABEL) or ""

    @property
    def display_name(self) -> str:
        """Первое имя контейнера без ведущего слэша."""

        if self.names:
            return self.names[0].strip("/")
        return ""

    def attachments(self) -> Tuple[Tuple[str, NetworkAttachment], ...]:
        """Возвращает только заполненные подключения к сетям."""

        if not self.networks:
            return ()
        return tuple(
            (name, settings) for name, settings in self.networks.items() if settings is not None
        )
