"""Определение контейнера, от которого пришёл запрос.

Алгоритм - упорядоченная цепочка фильтров по списку кандидатов:

1. По идентификатору из URL: префикс ID контейнера или подстрока имени.
2. По IP-адресу вызывающего.
3. По сетям самого контейнера с эндпоинтами: запрос мог прийти только из
   сети, к которой он подключён, причём IP в этой сети должен совпасть.

Первые два шага применяются только при непустом входе и завершают поиск,
если остался ровно один кандидат. Если шаг ничего не нашёл, список не
меняется. Третий шаг выполняется всегда. Результат - ровно один контейнер,
иначе ``ContainerNotFoundError``: среди равных кандидатов выбор не делается.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Set, Tuple

from ecs_local_endpoints.docker_api.models import ContainerRecord
from ecs_local_endpoints.identity.exceptions import ContainerNotFoundError

LOGGER = logging.getLogger(__name__)

Stage = Tuple[str, Callable[[List[ContainerRecord]], List[ContainerRecord]]]


def filter_by_identifier(
    candidates: Sequence[ContainerRecord], identifier: str
) -> List[ContainerRecord]:
    """Оставляет контейнеры, чей ID начинается с identifier или имя его содержит."""

    matched = [
        container
        for container in candidates
        if container.id.startswith(identifier)
        or any(identifier in name for name in container.names)
    ]
    return matched or list(candidates)


def filter_by_caller_ip(
    candidates: Sequence[ContainerRecord], caller_ip: str
) -> List[ContainerRecord]:
    """Оставляет контейнеры, у которых в какой-либо сети адрес равен caller_ip."""

    matched = [
        container
        for container in candidates
        if any(settings.ip_address == caller_ip for _, settings in container.attachments())
    ]
    return matched or list(candidates)


def find_own_container(
    snapshot: Sequence[ContainerRecord], own_container_id: str
) -> Optional[ContainerRecord]:
    """Ищет контейнер с эндпоинтами по его короткому ID (обычно $HOSTNAME)."""

    if not own_container_id:
        return None
    for container in snapshot:
        if container.id.startswith(own_container_id):
            return container
    return None


def _own_network_names(own_container: ContainerRecord) -> Set[str]:
    names: Set[str] = set()
    for network, settings in own_container.attachments():
        names.add(network)
        names.update(settings.aliases)
    return names


def filter_by_own_networks(
    candidates: Sequence[ContainerRecord],
    snapshot: Sequence[ContainerRecord],
    caller_ip: str,
    own_container_id: str,
) -> List[ContainerRecord]:
    """Оставляет контейнеры с caller_ip в одной из сетей контейнера с эндпоинтами.

    Совпасть должны одновременно сеть (имя или алиас) и IP в этой сети. Если
    собственный контейнер не найден, список возвращается без изменений.
    Результат может оказаться пустым.
    """

    own_container = find_own_container(snapshot, own_container_id)
    if own_container is None or own_container.networks is None:
        LOGGER.warning("Failed to find endpoints container among running containers")
        return list(candidates)

    networks_to_search = _own_network_names(own_container)

    def in_searched_network(network: str, aliases: Tuple[str, ...]) -> bool:
        return network in networks_to_search or any(
            alias in networks_to_search for alias in aliases
        )

    return [
        container
        for container in candidates
        if any(
            in_searched_network(network, settings.aliases) and settings.ip_address == caller_ip
            for network, settings in container.attachments()
        )
    ]


class ContainerResolver:
    """Находит вызывающий контейнер в снимке.

    ``own_container_id`` - короткий ID контейнера, в котором работают
    эндпоинты. Значение передаётся явно и фиксируется при старте.
    """

    def __init__(self, own_container_id: str = "") -> None:
        self.own_container_id = own_container_id

    def resolve(
        self,
        snapshot: Sequence[ContainerRecord],
        identifier: str = "",
        caller_ip: str = "",
    ) -> ContainerRecord:
        """Возвращает единственный подходящий контейнер или поднимает ContainerNotFoundError."""

        stages: List[Stage] = []
        if identifier:
            stages.append(("identifier", lambda items: filter_by_identifier(items, identifier)))
        if caller_ip:
            stages.append(("caller IP", lambda items: filter_by_caller_ip(items, caller_ip)))

        candidates = list(snapshot)
        for name, apply_filter in stages:
            candidates = apply_filter(candidates)
            if len(candidates) == 1:
                LOGGER.debug("Caller container %s found by %s", candidates[0].id, name)
                return candidates[0]

        candidates = filter_by_own_networks(
            candidates, snapshot, caller_ip, self.own_container_id
        )
        if len(candidates) == 1:
            LOGGER.debug("Caller container %s found by endpoint networks", candidates[0].id)
            return candidates[0]

        raise ContainerNotFoundError(
            len(candidates), identifier=identifier, caller_ip=caller_ip
        )
