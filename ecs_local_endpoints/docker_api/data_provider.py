"""Поставщик данных Docker для обработчиков запросов.

Каждый запрос получает свой свежий снимок контейнеров: кэширования между
запросами нет. Все обращения к Docker ограничены таймаутом, а при сбое
ошибка поднимается наверх без повторных попыток.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError
from typing import Any, Callable, Dict, Iterable, Tuple, TypeVar

from ecs_local_endpoints.docker_api import containers
from ecs_local_endpoints.docker_api.client import DockerClientWrapper
from ecs_local_endpoints.docker_api.exceptions import DockerAPIError
from ecs_local_endpoints.docker_api.models import ContainerRecord

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class DockerDataProvider:
    """Предоставляет снимки контейнеров и статистику с ограничением по времени."""

    def __init__(self, client: DockerClientWrapper, timeout: float = 5) -> None:
        self._client = client
        self._timeout = timeout

    # ------------------------------------------------------------------ helpers
    def _call_with_timeout(self, description: str, func: Callable[..., T], *args: Any) -> T:
        """Выполняет обращение к Docker, прерывая ожидание по таймауту."""

        if self._timeout <= 0:
            return func(*args)

        executor = ThreadPoolExecutor(max_workers=1)
        future = executor.submit(func, *args)
        try:
            return future.result(timeout=self._timeout)
        except TimeoutError as exc:
            future.cancel()
            LOGGER.error("Docker call '%s' timed out after %s seconds", description, self._timeout)
            raise DockerAPIError(
                f"{description}: timeout after {self._timeout} seconds"
            ) from exc
        finally:
            # не ждём зависший вызов, поток завершится сам
            executor.shutdown(wait=False)

    # ------------------------------------------------------------------- fetches
    def fetch_snapshot(self) -> Tuple[ContainerRecord, ...]:
        """Возвращает снимок всех запущенных контейнеров."""

        return self._call_with_timeout(
            "list containers", containers.list_containers, self._client
        )

    def fetch_container_stats(self, container_id: str) -> Dict[str, Any]:
        """Возвращает статистику одного контейнера."""

        return self._call_with_timeout(
            f"stats for {container_id}", containers.fetch_stats, self._client, container_id
        )

    def fetch_task_stats(self, task_containers: Iterable[ContainerRecord]) -> Dict[str, Any]:
        """Собирает статистику всех контейнеров задачи.

        Запросы выполняются параллельно и независимо, но ответ либо полный,
        либо никакого: ошибка любого контейнера отменяет весь результат.
        """

        records = list(task_containers)
        if not records:
            return {}

        with ThreadPoolExecutor(max_workers=len(records)) as executor:
            futures: Dict[str, Future[Dict[str, Any]]] = {
                record.id: executor.submit(self.fetch_container_stats, record.id)
                for record in records
            }
            result: Dict[str, Any] = {}
            for container_id, future in futures.items():
                try:
                    result[container_id] = future.result()
                except DockerAPIError as exc:
                    LOGGER.error("Task stats aborted, container %s failed: %s", container_id, exc)
                    for pending in futures.values():
                        pending.cancel()
                    raise
        return result
