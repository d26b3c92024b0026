"""Исключения подсистемы определения контейнеров."""

from __future__ import annotations


class ContainerNotFoundError(Exception):
    """Не удалось однозначно определить контейнер, сделавший запрос."""

    def __init__(self, remaining: int, *, identifier: str = "", caller_ip: str = "") -> None:
        self.remaining = remaining
        self.identifier = identifier
        self.caller_ip = caller_ip
        super().__init__(
            "Failed to find the container which the request came from. "
            f"Narrowed down search to {remaining} containers"
        )
