"""Исключения слоя доступа к Docker."""

from __future__ import annotations


class DockerAPIError(Exception):
    """Ошибка обращения к Docker Engine (недоступен, таймаут, сбой API)."""
