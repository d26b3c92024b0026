"""Локальные эндпоинты метаданных и учётных данных Amazon ECS."""

__version__ = "1.4.0"
__app_name__ = "ecs-local-container-endpoints"
