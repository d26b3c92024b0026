"""Преобразование данных Docker в формат ответов ECS."""
