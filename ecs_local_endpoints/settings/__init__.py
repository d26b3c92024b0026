"""Конфигурация сервиса, загружаемая один раз при старте."""
