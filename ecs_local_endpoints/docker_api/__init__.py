"""Доступ к Docker Engine: снимки контейнеров и статистика."""
