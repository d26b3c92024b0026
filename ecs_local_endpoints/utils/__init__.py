"""Общие утилиты."""
