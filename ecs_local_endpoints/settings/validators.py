"""Проверки значений конфигурации.

Проверка - вызываемый объект: возвращает текст ошибки или пустую строку,
если значение подходит.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any, Iterable, Tuple


class Validator(ABC):
    """Проверка одного значения настройки."""

    @abstractmethod
    def __call__(self, value: Any) -> str:
        """Возвращает описание ошибки или ""."""


class OfType(Validator):
    def __init__(self, *types: type) -> None:
        self.types: Tuple[type, ...] = types

    def _names(self) -> str:
        return " or ".join(item.__name__ for item in self.types)

    def __call__(self, value: Any) -> str:
        # bool - подкласс int, но порт True принимать нельзя
        if isinstance(value, bool) and bool not in self.types:
            return f"expected {self._names()}, got bool"
        if isinstance(value, self.types):
            return ""
        return f"expected {self._names()}, got {type(value).__name__}"


class InRange(Validator):
    """Числовое значение в границах [low, high]."""

    def __init__(self, low: float, high: float) -> None:
        self.low = low
        self.high = high

    def __call__(self, value: Any) -> str:
        if self.low <= value <= self.high:
            return ""
        return f"{value} is out of range [{self.low}, {self.high}]"


class OneOf(Validator):
    def __init__(self, choices: Iterable[Any]) -> None:
        self.choices = tuple(choices)

    def __call__(self, value: Any) -> str:
        if value in self.choices:
            return ""
        return f"{value!r} is not one of {', '.join(map(str, self.choices))}"


class Matches(Validator):
    """Строка целиком совпадает с регулярным выражением.

    ``hint`` дополняет сообщение об ошибке: "'latest' is not a number".
    """

    def __init__(self, pattern: str, hint: str) -> None:
        self.pattern = re.compile(pattern)
        self.hint = hint

    def __call__(self, value: Any) -> str:
        if not isinstance(value, str):
            return f"expected str, got {type(value).__name__}"
        if self.pattern.fullmatch(value):
            return ""
        return f"{value!r} {self.hint}"


class TagMapping(Validator):
    """Теги ресурса: непустые строковые ключи со строковыми значениями."""

    def __call__(self, value: Any) -> str:
        if not isinstance(value, dict):
            return f"expected mapping of tags, got {type(value).__name__}"
        for key, item in value.items():
            if not isinstance(key, str) or not key:
                return f"tag key {key!r} must be a non-empty string"
            if not isinstance(item, str):
                return f"tag '{key}' must have a string value"
        return ""


class AllOf(Validator):
    """Применяет проверки по порядку и возвращает первую ошибку."""

    def __init__(self, *validators: Validator) -> None:
        self.validators = validators

    def __call__(self, value: Any) -> str:
        for validator in self.validators:
            error = validator(value)
            if error:
                return error
        return ""
