"""Различные вспомогательные функции."""

from __future__ import annotations

import re
from typing import Dict

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_DURATION_UNITS = {"ms": 0.001, "s": 1, "m": 60, "h": 3600}


def truncate(value: str, length: int) -> str:
    """Обрезает строку до заданной длины."""

    return value[:length]


def parse_tags(raw_value: str) -> Dict[str, str]:
    """Разбирает теги вида key1=value1,key2=value2."""

    tags: Dict[str, str] = {}
    for pair in raw_value.split(","):
        parts = pair.split("=")
        if len(parts) != 2:
            raise ValueError(f"Tag input not formatted correctly: {pair}")
        tags[parts[0]] = parts[1]
    return tags


def parse_duration_seconds(raw_value: str) -> float:
    """Переводит длительность ("1h30m", "750s", "90") в секунды.

    Строка без единиц измерения трактуется как число секунд.
    """

    value = raw_value.strip()
    if not value:
        raise ValueError("empty duration")
    sign = -1 if value.startswith("-") else 1
    value = value.lstrip("+-")
    if value.isdigit():
        return sign * float(value)

    position = 0
    total = 0.0
    for match in _DURATION_PART.finditer(value):
        if match.start() != position:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()
    if position == 0 or position != len(value):
        raise ValueError(f"invalid duration: {raw_value}")
    return sign * total
