"""Общие HTTP-утилиты: ошибки со статус-кодом и JSON-ответы."""

from __future__ import annotations

import json
import logging
from typing import Any

from flask import Flask, Response
from werkzeug.exceptions import HTTPException

LOGGER = logging.getLogger(__name__)


class HTTPError(Exception):
    """Ошибка, которую нужно вернуть клиенту с конкретным статус-кодом."""

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(message)


def text_response(body: str, status: int) -> Response:
    return Response(body + "\n", status=status, mimetype="text/plain")


def json_response(payload: Any) -> Response:
    """Ответ 200 с JSON-телом."""

    return Response(json.dumps(payload) + "\n", status=200, mimetype="application/json")


def register_error_handlers(app: Flask) -> None:
    """Подключает единый формат ошибок ко всем маршрутам приложения."""

    @app.errorhandler(HTTPError)
    def handle_http_error(error: HTTPError) -> Response:
        LOGGER.error("HTTP %d - %s", error.code, error.message)
        return text_response(error.message, error.code)

    @app.errorhandler(HTTPException)
    def handle_routing_error(error: HTTPException) -> Response:
        code = error.code or 500
        LOGGER.error("HTTP %d - %s", code, error.description)
        return text_response(f"{error.name}: {error.description}", code)

    @app.errorhandler(Exception)
    def handle_internal_error(error: Exception) -> Response:
        LOGGER.error("HTTP 500 - %s", error)
        return text_response(f"Internal Server Error: {error}", 500)
