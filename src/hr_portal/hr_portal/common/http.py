from __future__ import annotations

import logging
from typing import Any

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ConnectorError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from ..users.model import Principal

logger = logging.getLogger(__name__)

SESSION_KEY = "principal"

# AuthorizationError answers 401, the status existing clients expect from PATCH /hr-request.
_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 401),
    (NotFoundError, 404),
    (ConflictError, 409),
    (ConnectorError, 502),
)


def json_error(message: str, status: int):
    return jsonify({"error": message}), status


def json_ok(data: Any = None, *, message: str | None = None):
    payload: dict = {"success": True}
    if message:
        payload["message"] = message
    if data is not None:
        payload["data"] = data
    return jsonify(payload)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        if isinstance(exc, ConnectorError):
            logger.warning("Connector failure on %s %s: %s", request.method, request.path, exc)
            return json_error("External HR system request failed", 502)
        for cls, status in _STATUS_BY_ERROR:
            if isinstance(exc, cls):
                return json_error(str(exc), status)
        return json_error(str(exc), 400)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        if isinstance(exc, HTTPException):
            return json_error(exc.description or exc.name, exc.code or 500)
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return json_error("Internal server error", 500)


def current_principal() -> Principal:
    data = session.get(SESSION_KEY)
    if not data:
        raise AuthenticationError("Unauthorized")
    return Principal.from_session(data)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
