"""JSON response envelope shared by every controller.

Success: ``{"message": ..., "data": ...}``
Error:   ``{"message": ..., "code": ...}``
"""

from __future__ import annotations

import logging
from typing import Any

from flask import Flask, jsonify, session
from werkzeug.exceptions import HTTPException

from .exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DependencyError,
    DomainError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class ErrorCodes:
    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


STATUS_BY_CODE = {
    ErrorCodes.BAD_REQUEST: 400,
    ErrorCodes.UNAUTHORIZED: 401,
    ErrorCodes.FORBIDDEN: 403,
    ErrorCodes.NOT_FOUND: 404,
    ErrorCodes.INTERNAL_SERVER_ERROR: 500,
}

# Order matters: subclasses before their bases.
_CODE_BY_EXCEPTION: tuple[tuple[type[DomainError], str], ...] = (
    (ValidationError, ErrorCodes.BAD_REQUEST),
    # Duplicate check-in is reported as 400 for client compatibility.
    (ConflictError, ErrorCodes.BAD_REQUEST),
    (AuthenticationError, ErrorCodes.UNAUTHORIZED),
    (AuthorizationError, ErrorCodes.FORBIDDEN),
    (NotFoundError, ErrorCodes.NOT_FOUND),
    (DependencyError, ErrorCodes.INTERNAL_SERVER_ERROR),
)


def code_for(exc: DomainError) -> str:
    for exc_type, code in _CODE_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return code
    return ErrorCodes.INTERNAL_SERVER_ERROR


def success_response(message: str, data: Any = None, *, status: int = 200):
    return jsonify({"message": message, "data": data}), status


def error_response(message: str, code: str):
    return jsonify({"message": message, "code": code}), STATUS_BY_CODE.get(code, 500)


def _request_context() -> str:
    return f"user={session.get('user_id')} org={session.get('active_organization_id')}"


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        code = code_for(exc)
        if code == ErrorCodes.INTERNAL_SERVER_ERROR:
            # Collaborator details stay in the log, never in the response.
            logger.error("Dependency failure (%s): %s", _request_context(), exc)
            return error_response("Internal server error", code)
        return error_response(str(exc), code)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        code = {
            401: ErrorCodes.UNAUTHORIZED,
            403: ErrorCodes.FORBIDDEN,
            404: ErrorCodes.NOT_FOUND,
        }.get(exc.code or 500, ErrorCodes.BAD_REQUEST if (exc.code or 500) < 500 else ErrorCodes.INTERNAL_SERVER_ERROR)
        return jsonify({"message": exc.description, "code": code}), exc.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled error (%s)", _request_context())
        return error_response("Internal server error", ErrorCodes.INTERNAL_SERVER_ERROR)
