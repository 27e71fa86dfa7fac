from __future__ import annotations

import logging
from typing import Any, Dict

from flask import Flask, jsonify, request, session

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BackendError,
    PrivilegedFunctionError,
    SessionExpiredError,
    ValidationError,
)

logger = logging.getLogger(__name__)

LOGIN_PAGE = "/login"


def ok(message: str = "", status: int = 200, **payload: Any):
    body: Dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    body.update(payload)
    return jsonify(body), status


def fail(message: str, status: int, **extra: Any):
    body: Dict[str, Any] = {"success": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def json_body() -> Dict[str, Any]:
    """Request payload from JSON, falling back to form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def register_error_handlers(app: Flask) -> None:
    """Map domain errors to JSON responses; nothing is retried."""

    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return fail(str(e), 400)

    @app.errorhandler(AuthenticationError)
    def _authentication(e: AuthenticationError):
        if isinstance(e, SessionExpiredError):
            session.clear()
        return fail(str(e) or "Please sign in to continue", 401, redirect=LOGIN_PAGE)

    @app.errorhandler(AuthorizationError)
    def _authorization(e: AuthorizationError):
        extra = {"redirect": e.redirect_to} if e.redirect_to else {}
        return fail(str(e), 403, **extra)

    @app.errorhandler(BackendError)
    def _backend(e: BackendError):
        return fail(str(e), 502)

    @app.errorhandler(PrivilegedFunctionError)
    def _function(e: PrivilegedFunctionError):
        return fail(str(e), 502)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        # Let Flask render its own HTTP errors (404, 405, ...).
        code = getattr(e, "code", None)
        if isinstance(code, int) and 400 <= code < 600 and hasattr(e, "get_response"):
            return fail(getattr(e, "description", None) or str(e), code)
        logger.exception("unhandled error on %s %s", request.method, request.path)
        if app.config.get("DEBUG"):
            return fail(f"Internal error: {e}", 500)
        return fail("Internal error", 500)
