from __future__ import annotations

import logging

from flask import Flask, current_app, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..access.session import Session, refresh_session
from ..core.exceptions import DomainError, StorageError, ValidationError

logger = logging.getLogger(__name__)


def current_session() -> Session:
    """Rebuild the explicit Session from the signed cookie, checked against the account store."""
    container = current_app.extensions["smart_attendance"]
    return refresh_session(Session.from_mapping(session), container.accounts_repo)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def error_payload(kind: str, message: str) -> dict:
    return {"error": kind, "message": message}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        if isinstance(exc, StorageError):
            # Driver detail was logged where it happened; clients only get the kind.
            logger.warning("%s %s -> storage %s", request.method, request.path, exc.kind)
        return jsonify(error_payload(exc.kind, exc.message)), exc.http_status

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        if exc.code == 404:
            return jsonify(error_payload("not_found", "Route not found")), 404
        return jsonify(error_payload(exc.name.lower().replace(" ", "_"), exc.description or exc.name)), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify(error_payload("internal_error", "Internal server error")), 500


def register_request_logging(app: Flask) -> None:
    @app.after_request
    def log_request(response):
        logger.info("%s %s -> %s", request.method, request.path, response.status_code)
        return response
