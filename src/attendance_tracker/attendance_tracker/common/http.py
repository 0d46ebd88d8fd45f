from __future__ import annotations

import logging
from typing import Any, Dict

from flask import Flask, jsonify, request

from ..core.exceptions import AmbiguousSession, SessionNotFound, StorageUnavailable, ValidationError

logger = logging.getLogger(__name__)


def json_body() -> Dict[str, Any]:
    """Request body as a dict; a missing or non-object body is a ValidationError."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def body_attributes(data: Dict[str, Any]) -> Dict[str, Any]:
    attributes = data.get("attributes")
    if attributes is None:
        return {}
    if not isinstance(attributes, dict):
        raise ValidationError("attributes must be a JSON object")
    return dict(attributes)


def parse_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"yes", "true", "1"}:
        return True
    if isinstance(value, str) and value.strip().lower() in {"no", "false", "0"}:
        return False
    raise ValidationError(f"{field_name} must be yes/no")


def _error(status: int, code: str, message: str, **extra: Any):
    payload = {"error": code, "message": message}
    payload.update(extra)
    return jsonify(payload), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return _error(400, "validation_error", str(e))

    @app.errorhandler(SessionNotFound)
    def _not_found(e: SessionNotFound):
        return _error(404, "session_not_found", str(e), identifier=e.identifier, available=e.available)

    @app.errorhandler(AmbiguousSession)
    def _ambiguous(e: AmbiguousSession):
        codes = [getattr(c, "code", str(c)) for c in e.candidates]
        return _error(409, "ambiguous_session", str(e), identifier=e.identifier, candidates=codes)

    @app.errorhandler(StorageUnavailable)
    def _storage(e: StorageUnavailable):
        logger.warning("storage unavailable on %s %s: %s", request.method, request.path, e)
        return _error(503, "storage_unavailable", str(e), retryable=True)
