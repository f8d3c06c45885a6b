from __future__ import annotations

from flask import jsonify

from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError, NotFoundError


def status_for(error: DomainError) -> int:
    if isinstance(error, AuthenticationError):
        return 401
    if isinstance(error, AuthorizationError):
        return 403
    if isinstance(error, NotFoundError):
        return 404
    return 400


def json_error(error: DomainError):
    return jsonify({"success": False, "message": str(error)}), status_for(error)


def json_failure(message: str, status: int = 500):
    return jsonify({"success": False, "message": message}), status
