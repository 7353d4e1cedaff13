"""JSON envelope and bearer-auth helpers shared by the controllers."""
from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, Optional

from flask import g, jsonify, request

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from ..users.model import CurrentUser
from ..users.service import AuthService

logger = logging.getLogger(__name__)


def json_ok(data: Any, status: int = 200):
    return jsonify({"success": True, "data": data}), status


def json_error(message: str, status: int):
    return jsonify({"success": False, "error": message}), status


def status_for(error: DomainError) -> int:
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, AuthenticationError):
        return 401
    if isinstance(error, AuthorizationError):
        return 403
    if isinstance(error, NotFoundError):
        return 404
    return 400


def domain_error_response(error: DomainError):
    return json_error(str(error), status_for(error))


def bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip() or None
    return None


def bearer_required(auth: AuthService) -> Callable:
    """Decorator factory: resolve the caller into ``g.current_user`` or answer 401."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                g.current_user = auth.resolve(bearer_token())
            except AuthenticationError as e:
                return json_error(str(e), 401)
            except Exception:
                logger.exception("Error resolving bearer token")
                return json_error("Authentication failed", 500)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_user() -> CurrentUser:
    return g.current_user
