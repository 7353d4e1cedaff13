from __future__ import annotations

import logging

from flask import Flask, request

from ..common.api import bearer_required, current_user, json_error, json_ok
from ..core.exceptions import AuthenticationError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    auth_required = bearer_required(container.auth_service)

    @app.route("/api/auth/token", methods=["POST"], endpoint="issue_token")
    def issue_token():
        body = request.get_json(silent=True) or {}
        if not isinstance(body, dict):
            body = {}
        try:
            issued = container.auth_service.issue_token(str(body.get("email") or ""), str(body.get("password") or ""))
            return json_ok({"token": issued.token, "user": issued.user.to_dict()})
        except ValidationError as e:
            return json_error(str(e), 400)
        except AuthenticationError as e:
            return json_error(str(e), 401)
        except Exception:
            logger.exception("Error issuing token")
            return json_error("Failed to sign in", 500)

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @auth_required
    def auth_me():
        return json_ok(current_user().to_dict())
