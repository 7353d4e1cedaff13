from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from itsdangerous import BadSignature, URLSafeTimedSerializer
from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_TOKEN_MAX_AGE_SECONDS, MOCK_TOKEN, MOCK_USER_ID
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import CurrentUser, User
from .repository import UserRepository

logger = logging.getLogger(__name__)

_TOKEN_SALT = "edutrack-api-token"


@dataclass(frozen=True)
class IssuedToken:
    token: str
    user: CurrentUser


def _to_current_user(user: User) -> CurrentUser:
    return CurrentUser(
        user_id=user.user_id,
        email=user.email,
        role=user.role,
        center_id=user.center_id,
        center_name=user.center_name,
        display_name=user.display_name,
    )


MOCK_ADMIN = CurrentUser(
    user_id=MOCK_USER_ID,
    email="admin@edutrack.local",
    role=Role.ADMIN,
    center_id=None,
    center_name=None,
    display_name="Mock Admin",
)


class AuthService:
    """Use case: resolve bearer tokens into callers, and issue them on login."""

    def __init__(
        self,
        users: UserRepository,
        *,
        secret_key: str,
        max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS,
        allow_mock_token: bool = False,
    ):
        self._users = users
        self._serializer = URLSafeTimedSerializer(secret_key, salt=_TOKEN_SALT)
        self._max_age = int(max_age_seconds)
        self._allow_mock = bool(allow_mock_token)

    def issue_token(self, email: str, password: str) -> IssuedToken:
        email = require_non_empty(email, "Email")
        user = self._users.get_by_email(email)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        token = self._serializer.dumps({"sub": user.user_id})
        return IssuedToken(token=token, user=_to_current_user(user))

    def resolve(self, token: Optional[str]) -> CurrentUser:
        if not token:
            raise AuthenticationError("Missing authentication token")

        if token == MOCK_TOKEN and self._allow_mock:
            return MOCK_ADMIN

        try:
            payload = self._serializer.loads(token, max_age=self._max_age)
        except BadSignature:
            raise AuthenticationError("Invalid or expired token")

        user_id = payload.get("sub") if isinstance(payload, dict) else None
        if not user_id:
            raise AuthenticationError("Invalid token: missing user id")

        user = self._users.get_by_id(str(user_id))
        if not user or not user.is_active:
            logger.warning("token for unknown or inactive user %s", user_id)
            raise AuthenticationError("Invalid or expired token")
        return _to_current_user(user)
