from __future__ import annotations

import logging

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.exceptions import AuthenticationError
from .model import Principal
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> Principal:
        email = require_non_empty(email, "Email").lower()
        password = require_non_empty(password, "Password")

        user = self._users.get_by_email(email)
        if not user or not user.is_active or not user.password_hash:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME'
            ok = False

        if not ok:
            logger.info("Rejected login for %s", email)
            raise AuthenticationError("Invalid email or password")

        return Principal.from_user(user)
