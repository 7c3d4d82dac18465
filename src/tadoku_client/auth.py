from __future__ import annotations

import logging
from typing import Any, Dict

from .api import TadokuAPI
from .errors import TadokuError, ValidationError
from .session import Session

logger = logging.getLogger("tadoku")


def _validate_credentials(email: str, password: str) -> None:
    if not email or not email.strip():
        raise ValidationError("Email is required.")
    if "@" not in email:
        raise ValidationError("Email must be a valid email address.")
    if not password:
        raise ValidationError("Password is required.")


class AuthService:
    def __init__(self, api: TadokuAPI, session: Session):
        self.api = api
        self.session = session

    async def signup(self, email: str, password: str) -> Dict[str, Any]:
        _validate_credentials(email, password)
        user = await self.api.signup(email.strip(), password)
        logger.info("Signed up %s", email.strip())
        return user

    async def login(self, email: str, password: str) -> str:
        _validate_credentials(email, password)
        token = await self.api.login(email.strip(), password)
        if not token:
            raise TadokuError("Login response did not include a token.")
        self.session.login(token)
        return token

    def logout(self) -> None:
        self.session.logout()
