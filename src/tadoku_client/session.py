from __future__ import annotations

import logging
from typing import Optional

from .config import TOKEN_KEY
from .errors import ValidationError
from .storage import Storage

logger = logging.getLogger("tadoku")


class Session:
    """The client's single, process-wide view of its credential.

    Pure local state plus durable storage; never touches the network. The
    token is persisted under a fixed key so a later process can ``restore()``
    it.
    """

    def __init__(self, storage: Storage, key: str = TOKEN_KEY):
        self.storage = storage
        self.key = key
        self._token: Optional[str] = None

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def restore(self) -> bool:
        """Pick up a previously persisted token, if any."""
        token = self.storage.get(self.key)
        if isinstance(token, str) and token.strip():
            self._token = token
            logger.debug("Restored persisted session")
        else:
            self._token = None
        return self.is_authenticated

    def login(self, token: str) -> None:
        if not isinstance(token, str) or not token.strip():
            raise ValidationError("Token must be a non-empty string.")
        if not self.storage.set(self.key, token):
            # Still signed in for this process; only the reload is lost.
            logger.warning("Session token could not be persisted")
        self._token = token
        logger.info("Session authenticated")

    def logout(self) -> None:
        if not self.storage.remove(self.key):
            logger.warning("Persisted session token could not be removed")
        if self._token is not None:
            logger.info("Session cleared")
        self._token = None
