from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .api import TadokuAPI
from .auth import AuthService
from .config import DEFAULTS, STORAGE_DIR
from .datamodels import UserStats
from .detail import StoryDetailView
from .gateway import RequestGateway
from .generator import StoryGenerator
from .quota import GenerationQuotaTracker
from .session import Session
from .stories import StoryCollection
from .storage import Storage

logger = logging.getLogger("tadoku")


class TadokuClient:
    """Wires the session, gateway and views together from a config dict."""

    def __init__(
        self,
        config: Dict[str, Any],
        storage_dir: str = STORAGE_DIR,
        http: Optional[requests.Session] = None,
    ):
        self.config = config
        self.session = Session(Storage(storage_dir))
        self.session.restore()
        self.gateway = RequestGateway(
            self.session,
            base_url=config.get("api_base_url", DEFAULTS["api_base_url"]),
            timeout=config.get("timeout", DEFAULTS["timeout"]),
            http=http,
        )
        self.api = TadokuAPI(self.gateway)
        self.auth = AuthService(self.api, self.session)
        self.quota = GenerationQuotaTracker(self.api)
        self.stories = StoryCollection(
            self.api,
            page_size=config.get("page_size", DEFAULTS["page_size"]),
            refresh_after_delete=config.get("refresh_after_delete", DEFAULTS["refresh_after_delete"]),
        )
        self.generator = StoryGenerator(self.api, self.quota, self.stories)

    def story(self, story_id: int) -> StoryDetailView:
        return StoryDetailView(self.api, story_id)

    async def stats(self) -> UserStats:
        return await self.api.user_stats()
