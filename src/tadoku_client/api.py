from __future__ import annotations

from typing import Any, Dict

from .config import DEFAULT_PAGE_SIZE
from .datamodels import GenerationStatus, Story, StoryDetail, StoryPage, UserStats
from .gateway import RequestGateway


class TadokuAPI:
    """Typed wrappers around the ``/api/v1`` endpoints."""

    def __init__(self, gateway: RequestGateway):
        self.gateway = gateway

    # --- Auth ---
    async def signup(self, email: str, password: str) -> Dict[str, Any]:
        body = await self.gateway.request(
            "POST",
            "/signup",
            json={"email": email, "password": password},
            authenticated=False,
        )
        return body or {}

    async def login(self, email: str, password: str) -> str:
        body = await self.gateway.request(
            "POST",
            "/login",
            json={"email": email, "password": password},
            authenticated=False,
        )
        return (body or {}).get("token", "")

    # --- Stories ---
    async def list_stories(self, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> StoryPage:
        body = await self.gateway.request(
            "GET", "/stories", params={"page": page, "limit": limit}
        )
        return StoryPage.from_dict(body or {}, page=page)

    async def get_story(self, story_id: int) -> StoryDetail:
        body = await self.gateway.request("GET", f"/stories/{story_id}")
        return StoryDetail.from_dict(body)

    async def generate_story(self, prompt: str) -> Story:
        body = await self.gateway.request("POST", "/stories", json={"prompt": prompt})
        return Story.from_dict(body)

    async def update_title(self, story_id: int, title: str) -> StoryDetail:
        body = await self.gateway.request(
            "PATCH", f"/stories/{story_id}", json={"title": title}
        )
        return StoryDetail.from_dict(body)

    async def delete_story(self, story_id: int) -> None:
        await self.gateway.request("DELETE", f"/stories/{story_id}")

    async def mark_as_read(self, story_id: int) -> None:
        await self.gateway.request("POST", f"/stories/{story_id}/read")

    async def undo_last_read(self, story_id: int) -> None:
        await self.gateway.request("DELETE", f"/stories/{story_id}/read/latest")

    # --- User ---
    async def generation_status(self) -> GenerationStatus:
        body = await self.gateway.request("GET", "/users/me/generation-status")
        return GenerationStatus.from_dict(body or {})

    async def user_stats(self) -> UserStats:
        body = await self.gateway.request("GET", "/users/me/stats")
        return UserStats.from_dict(body or {})
