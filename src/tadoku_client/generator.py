from __future__ import annotations

import logging
from typing import Optional

from .api import TadokuAPI
from .datamodels import Story
from .errors import RateLimitError, TadokuError, ValidationError
from .quota import GenerationQuotaTracker
from .stories import StoryCollection

logger = logging.getLogger("tadoku")


class StoryGenerator:
    def __init__(
        self,
        api: TadokuAPI,
        quota: GenerationQuotaTracker,
        collection: Optional[StoryCollection] = None,
    ):
        self.api = api
        self.quota = quota
        self.collection = collection

    async def generate(self, prompt: str) -> Story:
        prompt = (prompt or "").strip()
        if not prompt:
            raise ValidationError("Please enter a prompt.")
        if not self.quota.can_generate():
            raise RateLimitError()

        try:
            story = await self.api.generate_story(prompt)
        except RateLimitError:
            self.quota.mark_exhausted()
            raise
        self.quota.record_generation_success()
        logger.info("Generated story %d", story.id)

        if self.collection is not None:
            try:
                await self.collection.insert_generated(story)
            except TadokuError as e:
                # The story exists server-side; only the list is out of date.
                logger.warning("Generated story %d but could not reload list: %s", story.id, e)
        return story
