from __future__ import annotations

import logging
import math
from typing import List, Optional

from .api import TadokuAPI
from .config import DEFAULT_PAGE_SIZE
from .datamodels import Story, StoryPage, ViewState
from .errors import NotFoundError, TadokuError

logger = logging.getLogger("tadoku")


class StoryCollection:
    """The paginated list of the user's stories.

    Local state only changes once the server has confirmed a mutation. A
    response that arrives after :meth:`close`, or after a newer :meth:`load`
    was started, is dropped.
    """

    def __init__(
        self,
        api: TadokuAPI,
        page_size: int = DEFAULT_PAGE_SIZE,
        refresh_after_delete: bool = True,
    ):
        self.api = api
        self.page_size = page_size
        self.refresh_after_delete = refresh_after_delete
        self.state = ViewState.LOADING
        self.current: Optional[StoryPage] = None
        self.error: Optional[TadokuError] = None
        self.pending_delete: Optional[int] = None
        self._load_seq = 0
        self._closed = False

    @property
    def stories(self) -> List[Story]:
        return list(self.current.items) if self.current else []

    @property
    def page(self) -> int:
        return self.current.page if self.current else 1

    @property
    def total_pages(self) -> int:
        return self.current.total_pages if self.current else 0

    def find(self, story_id: int) -> Optional[Story]:
        for story in self.stories:
            if story.id == story_id:
                return story
        return None

    def close(self) -> None:
        self._closed = True

    async def load(self, page: int = 1, page_size: Optional[int] = None) -> Optional[StoryPage]:
        """Fetch one page. On failure the previous page stays displayable."""
        if page_size is not None:
            self.page_size = page_size
        self._load_seq += 1
        seq = self._load_seq
        self.state = ViewState.LOADING

        try:
            result = await self.api.list_stories(max(1, page), self.page_size)
        except TadokuError as e:
            if self._is_stale(seq):
                logger.debug("Dropping late failure for page %d: %s", page, e)
                return self.current
            self.state = ViewState.FAILED
            self.error = e
            logger.warning("Failed to load page %d: %s", page, e)
            raise

        if self._is_stale(seq):
            logger.debug("Dropping late response for page %d", page)
            return self.current
        if result.out_of_range:
            # The list shrank under us; show the last page that exists.
            logger.debug("Page %d past last page %d, reloading", result.page, result.total_pages)
            return await self.load(max(result.total_pages, 1))
        self.current = result
        self.state = ViewState.LOADED
        self.error = None
        return result

    async def insert_generated(self, story: Story) -> Optional[StoryPage]:
        """Show a freshly generated story.

        On the first page it is prepended in place. Anywhere else page 1 is
        reloaded so the story lands in its server-assigned position.
        """
        if self.current is not None and self.current.page == 1:
            self.current.items.insert(0, story)
            # The oldest item on the page now belongs to page 2.
            del self.current.items[self.page_size:]
            if self.current.total_count is not None:
                self.current.total_count += 1
                self.current.total_pages = math.ceil(self.current.total_count / self.page_size)
            elif self.current.total_pages == 0:
                self.current.total_pages = 1
            return self.current
        return await self.load(1)

    def request_delete(self, story_id: int) -> None:
        """Record intent to delete; the list is untouched until confirmed."""
        if self.find(story_id) is None:
            raise NotFoundError(404, f"Story {story_id} is not on this page.")
        self.pending_delete = story_id

    def cancel_delete(self) -> None:
        self.pending_delete = None

    async def confirm_delete(self) -> bool:
        """Delete the story chosen with :meth:`request_delete`.

        Returns False when there was nothing to confirm. The item is removed
        only after the server acknowledges the deletion.
        """
        story_id = self.pending_delete
        if story_id is None:
            return False

        # Intent survives a failure so the caller can simply confirm again.
        await self.api.delete_story(story_id)
        self.pending_delete = None
        logger.info("Deleted story %d", story_id)

        if self._closed or self.current is None:
            return True
        self.current.items = [s for s in self.current.items if s.id != story_id]
        if self.current.total_count:
            self.current.total_count -= 1

        if self.refresh_after_delete:
            await self._refresh_page_metadata()
        return True

    async def _refresh_page_metadata(self) -> None:
        # total_pages may have shrunk; step back if this page disappeared.
        try:
            await self.load(self.page)
        except TadokuError as e:
            logger.warning("Could not refresh page after delete: %s", e)

    def _is_stale(self, seq: int) -> bool:
        return self._closed or seq != self._load_seq
