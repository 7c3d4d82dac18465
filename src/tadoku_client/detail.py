from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from .api import TadokuAPI
from .datamodels import StoryDetail, ViewState
from .errors import TadokuError, ValidationError

logger = logging.getLogger("tadoku")


class SubmitState(Enum):
    IDLE = "idle"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    SUBMITTING = "submitting"


class ReadAction(Enum):
    MARK_READ = "mark_read"
    UNDO_READ = "undo_read"


class StoryDetailView:
    """One story's title and read counter, kept in step with the server.

    Read events go through ``IDLE -> AWAITING_CONFIRMATION -> SUBMITTING ->
    IDLE``. Only the first read of a story skips the confirmation step. While
    the view is not idle, further read/undo requests are ignored.
    """

    def __init__(self, api: TadokuAPI, story_id: int):
        self.api = api
        self.story_id = story_id
        self.status = ViewState.LOADING
        self.submit_state = SubmitState.IDLE
        self.pending_action: Optional[ReadAction] = None
        self.detail: Optional[StoryDetail] = None
        self.error: Optional[TadokuError] = None
        self._closed = False

    @property
    def read_count(self) -> int:
        return self.detail.read_count if self.detail else 0

    @property
    def awaiting_confirmation(self) -> bool:
        return self.submit_state is SubmitState.AWAITING_CONFIRMATION

    def close(self) -> None:
        self._closed = True

    async def load(self) -> Optional[StoryDetail]:
        self.status = ViewState.LOADING
        try:
            detail = await self.api.get_story(self.story_id)
        except TadokuError as e:
            if self._closed:
                return None
            self.status = ViewState.FAILED
            self.error = e
            raise
        if self._closed:
            return None
        self.detail = detail
        self.status = ViewState.LOADED
        self.error = None
        return detail

    async def edit_title(self, new_title: str) -> Optional[StoryDetail]:
        if not new_title or not new_title.strip():
            raise ValidationError("Title cannot be empty.")
        self._require_loaded()

        updated = await self.api.update_title(self.story_id, new_title.strip())
        if self._closed or self.detail is None:
            return None
        # Keep the server's spelling of the title, not ours.
        self.detail = self.detail.with_title(updated.title)
        return self.detail

    async def mark_as_read(self) -> bool:
        """Record a read. Returns True if the call went out.

        A repeat read only moves the view to awaiting confirmation.
        """
        if not self._begin(ReadAction.MARK_READ):
            return False
        if self.read_count == 0:
            return await self._submit(ReadAction.MARK_READ)
        self._await_confirmation(ReadAction.MARK_READ)
        return False

    async def undo_last_read(self) -> bool:
        """Always waits for :meth:`confirm`; returns False."""
        if not self._begin(ReadAction.UNDO_READ):
            return False
        self._await_confirmation(ReadAction.UNDO_READ)
        return False

    async def confirm(self) -> bool:
        if self.submit_state is not SubmitState.AWAITING_CONFIRMATION or self.pending_action is None:
            return False
        return await self._submit(self.pending_action)

    def cancel(self) -> None:
        if self.submit_state is SubmitState.AWAITING_CONFIRMATION:
            self.submit_state = SubmitState.IDLE
            self.pending_action = None

    def _begin(self, action: ReadAction) -> bool:
        if self.submit_state is not SubmitState.IDLE:
            logger.debug("Ignoring %s on story %d: %s", action.value, self.story_id, self.submit_state.value)
            return False
        self._require_loaded()
        return True

    def _await_confirmation(self, action: ReadAction) -> None:
        self.pending_action = action
        self.submit_state = SubmitState.AWAITING_CONFIRMATION

    async def _submit(self, action: ReadAction) -> bool:
        self.submit_state = SubmitState.SUBMITTING
        self.pending_action = None
        try:
            if action is ReadAction.MARK_READ:
                await self.api.mark_as_read(self.story_id)
            else:
                await self.api.undo_last_read(self.story_id)
        finally:
            self.submit_state = SubmitState.IDLE

        if self._closed or self.detail is None:
            return True
        if action is ReadAction.MARK_READ:
            self.detail.read_count += 1
        else:
            self.detail.read_count = max(0, self.detail.read_count - 1)
        logger.debug("Story %d read_count=%d", self.story_id, self.detail.read_count)
        return True

    def _require_loaded(self) -> None:
        if self.detail is None:
            raise ValidationError("Story is not loaded yet.")
