from __future__ import annotations

import logging
from typing import Optional

from .api import TadokuAPI
from .datamodels import GenerationStatus

logger = logging.getLogger("tadoku")


class GenerationQuotaTracker:
    """Client-side mirror of the server's daily generation limit.

    The snapshot is advisory; the server still enforces the limit and may
    answer 429 even when this tracker thinks there is room.
    """

    def __init__(self, api: TadokuAPI):
        self.api = api
        self.status: Optional[GenerationStatus] = None

    async def refresh(self) -> GenerationStatus:
        status = await self.api.generation_status()
        self.status = status
        logger.debug("Generation status %d/%d", status.current_count, status.limit)
        return status

    def can_generate(self) -> bool:
        # No snapshot yet: let the server decide.
        if self.status is None:
            return True
        return self.status.can_generate

    def record_generation_success(self) -> None:
        if self.status is not None:
            self.status.current_count += 1

    def mark_exhausted(self) -> None:
        if self.status is not None:
            self.status.current_count = max(self.status.current_count, self.status.limit)
