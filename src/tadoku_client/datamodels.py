from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

# Go emits RFC 3339 with 0-9 fractional digits; datetime wants exactly six.
_FRACTION_PATTERN = re.compile(r"\.(\d+)")


def parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    text = _FRACTION_PATTERN.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), str(value))
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


# --- Data models ---
@dataclass
class Story:
    id: int
    title: str
    content: str = ""
    word_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user_id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Story":
        return cls(
            id=int(data["id"]),
            title=data.get("title", ""),
            content=data.get("content", ""),
            word_count=max(0, int(data.get("word_count") or 0)),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
            user_id=data.get("user_id"),
        )


@dataclass
class StoryDetail(Story):
    read_count: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoryDetail":
        story = Story.from_dict(data)
        return cls(
            id=story.id,
            title=story.title,
            content=story.content,
            word_count=story.word_count,
            created_at=story.created_at,
            updated_at=story.updated_at,
            user_id=story.user_id,
            read_count=max(0, int(data.get("read_count") or 0)),
        )

    def with_title(self, title: str) -> "StoryDetail":
        return replace(self, title=title)


@dataclass
class StoryPage:
    items: List[Story] = field(default_factory=list)
    page: int = 1
    total_pages: int = 0
    total_count: Optional[int] = None

    def __post_init__(self) -> None:
        self.page = max(1, self.page)

    @property
    def out_of_range(self) -> bool:
        """True when the server answered for a page past the last one."""
        return self.page > max(self.total_pages, 1)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], page: int) -> "StoryPage":
        stories = data.get("stories") or []
        return cls(
            items=[Story.from_dict(s) for s in stories],
            page=int(data.get("current_page") or page),
            total_pages=max(0, int(data.get("total_pages") or 0)),
            total_count=data.get("total_count"),
        )

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


@dataclass
class GenerationStatus:
    current_count: int = 0
    limit: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenerationStatus":
        return cls(
            current_count=max(0, int(data.get("current_count") or 0)),
            limit=max(0, int(data.get("limit") or 0)),
        )

    @property
    def can_generate(self) -> bool:
        return self.current_count < self.limit

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.current_count)


@dataclass
class UserStats:
    total_word_count: int = 0
    today_word_count: int = 0
    weekly_word_count: int = 0
    monthly_word_count: int = 0
    yearly_word_count: int = 0
    last_7_days_word_count: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserStats":
        return cls(
            total_word_count=int(data.get("total_word_count") or 0),
            today_word_count=int(data.get("today_word_count") or 0),
            weekly_word_count=int(data.get("weekly_word_count") or 0),
            monthly_word_count=int(data.get("monthly_word_count") or 0),
            yearly_word_count=int(data.get("yearly_word_count") or 0),
            last_7_days_word_count={
                day: int(count)
                for day, count in (data.get("last_7_days_word_count") or {}).items()
            },
        )


class ViewState(Enum):
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"
