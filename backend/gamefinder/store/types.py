"""Record types shared by every store backend. Same shape regardless of memory/SQL.

Python attributes are snake_case; JSON (API responses) uses camelCase aliases.
"""
import threading
from datetime import datetime, timedelta, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Role = Literal["user", "assistant"]


class Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ChatSession(Record):
    id: str
    title: str
    created_at: datetime
    updated_at: datetime


class MessageMetadata(Record):
    """Stored on assistant messages only."""

    follow_up_questions: list[str] = Field(default_factory=list)
    suggestions_count: int = 0


class ChatMessage(Record):
    id: str
    session_id: str
    role: Role
    content: str
    metadata: MessageMetadata | None = None
    created_at: datetime


class RecommendationData(Record):
    """Fields of a recommendation before the store assigns id and created_at."""

    title: str
    description: str
    platform: str
    genre: str
    rating: str | None = None
    price: str | None = None
    image_url: str = ""


class GameRecommendation(RecommendationData):
    id: str
    message_id: str
    created_at: datetime


class UtcClock:
    """Strictly increasing UTC timestamps, so creation order survives equal wall-clock reads."""

    def __init__(self) -> None:
        self._last: datetime | None = None
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            now = datetime.now(timezone.utc)
            if self._last is not None and now <= self._last:
                now = self._last + timedelta(microseconds=1)
            self._last = now
            return now
