"""
In-memory chat store: plain dicts keyed by id, kept for the process lifetime.
Dicts preserve insertion order, which the stable sorts below rely on for equal timestamps.
"""
import uuid
from collections.abc import Sequence

from gamefinder.core.constants import ROLE_ASSISTANT, ROLES
from gamefinder.core.errors import StoreError
from gamefinder.store.types import (
    ChatMessage,
    ChatSession,
    GameRecommendation,
    MessageMetadata,
    RecommendationData,
    UtcClock,
)


def _new_id() -> str:
    return str(uuid.uuid4())


class MemoryStore:
    def __init__(self, clock: UtcClock | None = None) -> None:
        self._clock = clock or UtcClock()
        self._sessions: dict[str, ChatSession] = {}
        self._messages: dict[str, ChatMessage] = {}
        self._recommendations: dict[str, GameRecommendation] = {}

    # Sessions

    def get_session(self, session_id: str) -> ChatSession | None:
        return self._sessions.get(session_id)

    def list_sessions(self) -> list[ChatSession]:
        return sorted(self._sessions.values(), key=lambda s: s.updated_at, reverse=True)

    def create_session(self, title: str) -> ChatSession:
        now = self._clock.now()
        session = ChatSession(id=_new_id(), title=title, created_at=now, updated_at=now)
        self._sessions[session.id] = session
        return session

    def update_session(self, session_id: str, *, title: str | None = None) -> ChatSession | None:
        session = self._sessions.get(session_id)
        if session is None:
            return None
        changes: dict = {"updated_at": self._clock.now()}
        if title is not None:
            changes["title"] = title
        updated = session.model_copy(update=changes)
        self._sessions[session_id] = updated
        return updated

    def delete_session(self, session_id: str) -> bool:
        if self._sessions.pop(session_id, None) is None:
            return False
        for message_id in [m.id for m in self._messages.values() if m.session_id == session_id]:
            self.delete_message(message_id)
        return True

    def delete_all_sessions(self) -> int:
        count = len(self._sessions)
        self._sessions.clear()
        self._messages.clear()
        self._recommendations.clear()
        return count

    # Messages

    def get_message(self, message_id: str) -> ChatMessage | None:
        return self._messages.get(message_id)

    def list_messages(self, session_id: str) -> list[ChatMessage]:
        return sorted(
            (m for m in self._messages.values() if m.session_id == session_id),
            key=lambda m: m.created_at,
        )

    def create_message(
        self,
        session_id: str,
        role: str,
        content: str,
        metadata: MessageMetadata | None = None,
    ) -> ChatMessage:
        if session_id not in self._sessions:
            raise StoreError(f"Cannot add message: session {session_id} does not exist")
        if role not in ROLES:
            raise StoreError(f"Invalid message role: {role!r}")
        message = ChatMessage(
            id=_new_id(),
            session_id=session_id,
            role=role,
            content=content,
            metadata=metadata,
            created_at=self._clock.now(),
        )
        self._messages[message.id] = message
        return message

    def delete_message(self, message_id: str) -> bool:
        if self._messages.pop(message_id, None) is None:
            return False
        for rec_id in [r.id for r in self._recommendations.values() if r.message_id == message_id]:
            del self._recommendations[rec_id]
        return True

    # Recommendations

    def list_recommendations(self, message_id: str) -> list[GameRecommendation]:
        return sorted(
            (r for r in self._recommendations.values() if r.message_id == message_id),
            key=lambda r: r.created_at,
        )

    def _check_owner(self, message_id: str) -> None:
        owner = self._messages.get(message_id)
        if owner is None:
            raise StoreError(f"Cannot add recommendation: message {message_id} does not exist")
        if owner.role != ROLE_ASSISTANT:
            raise StoreError(f"Cannot add recommendation: message {message_id} is not an assistant message")

    def _build_recommendation(self, message_id: str, data: RecommendationData) -> GameRecommendation:
        return GameRecommendation(
            **data.model_dump(),
            id=_new_id(),
            message_id=message_id,
            created_at=self._clock.now(),
        )

    def create_recommendation(self, message_id: str, data: RecommendationData) -> GameRecommendation:
        self._check_owner(message_id)
        rec = self._build_recommendation(message_id, data)
        self._recommendations[rec.id] = rec
        return rec

    def create_recommendations(
        self, message_id: str, items: Sequence[RecommendationData]
    ) -> list[GameRecommendation]:
        self._check_owner(message_id)
        # Build everything first so a bad item leaves nothing behind.
        try:
            recs = [self._build_recommendation(message_id, item) for item in items]
        except (TypeError, ValueError) as e:
            raise StoreError(f"Cannot add recommendations: {e}") from e
        for rec in recs:
            self._recommendations[rec.id] = rec
        return recs
