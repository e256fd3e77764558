"""Protocol for chat stores. Memory and SQL backends honour the same contract."""
from collections.abc import Sequence
from typing import Protocol

from gamefinder.store.types import (
    ChatMessage,
    ChatSession,
    GameRecommendation,
    MessageMetadata,
    RecommendationData,
)


class ChatStore(Protocol):
    """
    CRUD plus ordered list queries for sessions, messages and recommendations.
    Lookups of a missing id return None and deletes of a missing id return False; neither raises.
    Writes that reference a missing owner raise StoreError.
    """

    # Sessions

    def get_session(self, session_id: str) -> ChatSession | None:
        ...

    def list_sessions(self) -> list[ChatSession]:
        """All sessions, most recently updated first."""
        ...

    def create_session(self, title: str) -> ChatSession:
        ...

    def update_session(self, session_id: str, *, title: str | None = None) -> ChatSession | None:
        """Merge the given fields and refresh updated_at (even when no field is given)."""
        ...

    def delete_session(self, session_id: str) -> bool:
        """Remove the session with its messages and their recommendations."""
        ...

    def delete_all_sessions(self) -> int:
        ...

    # Messages

    def get_message(self, message_id: str) -> ChatMessage | None:
        ...

    def list_messages(self, session_id: str) -> list[ChatMessage]:
        """Messages of one session, oldest first."""
        ...

    def create_message(
        self,
        session_id: str,
        role: str,
        content: str,
        metadata: MessageMetadata | None = None,
    ) -> ChatMessage:
        ...

    def delete_message(self, message_id: str) -> bool:
        ...

    # Recommendations

    def list_recommendations(self, message_id: str) -> list[GameRecommendation]:
        """Recommendations of one message, oldest first."""
        ...

    def create_recommendation(self, message_id: str, data: RecommendationData) -> GameRecommendation:
        ...

    def create_recommendations(
        self, message_id: str, items: Sequence[RecommendationData]
    ) -> list[GameRecommendation]:
        """All-or-nothing batch; returned in the order given."""
        ...
