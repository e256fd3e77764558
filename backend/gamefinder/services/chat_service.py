"""
Chat service: sessions, threads and the send-message exchange.
Composes a ChatStore and a GameAdvisor; both are injected so routes and tests choose the backends.
"""
import asyncio
import logging
from typing import Any, Protocol

from gamefinder.agents.types import SuggestionResult
from gamefinder.core.constants import (
    DEFAULT_CONTEXT_WINDOW,
    FALLBACK_TITLE,
    ROLE_ASSISTANT,
    ROLE_USER,
)
from gamefinder.core.errors import (
    MSG_CONTENT_REQUIRED,
    MSG_SESSION_NOT_FOUND,
    MSG_TITLE_REQUIRED,
    NotFoundError,
    StoreError,
    ValidationError,
)
from gamefinder.services.schemas import AssistantReply, ThreadMessage
from gamefinder.store.base import ChatStore
from gamefinder.store.types import ChatSession, MessageMetadata, RecommendationData

logger = logging.getLogger(__name__)


class Advisor(Protocol):
    async def get_suggestions(self, user_text: str, history: list[dict[str, str]]) -> SuggestionResult:
        ...

    async def generate_title(self, first_message: str) -> str | None:
        ...


def _require_text(value: Any, message: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValidationError(message)
    return value


class ChatService:
    def __init__(self, store: ChatStore, advisor: Advisor, *, context_window: int = DEFAULT_CONTEXT_WINDOW):
        self.store = store
        self.advisor = advisor
        self.context_window = context_window
        # send_message runs one exchange at a time per session
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, session_id: str) -> asyncio.Lock:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = self._locks[session_id] = asyncio.Lock()
        return lock

    # Sessions

    def list_sessions(self) -> list[ChatSession]:
        return self.store.list_sessions()

    def get_session(self, session_id: str) -> ChatSession:
        session = self.store.get_session(session_id)
        if session is None:
            raise NotFoundError(MSG_SESSION_NOT_FOUND)
        return session

    def create_session(self, title: Any) -> ChatSession:
        return self.store.create_session(_require_text(title, MSG_TITLE_REQUIRED))

    def rename_session(self, session_id: str, title: Any) -> ChatSession:
        title = _require_text(title, MSG_TITLE_REQUIRED)
        session = self.store.update_session(session_id, title=title)
        if session is None:
            raise NotFoundError(MSG_SESSION_NOT_FOUND)
        return session

    def delete_session(self, session_id: str) -> bool:
        """True if deleted, False if there was no such session."""
        deleted = self.store.delete_session(session_id)
        self._locks.pop(session_id, None)
        return deleted

    def delete_all_sessions(self) -> int:
        count = self.store.delete_all_sessions()
        self._locks.clear()
        return count

    # Messages

    def list_thread(self, session_id: str) -> list[ThreadMessage]:
        """Messages oldest first; assistant messages carry their recommendations."""
        out = []
        for message in self.store.list_messages(session_id):
            fields = message.model_dump()
            if message.role == ROLE_ASSISTANT:
                fields["recommendations"] = self.store.list_recommendations(message.id)
            out.append(ThreadMessage.model_validate(fields))
        return out

    def _context(self, session_id: str) -> list[dict[str, str]]:
        recent = self.store.list_messages(session_id)[-self.context_window:]
        return [{"role": m.role, "content": m.content} for m in recent]

    async def send_message(self, session_id: str, content: Any) -> AssistantReply:
        """
        Store the user turn, ask the advisor, store the assistant turn with its recommendations.
        Validation and session lookup happen before any write. If the advisor fails, the user
        message stays and AIRequestError propagates.
        """
        content = _require_text(content, MSG_CONTENT_REQUIRED)
        if self.store.get_session(session_id) is None:
            raise NotFoundError(MSG_SESSION_NOT_FOUND)

        async with self._lock_for(session_id):
            # the session may have been deleted while this send waited for the lock
            if self.store.get_session(session_id) is None:
                raise NotFoundError(MSG_SESSION_NOT_FOUND)
            first_exchange = not self.store.list_messages(session_id)
            self.store.create_message(session_id, ROLE_USER, content)
            history = self._context(session_id)

            reply = await self.advisor.get_suggestions(content, history)

            assistant = self.store.create_message(
                session_id,
                ROLE_ASSISTANT,
                reply.summary,
                MessageMetadata(
                    follow_up_questions=reply.follow_up_questions,
                    suggestions_count=len(reply.suggestions),
                ),
            )
            try:
                recommendations = self.store.create_recommendations(
                    assistant.id,
                    [
                        RecommendationData(
                            title=s.title,
                            description=s.description,
                            platform=s.platform,
                            genre=s.genre,
                            rating=s.rating,
                            price=s.price,
                            image_url=s.image_url,
                        )
                        for s in reply.suggestions
                    ],
                )
            except StoreError:
                logger.exception("Saving recommendations failed; removing assistant message %s", assistant.id)
                self.store.delete_message(assistant.id)
                raise

            if first_exchange:
                title = await self.advisor.generate_title(content) or FALLBACK_TITLE
                self.store.update_session(session_id, title=title)
            else:
                self.store.update_session(session_id)

        return AssistantReply.model_validate(
            {
                **assistant.model_dump(),
                "recommendations": recommendations,
                "follow_up_questions": reply.follow_up_questions,
            }
        )
