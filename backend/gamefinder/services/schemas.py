"""Composite shapes returned by the chat service (message + its recommendations)."""
from gamefinder.store.types import ChatMessage, GameRecommendation


class ThreadMessage(ChatMessage):
    # Only set on assistant messages; user messages leave it unset so the API omits it.
    recommendations: list[GameRecommendation] | None = None


class AssistantReply(ChatMessage):
    recommendations: list[GameRecommendation]
    follow_up_questions: list[str]
