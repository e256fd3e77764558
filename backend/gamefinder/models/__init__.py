from gamefinder.models.chat_message import ChatMessageRow
from gamefinder.models.chat_session import ChatSessionRow
from gamefinder.models.game_recommendation import GameRecommendationRow

__all__ = [
    "ChatMessageRow",
    "ChatSessionRow",
    "GameRecommendationRow",
]
