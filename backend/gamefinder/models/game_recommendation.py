"""A single game suggestion attached to an assistant message."""
from sqlalchemy import Column, DateTime, ForeignKey, String, Text

from gamefinder.db.base import Base


class GameRecommendationRow(Base):
    __tablename__ = "game_recommendations"

    id = Column(String(36), primary_key=True)
    message_id = Column(String(36), ForeignKey("chat_messages.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    platform = Column(Text, nullable=False)
    genre = Column(Text, nullable=False)
    rating = Column(Text, nullable=True)
    price = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
