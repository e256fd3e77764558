"""One turn of a chat session, authored by the user or the assistant."""
from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text

from gamefinder.db.base import Base


class ChatMessageRow(Base):
    __tablename__ = "chat_messages"

    id = Column(String(36), primary_key=True)
    session_id = Column(String(36), ForeignKey("chat_sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(16), nullable=False)
    content = Column(Text, nullable=False)
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", JSON, nullable=True)  # {followUpQuestions, suggestionsCount} on assistant turns
    created_at = Column(DateTime(timezone=True), nullable=False)
