"""
Chat session: one conversation thread with its own title and timestamps.
"""
from sqlalchemy import Column, DateTime, String, Text

from gamefinder.db.base import Base


class ChatSessionRow(Base):
    __tablename__ = "chat_sessions"

    id = Column(String(36), primary_key=True)
    title = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, index=True)
