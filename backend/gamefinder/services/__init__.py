from gamefinder.services.chat_service import ChatService
from gamefinder.services.schemas import AssistantReply, ThreadMessage

__all__ = ["ChatService", "AssistantReply", "ThreadMessage"]
