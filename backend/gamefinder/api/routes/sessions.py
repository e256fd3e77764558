"""
Chat sessions: list/create/delete sessions, read a thread, send a message and get recommendations.
"""
import logging
from typing import Any, NoReturn

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from gamefinder.api.deps import get_chat_service
from gamefinder.core.constants import SESSION_DELETED_MESSAGE, SESSION_NOT_FOUND_MESSAGE
from gamefinder.core.errors import STATUS_NOT_FOUND, NotFoundError, ValidationError, error_to_http
from gamefinder.services.chat_service import ChatService
from gamefinder.services.schemas import AssistantReply, ThreadMessage
from gamefinder.store.types import ChatSession

router = APIRouter()
logger = logging.getLogger(__name__)


# Fields are typed Any so the service reports bad values with its own messages.
class CreateSessionRequest(BaseModel):
    title: Any = None


class RenameSessionRequest(BaseModel):
    title: Any = None


class SendMessageRequest(BaseModel):
    content: Any = None


class DeleteSessionResponse(BaseModel):
    message: str


class ClearSessionsResponse(BaseModel):
    message: str
    deleted: int


def _handle_error(exc: Exception, log_message: str, fallback_detail: str | None = None) -> NoReturn:
    if not isinstance(exc, (ValidationError, NotFoundError)):
        logger.exception(log_message)
    raise error_to_http(exc, fallback_detail) from exc


@router.get("", response_model=list[ChatSession])
async def list_sessions(service: ChatService = Depends(get_chat_service)):
    """All chat sessions, most recently updated first."""
    try:
        return service.list_sessions()
    except Exception as e:  # noqa: BLE001
        _handle_error(e, "list_sessions failed", "Failed to get chat sessions")


@router.post("", response_model=ChatSession)
async def create_session(body: CreateSessionRequest, service: ChatService = Depends(get_chat_service)):
    """Start a new chat ("new search")."""
    try:
        return service.create_session(body.title)
    except Exception as e:  # noqa: BLE001
        _handle_error(e, "create_session failed", "Failed to create chat session")


@router.delete("/all", response_model=ClearSessionsResponse)
async def clear_all_sessions(service: ChatService = Depends(get_chat_service)):
    """Delete every chat session with its messages and recommendations."""
    try:
        deleted = service.delete_all_sessions()
    except Exception as e:  # noqa: BLE001
        _handle_error(e, "clear_all_sessions failed", "Failed to clear chat history")
    return ClearSessionsResponse(message="All sessions deleted successfully", deleted=deleted)


@router.get("/{session_id}", response_model=ChatSession)
async def get_session(session_id: str, service: ChatService = Depends(get_chat_service)):
    try:
        return service.get_session(session_id)
    except Exception as e:  # noqa: BLE001
        _handle_error(e, "get_session failed", "Failed to get chat session")


@router.patch("/{session_id}", response_model=ChatSession)
async def rename_session(
    session_id: str,
    body: RenameSessionRequest,
    service: ChatService = Depends(get_chat_service),
):
    """Change the title of a session."""
    try:
        return service.rename_session(session_id, body.title)
    except Exception as e:  # noqa: BLE001
        _handle_error(e, "rename_session failed", "Failed to update chat session")


@router.get(
    "/{session_id}/messages",
    response_model=list[ThreadMessage],
    response_model_exclude_unset=True,
)
async def list_messages(session_id: str, service: ChatService = Depends(get_chat_service)):
    """Thread oldest first; assistant messages include their recommendations."""
    try:
        return service.list_thread(session_id)
    except Exception as e:  # noqa: BLE001
        _handle_error(e, "list_messages failed", "Failed to get messages")


@router.post("/{session_id}/messages", response_model=AssistantReply)
async def send_message(
    session_id: str,
    body: SendMessageRequest,
    service: ChatService = Depends(get_chat_service),
):
    """
    Send a user message; returns the assistant message with its recommendations and
    follow-up questions. The first exchange also gives the session a generated title.
    """
    try:
        return await service.send_message(session_id, body.content)
    except Exception as e:  # noqa: BLE001
        _handle_error(e, "send_message failed")


@router.delete("/{session_id}", response_model=DeleteSessionResponse)
async def delete_session(session_id: str, service: ChatService = Depends(get_chat_service)):
    try:
        deleted = service.delete_session(session_id)
    except Exception as e:  # noqa: BLE001
        _handle_error(e, "delete_session failed", "Failed to delete session")
    if not deleted:
        raise HTTPException(status_code=STATUS_NOT_FOUND, detail=SESSION_NOT_FOUND_MESSAGE)
    return DeleteSessionResponse(message=SESSION_DELETED_MESSAGE)
