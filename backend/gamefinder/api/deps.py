"""
FastAPI dependencies: one store, advisor and chat service per process.
Tests swap them with app.dependency_overrides.
"""
from functools import lru_cache

from gamefinder.agents.game_agent import GameAdvisor
from gamefinder.config import settings
from gamefinder.services.chat_service import ChatService
from gamefinder.store import ChatStore, build_store


@lru_cache
def get_store() -> ChatStore:
    return build_store(settings)


@lru_cache
def get_advisor() -> GameAdvisor:
    return GameAdvisor(settings.ai_model, title_model=settings.title_model or None)


@lru_cache
def get_chat_service() -> ChatService:
    return ChatService(get_store(), get_advisor(), context_window=settings.context_window)
