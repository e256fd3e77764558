import asyncio

import pytest
from fastapi.testclient import TestClient

from gamefinder.agents.types import GameSuggestion, SuggestionResult
from gamefinder.api.deps import get_chat_service
from gamefinder.main import app
from gamefinder.services.chat_service import ChatService
from gamefinder.store.memory import MemoryStore


def make_result(count: int = 3, follow_ups: list[str] | None = None, summary: str = "Try these!") -> SuggestionResult:
    return SuggestionResult(
        suggestions=[
            GameSuggestion(
                title=f"Game {i}",
                description=f"Description {i}",
                platform="PC",
                genre="RPG",
                rating="9/10",
                price="$19.99",
                image_url="",
                reasoning="fits the request",
            )
            for i in range(count)
        ],
        follow_up_questions=follow_ups if follow_ups is not None else ["Any platform?", "Budget?"],
        summary=summary,
    )


class FakeAdvisor:
    """Stands in for GameAdvisor; records every call."""

    def __init__(self, result: SuggestionResult | None = None, *, error: Exception | None = None,
                 title: str | None = "Cozy Switch Games"):
        self.result = result or make_result()
        self.error = error
        self.title = title
        self.calls: list[tuple[str, list[dict[str, str]]]] = []
        self.title_calls: list[str] = []

    async def get_suggestions(self, user_text, history):
        self.calls.append((user_text, list(history)))
        # Yield to the loop so concurrent sends get a chance to interleave.
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.result

    async def generate_title(self, first_message):
        self.title_calls.append(first_message)
        return self.title


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def advisor():
    return FakeAdvisor()


@pytest.fixture
def service(store, advisor):
    return ChatService(store, advisor)


@pytest.fixture
def client(service):
    app.dependency_overrides[get_chat_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
