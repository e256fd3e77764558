"""
Game recommendation agent. Instructions loaded from game_agent_instructions.md.

Two completions go to the model:
  - suggestions: structured output (JSON mode + the SuggestionResult schema), validated by
    pydantic-ai before anyone trusts it; failures raise AIRequestError.
  - title: a short chat title for the first turn; best effort, failures come back as None.

Agents are built with defer_model_check, so provider setup (API keys) is only needed once a
request actually reaches the model.
"""
import logging
from pathlib import Path

from pydantic_ai import Agent, NativeOutput
from pydantic_ai.models import Model
from pydantic_ai.settings import ModelSettings

from gamefinder.agents.types import SuggestionResult
from gamefinder.core.constants import ROLE_USER
from gamefinder.core.errors import AIRequestError

logger = logging.getLogger(__name__)

_INSTRUCTIONS_PATH = Path(__file__).resolve().parent / "game_agent_instructions.md"
INSTRUCTIONS = _INSTRUCTIONS_PATH.read_text().strip()

TITLE_PROMPT = (
    'Generate a short, descriptive title (max 6 words) for a game recommendation chat based on '
    'this user message: "{message}". Focus on the key gaming interest (genre, platform, mood, etc.). '
    "Respond with just the title, no quotes or extra text."
)


def build_suggestion_prompt(user_text: str, history: list[dict[str, str]]) -> str:
    """Instruction block, then each prior turn as 'User: ...'/'Assistant: ...', then the new turn."""
    lines = [INSTRUCTIONS, ""]
    for turn in history:
        speaker = "User" if turn.get("role") == ROLE_USER else "Assistant"
        lines.append(f"{speaker}: {turn.get('content', '')}")
    lines.append(f"User: {user_text}")
    lines.append("Assistant:")
    return "\n".join(lines)


def _clean_title(text: str | None) -> str:
    return (text or "").strip().strip("\"'").strip()


class GameAdvisor:
    """Talks to the external model. model is a pydantic-ai model name (e.g. 'google:gemini-2.5-flash') or Model."""

    def __init__(self, model: Model | str, *, title_model: Model | str | None = None):
        # Single attempt per request: no pydantic-ai retries.
        self._suggestion_agent = Agent(
            model=model,
            output_type=NativeOutput(SuggestionResult, name="game_suggestions"),
            retries=0,
            model_settings=ModelSettings(temperature=0.7, max_tokens=4096),
            defer_model_check=True,
        )
        self._title_agent = Agent(
            model=title_model or model,
            retries=0,
            model_settings=ModelSettings(max_tokens=64),
            defer_model_check=True,
        )

    async def get_suggestions(self, user_text: str, history: list[dict[str, str]]) -> SuggestionResult:
        prompt = build_suggestion_prompt(user_text, history)
        try:
            result = await self._suggestion_agent.run(prompt)
        except Exception as e:
            logger.error("Game suggestion request failed: %s", e)
            raise AIRequestError(f"Failed to get game suggestions: {e}") from e
        return result.output

    async def generate_title(self, first_message: str) -> str | None:
        """Short title for a new chat, or None if the model fails or answers with nothing."""
        try:
            result = await self._title_agent.run(TITLE_PROMPT.format(message=first_message))
        except Exception as e:
            logger.warning("Failed to generate chat title: %s", e, exc_info=True)
            return None
        title = _clean_title(result.output)
        if not title:
            logger.warning("Title model returned no text")
            return None
        return title
