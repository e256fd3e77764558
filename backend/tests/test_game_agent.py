import json

import pytest
from pydantic import ValidationError
from pydantic_ai.messages import ModelMessage, ModelResponse, TextPart, UserPromptPart
from pydantic_ai.models.function import AgentInfo, FunctionModel
from pydantic_ai.profiles import ModelProfile

from gamefinder.agents.game_agent import GameAdvisor, build_suggestion_prompt
from gamefinder.agents.types import SuggestionResult
from gamefinder.core.constants import FALLBACK_SUMMARY
from gamefinder.core.errors import AIRequestError

SUGGESTION = {
    "title": "Stardew Valley",
    "description": "Relaxing farm life sim.",
    "platform": "Nintendo Switch",
    "genre": "Simulation",
    "rating": "9/10",
    "price": "$14.99",
    "imageUrl": "",
    "reasoning": "Cozy and open-ended",
}

PAYLOAD = {
    "suggestions": [SUGGESTION, {**SUGGESTION, "title": "Animal Crossing: New Horizons"}],
    "followUpQuestions": ["Do you play co-op?", "What is your budget?"],
    "summary": "Two cozy picks for your Switch.",
}

# FunctionModel stands in for a provider with JSON-schema output (Gemini, OpenAI).
_JSON_PROFILE = ModelProfile(supports_json_schema_output=True, supports_json_object_output=True)


def _text_model(text: str, prompts: list[str] | None = None, infos: list[AgentInfo] | None = None) -> FunctionModel:
    def respond(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
        if infos is not None:
            infos.append(info)
        if prompts is not None:
            for message in messages:
                for part in message.parts:
                    if isinstance(part, UserPromptPart):
                        prompts.append(part.content)
        return ModelResponse(parts=[TextPart(content=text)])

    return FunctionModel(respond, profile=_JSON_PROFILE)


def _failing_model(exc: Exception) -> FunctionModel:
    def respond(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
        raise exc

    return FunctionModel(respond, profile=_JSON_PROFILE)


# build_suggestion_prompt


def test_prompt_renders_history_then_new_turn():
    prompt = build_suggestion_prompt(
        "Something like Zelda?",
        [
            {"role": "user", "content": "I like open worlds"},
            {"role": "assistant", "content": "Try Elden Ring"},
        ],
    )
    tail = prompt.splitlines()[-4:]
    assert tail == [
        "User: I like open worlds",
        "Assistant: Try Elden Ring",
        "User: Something like Zelda?",
        "Assistant:",
    ]
    assert prompt.startswith("You are an expert game recommendation assistant")


def test_prompt_without_history():
    prompt = build_suggestion_prompt("Racing games", [])
    assert prompt.endswith("User: Racing games\nAssistant:")


# SuggestionResult validation


def test_result_from_valid_payload():
    result = SuggestionResult.model_validate(PAYLOAD)
    assert [s.title for s in result.suggestions] == ["Stardew Valley", "Animal Crossing: New Horizons"]
    assert result.suggestions[0].image_url == ""
    assert result.suggestions[0].reasoning == "Cozy and open-ended"
    assert result.follow_up_questions == PAYLOAD["followUpQuestions"]
    assert result.summary == PAYLOAD["summary"]


def test_result_defaults_follow_ups_and_summary():
    result = SuggestionResult.model_validate({"suggestions": [SUGGESTION], "followUpQuestions": "nope"})
    assert result.follow_up_questions == []
    assert result.summary == FALLBACK_SUMMARY

    result = SuggestionResult.model_validate({"suggestions": [SUGGESTION], "summary": ""})
    assert result.follow_up_questions == []
    assert result.summary == FALLBACK_SUMMARY

    result = SuggestionResult.model_validate({"suggestions": [SUGGESTION], "followUpQuestions": None, "summary": 3})
    assert result.follow_up_questions == []
    assert result.summary == FALLBACK_SUMMARY


def test_result_accepts_empty_suggestion_list():
    result = SuggestionResult.model_validate({"suggestions": [], "summary": "Nothing matched"})
    assert result.suggestions == []
    assert result.summary == "Nothing matched"


def test_result_coerces_numeric_rating():
    result = SuggestionResult.model_validate({"suggestions": [{**SUGGESTION, "rating": 4.5}]})
    assert result.suggestions[0].rating == "4.5"


def test_result_accepts_null_image_rating_and_price():
    item = {**SUGGESTION, "imageUrl": None, "rating": None, "price": None}
    suggestion = SuggestionResult.model_validate({"suggestions": [item]}).suggestions[0]
    assert suggestion.image_url == ""
    assert suggestion.rating is None
    assert suggestion.price is None


def test_result_drops_non_string_follow_ups():
    payload = {**PAYLOAD, "followUpQuestions": ["Co-op?", 3, None]}
    assert SuggestionResult.model_validate(payload).follow_up_questions == ["Co-op?"]


@pytest.mark.parametrize(
    "payload",
    [
        {"summary": "no suggestions key"},
        {"suggestions": "Hades"},
        {"suggestions": [{"title": "Missing the rest"}]},
    ],
)
def test_result_rejects_unusable_payload(payload):
    with pytest.raises(ValidationError):
        SuggestionResult.model_validate(payload)


# GameAdvisor


@pytest.mark.asyncio
async def test_get_suggestions_sends_one_prompt_and_returns_result():
    prompts: list[str] = []
    advisor = GameAdvisor(_text_model(json.dumps(PAYLOAD), prompts))

    result = await advisor.get_suggestions("Cozy Switch games", [{"role": "user", "content": "Hi"}])

    assert len(result.suggestions) == 2
    assert result.summary == PAYLOAD["summary"]
    assert len(prompts) == 1
    assert "User: Hi\nUser: Cozy Switch games\nAssistant:" in prompts[0]


@pytest.mark.asyncio
async def test_get_suggestions_requests_structured_output():
    infos: list[AgentInfo] = []
    advisor = GameAdvisor(_text_model(json.dumps(PAYLOAD), infos=infos))

    await advisor.get_suggestions("Cozy Switch games", [])

    params = infos[0].model_request_parameters
    assert params.output_mode == "native"
    assert params.output_tools == []
    assert params.output_object is not None
    schema = json.dumps(params.output_object.json_schema)
    assert '"followUpQuestions"' in schema
    assert '"imageUrl"' in schema


@pytest.mark.asyncio
async def test_get_suggestions_wraps_model_failure():
    advisor = GameAdvisor(_failing_model(RuntimeError("provider unavailable")))
    with pytest.raises(AIRequestError) as excinfo:
        await advisor.get_suggestions("anything", [])
    assert "provider unavailable" in str(excinfo.value)
    assert str(excinfo.value).startswith("Failed to get game suggestions")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "text",
    [
        "Sure! Here are some games: Hades, Celeste",
        "[1, 2, 3]",
        json.dumps({"summary": "no suggestions key"}),
    ],
)
async def test_get_suggestions_rejects_unusable_output_after_one_call(text):
    prompts: list[str] = []
    advisor = GameAdvisor(_text_model(text, prompts))
    with pytest.raises(AIRequestError):
        await advisor.get_suggestions("anything", [])
    assert len(prompts) == 1


@pytest.mark.asyncio
async def test_get_suggestions_without_provider_setup_raises_ai_error(monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    advisor = GameAdvisor("google:gemini-2.5-flash")
    with pytest.raises(AIRequestError):
        await advisor.get_suggestions("anything", [])


@pytest.mark.asyncio
async def test_generate_title_strips_quotes():
    prompts: list[str] = []
    advisor = GameAdvisor(_text_model("unused"), title_model=_text_model('  "Cozy Switch Adventures"\n', prompts))

    assert await advisor.generate_title("cozy games for switch") == "Cozy Switch Adventures"
    assert 'based on this user message: "cozy games for switch"' in prompts[0]


@pytest.mark.asyncio
async def test_generate_title_failure_returns_none():
    advisor = GameAdvisor(_failing_model(RuntimeError("boom")))
    assert await advisor.generate_title("anything") is None


@pytest.mark.asyncio
async def test_generate_title_blank_answer_returns_none():
    advisor = GameAdvisor(_text_model('""'))
    assert await advisor.generate_title("anything") is None
