"""
Tests for the LLM-backed agent, with the OpenAI client mocked out.
"""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

from spyfall.agents import SimpleLLMAgent, APIKeyError, LLMCallError
from spyfall.agents.personalities import get_personality_by_id
from spyfall.core import TurnAction

from conftest import events_of


def _response(content, prompt_tokens=120, completion_tokens=30):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    response.usage.prompt_tokens = prompt_tokens
    response.usage.completion_tokens = completion_tokens
    response.usage.total_tokens = prompt_tokens + completion_tokens
    return response


def _client(*contents):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(side_effect=[_response(c) for c in contents])
    client.close = AsyncMock()
    return client


@pytest.fixture
def civilian(game_state):
    return game_state.players[0]


def test_missing_api_key_raises(monkeypatch, civilian, game_config):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(APIKeyError) as exc_info:
        SimpleLLMAgent(civilian, game_config)
    assert "OPENAI_API_KEY" in str(exc_info.value)


def test_ask_parses_fields_and_keeps_memory(civilian, game_config, game_state):
    client = _client("THOUGHT: Press Bob.\nTARGET: Bob\nQUESTION: What are you wearing?")
    agent = SimpleLLMAgent(civilian, game_config, client=client)

    result = asyncio.run(agent.ask(game_state.players))

    assert result.target_name == "Bob"
    assert result.question == "What are you wearing?"
    assert result.thought == "Press Bob."
    assert [m["role"] for m in agent.memory] == ["system", "user", "assistant"]
    assert "Location: Airplane" in agent.memory[0]["content"]


@pytest.mark.parametrize("reply,expected", [
    ("THOUGHT: Time to act.\nACTION: ACCUSE", TurnAction.VOTE),
    ("ACTION: guess", TurnAction.GUESS),
    ("ACTION: QUESTION", TurnAction.QUESTION),
    ("I'll just keep chatting.", TurnAction.QUESTION),
])
def test_choose_action(civilian, game_config, game_state, reply, expected):
    agent = SimpleLLMAgent(civilian, game_config, client=_client(reply))
    choice = asyncio.run(agent.choose_action(game_state.players, [], True))
    assert choice.action == expected


def test_spy_prompt_hides_location(game_state, game_config):
    spy = game_state.get_spy()
    agent = SimpleLLMAgent(spy, game_config, client=_client())
    assert "YOU ARE THE SPY" in agent.memory[0]["content"]
    assert "Location: Airplane" not in agent.memory[0]["content"]


def test_personality_is_added_to_system_prompt(civilian, game_config):
    agent = SimpleLLMAgent(civilian, game_config, personality=get_personality_by_id("aggressive"), client=_client())
    assert "YOUR PERSONALITY: Aggressive" in agent.memory[0]["content"]


def test_gpt5_models_use_completion_tokens_without_temperature(civilian, game_config):
    game_config.llm_model = "gpt-5-mini"
    client = _client("Fine, thanks.")
    agent = SimpleLLMAgent(civilian, game_config, client=client)

    asyncio.run(agent.answer("Bob", "How are you?"))

    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-5-mini"
    assert kwargs["max_completion_tokens"] == game_config.max_action_tokens
    assert "temperature" not in kwargs


def test_older_models_use_max_tokens(civilian, game_config):
    game_config.llm_model = "gpt-3.5-turbo"
    client = _client("Fine, thanks.")
    agent = SimpleLLMAgent(civilian, game_config, client=client)

    asyncio.run(agent.answer("Bob", "How are you?"))

    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["max_tokens"] == game_config.max_action_tokens
    assert kwargs["temperature"] == game_config.llm_temperature


def test_empty_completion_returns_empty_string(civilian, game_config):
    agent = SimpleLLMAgent(civilian, game_config, client=_client(None))
    assert asyncio.run(agent.vote([], [])) == ""


def test_api_failure_raises_llm_call_error(civilian, game_config):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(side_effect=RuntimeError("rate limited"))
    agent = SimpleLLMAgent(civilian, game_config, client=client)

    with pytest.raises(LLMCallError) as exc_info:
        asyncio.run(agent.answer("Bob", "Where were you?"))

    assert exc_info.value.player_name == "Alice"
    assert exc_info.value.action_type == "answer"
    assert "rate limited" in exc_info.value.message


def test_civilian_never_guesses(civilian, game_config):
    client = _client()
    agent = SimpleLLMAgent(civilian, game_config, client=client)
    assert asyncio.run(agent.guess_location([], when_caught=True)) is None
    client.chat.completions.create.assert_not_called()


def test_jury_vote_parsing(civilian, game_config):
    agent = SimpleLLMAgent(civilian, game_config, client=_client("VOTE: Yes\nREASON: Too vague.", "VOTE: nope"))
    first = asyncio.run(agent.vote_on_accusation("Carol", "Bob", "I'm innocent", []))
    second = asyncio.run(agent.vote_on_accusation("Carol", "Bob", "I'm innocent", []))
    assert first.is_yes and first.reason == "Too vague."
    assert not second.is_yes


def test_defense_falls_back_to_raw_reply(civilian, game_config):
    agent = SimpleLLMAgent(civilian, game_config, client=_client("I was just being careful!"))
    result = asyncio.run(agent.defend_against_accusation("Carol", "Too vague", []))
    assert result.defense == "I was just being careful!"


def test_prompt_and_metadata_are_emitted(civilian, game_config, event_emitter, recorded_events):
    agent = SimpleLLMAgent(civilian, game_config, event_emitter=event_emitter, client=_client("Sure."))

    asyncio.run(agent.answer("Bob", "Busy day?"))

    prompt = events_of(recorded_events, "prompt")[0]
    assert prompt["player_name"] == "Alice"
    assert prompt["response"] == "Sure."
    metadata = events_of(recorded_events, "llm_metadata")[0]
    assert metadata["total_tokens"] == 150
    assert metadata["action_type"] == "answer"


def test_cleanup_closes_client(civilian, game_config):
    client = _client()
    agent = SimpleLLMAgent(civilian, game_config, client=client)
    asyncio.run(agent.cleanup())
    client.close.assert_awaited_once()
