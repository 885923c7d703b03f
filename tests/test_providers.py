"""
Tests for the per-vendor LLM providers, with every SDK client mocked out.
"""

import asyncio
import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from spyfall.agents import APIKeyError, LLMCallError, SimpleLLMAgent
from spyfall.agents.providers import (
    AnthropicProvider, GoogleProvider, OpenAIProvider, create_provider,
    get_available_providers, has_api_key, validate_api_key,
)

from conftest import events_of

KEY_VARS = ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GOOGLE_API_KEY")

CONVERSATION = [
    {"role": "system", "content": "You are Alice."},
    {"role": "user", "content": "Where are we?"},
    {"role": "assistant", "content": "Somewhere loud."},
    {"role": "user", "content": "Louder than a casino?"},
]


@pytest.fixture
def no_api_keys(monkeypatch):
    for var in KEY_VARS:
        monkeypatch.delenv(var, raising=False)


def _anthropic_client(*texts):
    response = SimpleNamespace(
        content=[SimpleNamespace(type="thinking", thinking="hmm")] + [SimpleNamespace(type="text", text=t) for t in texts],
        usage=SimpleNamespace(input_tokens=80, output_tokens=20),
    )
    client = MagicMock()
    client.messages.create = AsyncMock(return_value=response)
    client.close = AsyncMock()
    return client


def _google_client(text):
    response = SimpleNamespace(
        text=text,
        usage_metadata=SimpleNamespace(prompt_token_count=60, candidates_token_count=15, total_token_count=75),
    )
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=response)
    client.aio.aclose = AsyncMock()
    return client


def test_missing_key_names_provider_and_setup_page(no_api_keys):
    with pytest.raises(APIKeyError) as exc_info:
        validate_api_key("anthropic")

    error = exc_info.value
    assert error.provider == "anthropic"
    assert error.env_var == "ANTHROPIC_API_KEY"
    assert "Missing API key for anthropic" in str(error)
    assert "https://console.anthropic.com/settings/keys" in str(error)


def test_blank_key_counts_as_missing(no_api_keys, monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "   ")
    assert has_api_key("google") is False
    with pytest.raises(APIKeyError):
        validate_api_key("google")


def test_available_providers_follow_configured_keys(no_api_keys, monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "g-key")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-key")
    assert get_available_providers() == ["openai", "google"]
    assert validate_api_key("openai") == "sk-key"


@pytest.mark.parametrize("provider", ["openai", "anthropic", "google"])
def test_each_provider_checks_its_own_key(no_api_keys, provider):
    with pytest.raises(APIKeyError) as exc_info:
        create_provider(provider)
    assert exc_info.value.provider == provider


def test_create_provider_rejects_unknown_and_unsupported_modes():
    with pytest.raises(ValueError):
        create_provider("mistral", client=MagicMock())
    with pytest.raises(ValueError):
        create_provider("anthropic", mode="stateful", client=MagicMock())
    with pytest.raises(ValueError):
        create_provider("google", mode="stateful", client=MagicMock())


def test_default_models_and_env_overrides(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_MODEL", raising=False)
    monkeypatch.setenv("GOOGLE_MODEL", "gemini-2.5-flash")
    assert create_provider("anthropic", client=MagicMock()).model == "claude-sonnet-4-20250514"
    assert create_provider("google", client=MagicMock()).model == "gemini-2.5-flash"
    assert create_provider("google", model="gemini-2.5-pro", client=MagicMock()).model == "gemini-2.5-pro"


def test_anthropic_sends_system_separately_and_joins_text_blocks():
    client = _anthropic_client("Louder, ", "much louder.")
    provider = AnthropicProvider(model="claude-test", client=client)

    reply = asyncio.run(provider.chat(CONVERSATION, 0.7, 16000))

    kwargs = client.messages.create.call_args.kwargs
    assert kwargs["system"] == "You are Alice."
    assert [m["role"] for m in kwargs["messages"]] == ["user", "assistant", "user"]
    assert kwargs["max_tokens"] == 1024
    assert kwargs["model"] == "claude-test"
    assert reply.content == "Louder, much louder."
    assert (reply.prompt_tokens, reply.completion_tokens, reply.total_tokens) == (80, 20, 100)


def test_google_maps_assistant_turns_to_model_role():
    client = _google_client("  Much louder.  ")
    provider = GoogleProvider(model="gemini-test", client=client)

    reply = asyncio.run(provider.chat(CONVERSATION, 0.5, 16000))

    kwargs = client.aio.models.generate_content.call_args.kwargs
    assert [c.role for c in kwargs["contents"]] == ["user", "model", "user"]
    assert kwargs["contents"][2].parts[0].text == "Louder than a casino?"
    assert "You are Alice." in str(kwargs["config"].system_instruction)
    assert kwargs["config"].temperature == 0.5
    assert reply.content == "Much louder."
    assert reply.total_tokens == 75


def test_google_empty_reply_becomes_empty_string():
    client = _google_client(None)
    client.aio.models.generate_content.return_value.usage_metadata = None
    reply = asyncio.run(GoogleProvider(client=client).chat(CONVERSATION, 0.7, 100))
    assert reply.content == ""
    assert reply.total_tokens is None


def test_openai_stateful_mode_chains_responses():
    client = MagicMock()
    client.responses.create = AsyncMock(side_effect=[
        SimpleNamespace(id="resp_1", output_text="First.", usage=SimpleNamespace(input_tokens=50, output_tokens=5, total_tokens=55)),
        SimpleNamespace(id="resp_2", output_text="Second.", usage=None),
    ])
    provider = OpenAIProvider(model="gpt-4.1-mini", mode="stateful", client=client)

    first = asyncio.run(provider.chat(CONVERSATION[:2], 0.7, 500))
    second = asyncio.run(provider.chat(CONVERSATION, 0.7, 500))

    first_call, second_call = client.responses.create.call_args_list
    assert first_call.kwargs["input"] == "Where are we?"
    assert first_call.kwargs["instructions"] == "You are Alice."
    assert "previous_response_id" not in first_call.kwargs
    assert second_call.kwargs["input"] == "Louder than a casino?"
    assert second_call.kwargs["previous_response_id"] == "resp_1"
    assert second_call.kwargs["max_output_tokens"] == 500
    assert first.total_tokens == 55
    assert second.content == "Second."
    client.chat.completions.create.assert_not_called()


@pytest.mark.parametrize("provider,client,close", [
    ("anthropic", _anthropic_client(), lambda c: c.close),
    ("google", _google_client(""), lambda c: c.aio.aclose),
])
def test_agent_cleanup_closes_provider_client(game_state, game_config, provider, client, close):
    agent = SimpleLLMAgent(game_state.players[0], game_config, provider=create_provider(provider, client=client))
    asyncio.run(agent.cleanup())
    close(client).assert_awaited_once()


def test_agent_on_anthropic_reports_provider_and_usage(game_state, game_config, event_emitter, recorded_events):
    client = _anthropic_client("THOUGHT: Check Bob.\nTARGET: Bob\nQUESTION: How was the trip?")
    agent = SimpleLLMAgent(
        game_state.players[0], game_config,
        event_emitter=event_emitter,
        provider=create_provider("anthropic", model="claude-test", client=client),
    )

    result = asyncio.run(agent.ask(game_state.players))

    assert result.target_name == "Bob"
    assert agent.provider_type == "anthropic"
    assert agent.model == "claude-test"
    assert [m["role"] for m in agent.memory] == ["system", "user", "assistant"]
    metadata = events_of(recorded_events, "llm_metadata")[0]
    assert metadata["model"] == "claude-test"
    assert metadata["total_tokens"] == 100


def test_provider_failure_is_wrapped(game_state, game_config):
    client = _google_client("")
    client.aio.models.generate_content.side_effect = RuntimeError("quota exceeded")
    agent = SimpleLLMAgent(game_state.players[1], game_config, provider=create_provider("google", client=client))

    with pytest.raises(LLMCallError) as exc_info:
        asyncio.run(agent.answer("Alice", "Where are we?"))
    assert "quota exceeded" in exc_info.value.message
