"""
LLM providers: one chat transport per vendor SDK.

Agents keep the conversation and parse replies; a provider only turns a list
of {"role", "content"} messages into one reply from its vendor's API.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import anthropic
from google import genai
from google.genai import types as genai_types
from openai import AsyncOpenAI

from .exceptions import APIKeyError
from ..config.game_config import PROVIDER_TYPES, DEFAULT_PROVIDER_ROTATION

API_KEY_ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "google": "GOOGLE_API_KEY",
}

SETUP_DOCS = {
    "openai": "https://platform.openai.com/api-keys",
    "anthropic": "https://console.anthropic.com/settings/keys",
    "google": "https://aistudio.google.com/app/apikey",
}

MODEL_ENV_VARS = {
    "openai": "OPENAI_MODEL",
    "anthropic": "ANTHROPIC_MODEL",
    "google": "GOOGLE_MODEL",
}

DEFAULT_MODELS = {
    "openai": "gpt-4.1-mini",
    "anthropic": "claude-sonnet-4-20250514",
    "google": "gemini-2.0-flash",
}

__all__ = [
    'PROVIDER_TYPES', 'DEFAULT_PROVIDER_ROTATION', 'API_KEY_ENV_VARS', 'SETUP_DOCS',
    'ProviderReply', 'LLMProvider', 'OpenAIProvider', 'AnthropicProvider', 'GoogleProvider',
    'create_provider', 'get_api_key', 'has_api_key', 'validate_api_key', 'get_available_providers',
]


def get_api_key(provider: str) -> Optional[str]:
    """API key for a provider from the environment, or None when unset or blank."""
    value = os.getenv(API_KEY_ENV_VARS[provider], "").strip()
    return value or None


def has_api_key(provider: str) -> bool:
    return get_api_key(provider) is not None


def validate_api_key(provider: str) -> str:
    """
    Return the provider's API key.

    Raises:
        APIKeyError: If the key's environment variable is unset or blank
    """
    api_key = get_api_key(provider)
    if api_key is None:
        raise APIKeyError(provider, API_KEY_ENV_VARS[provider], SETUP_DOCS[provider])
    return api_key


def get_available_providers() -> List[str]:
    """Providers whose API key is configured, in rotation order."""
    return [provider for provider in PROVIDER_TYPES if has_api_key(provider)]


def default_model(provider: str) -> str:
    return os.getenv(MODEL_ENV_VARS[provider]) or DEFAULT_MODELS[provider]


@dataclass
class ProviderReply:
    """Reply text plus token usage; usage is None when the API reports none."""
    content: str
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None


def _split_system(messages: List[Dict[str, str]]):
    system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
    return system, [m for m in messages if m["role"] != "system"]


class LLMProvider(ABC):
    """Chat transport for one vendor. Instances belong to a single seat."""

    provider_type = ""
    display_name = ""
    supports_stateful = False

    def __init__(self, model: Optional[str] = None, mode: str = "memory"):
        self.model = model or default_model(self.provider_type)
        self.mode = mode

    @abstractmethod
    async def chat(self, messages: List[Dict[str, str]], temperature: float, max_tokens: int) -> ProviderReply:
        """
        Send the conversation and return the reply.

        SDK exceptions propagate unchanged; the agent wraps them.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying HTTP client."""
        pass


class OpenAIProvider(LLMProvider):
    """
    OpenAI models.

    Memory mode uses Chat Completions with the full history. Stateful mode uses
    the Responses API: only the newest user message is sent, chained to the
    previous reply by `previous_response_id`.
    """

    provider_type = "openai"
    display_name = "GPT"
    supports_stateful = True

    def __init__(self, model: Optional[str] = None, mode: str = "memory", client: Optional[AsyncOpenAI] = None):
        super().__init__(model, mode)
        self.client = client or AsyncOpenAI(api_key=validate_api_key(self.provider_type))
        self.previous_response_id: Optional[str] = None

    def _token_params(self, temperature: float, max_tokens: int, token_key: str) -> Dict[str, Any]:
        # gpt-5 only supports the default temperature
        if "gpt-5" in self.model:
            return {token_key: max_tokens}
        return {token_key: max_tokens, "temperature": temperature}

    async def chat(self, messages: List[Dict[str, str]], temperature: float, max_tokens: int) -> ProviderReply:
        if self.mode == "stateful":
            return await self._chat_stateful(messages, temperature, max_tokens)

        # Newer models take max_completion_tokens
        if "gpt-5" in self.model or "gpt-4o" in self.model or "gpt-4.1" in self.model:
            token_key = "max_completion_tokens"
        else:
            token_key = "max_tokens"
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=list(messages),
            **self._token_params(temperature, max_tokens, token_key),
        )

        content = (response.choices[0].message.content or "").strip() if response.choices else ""
        usage = getattr(response, "usage", None)
        if not usage:
            return ProviderReply(content)
        return ProviderReply(content, usage.prompt_tokens, usage.completion_tokens, usage.total_tokens)

    async def _chat_stateful(self, messages: List[Dict[str, str]], temperature: float, max_tokens: int) -> ProviderReply:
        system, history = _split_system(messages)
        params: Dict[str, Any] = {
            "model": self.model,
            "instructions": system,
            "input": history[-1]["content"] if history else "",
        }
        if self.previous_response_id:
            params["previous_response_id"] = self.previous_response_id
        params.update(self._token_params(temperature, max_tokens, "max_output_tokens"))

        response = await self.client.responses.create(**params)
        self.previous_response_id = response.id

        content = (response.output_text or "").strip()
        usage = getattr(response, "usage", None)
        if not usage:
            return ProviderReply(content)
        return ProviderReply(content, usage.input_tokens, usage.output_tokens, usage.total_tokens)

    async def close(self) -> None:
        await self.client.close()


class AnthropicProvider(LLMProvider):
    """Claude models through the Messages API. The system prompt travels separately."""

    provider_type = "anthropic"
    display_name = "Claude"
    max_output_tokens = 1024

    def __init__(self, model: Optional[str] = None, mode: str = "memory",
                 client: Optional[anthropic.AsyncAnthropic] = None):
        super().__init__(model, mode)
        self.client = client or anthropic.AsyncAnthropic(api_key=validate_api_key(self.provider_type))

    async def chat(self, messages: List[Dict[str, str]], temperature: float, max_tokens: int) -> ProviderReply:
        system, history = _split_system(messages)
        response = await self.client.messages.create(
            model=self.model,
            system=system,
            messages=[{"role": m["role"], "content": m["content"]} for m in history],
            max_tokens=min(max_tokens, self.max_output_tokens),
            temperature=temperature,
        )

        content = "".join(block.text for block in response.content if block.type == "text").strip()
        usage = response.usage
        return ProviderReply(
            content, usage.input_tokens, usage.output_tokens, usage.input_tokens + usage.output_tokens
        )

    async def close(self) -> None:
        await self.client.close()


class GoogleProvider(LLMProvider):
    """Gemini models through google-genai. Assistant turns are sent with the "model" role."""

    provider_type = "google"
    display_name = "Gemini"

    def __init__(self, model: Optional[str] = None, mode: str = "memory", client: Optional[genai.Client] = None):
        super().__init__(model, mode)
        self.client = client or genai.Client(api_key=validate_api_key(self.provider_type))

    async def chat(self, messages: List[Dict[str, str]], temperature: float, max_tokens: int) -> ProviderReply:
        system, history = _split_system(messages)
        contents = [
            genai_types.Content(
                role="model" if m["role"] == "assistant" else "user",
                parts=[genai_types.Part(text=m["content"])],
            )
            for m in history
        ]
        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=contents,
            config=genai_types.GenerateContentConfig(
                system_instruction=system or None,
                temperature=temperature,
            ),
        )

        content = (response.text or "").strip()
        usage = response.usage_metadata
        if not usage:
            return ProviderReply(content)
        return ProviderReply(
            content, usage.prompt_token_count, usage.candidates_token_count, usage.total_token_count
        )

    async def close(self) -> None:
        await self.client.aio.aclose()


PROVIDER_CLASSES = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
    "google": GoogleProvider,
}


def create_provider(provider_type: str, model: Optional[str] = None, mode: str = "memory",
                    client: Optional[Any] = None) -> LLMProvider:
    """
    Build the provider for one LLM seat.

    Args:
        provider_type: "openai", "anthropic" or "google"
        model: Model name; the provider's env var or built-in default when omitted
        mode: "memory" or "stateful"
        client: Preconfigured SDK client; one is built from the API key when omitted

    Raises:
        ValueError: On an unknown provider, or stateful mode where it is unsupported
        APIKeyError: If no client is given and the provider's API key is missing
    """
    if provider_type not in PROVIDER_CLASSES:
        raise ValueError(f"Unknown provider type: {provider_type}")
    provider_class = PROVIDER_CLASSES[provider_type]
    if mode == "stateful" and not provider_class.supports_stateful:
        raise ValueError(f"{provider_type} does not support stateful mode; use memory")
    return provider_class(model=model, mode=mode, client=client)
