"""
Exceptions for agent-related errors.
"""

from typing import Optional


class AgentError(Exception):
    """Base class for errors raised by player agents."""


class LLMCallError(AgentError):
    """Raised when an LLM API call fails. Aborts the session."""

    def __init__(self, player_name: str, action_type: str, message: str = ""):
        self.player_name = player_name
        self.action_type = action_type
        self.message = message or f"LLM call failed for {player_name} during {action_type}"
        super().__init__(self.message)


class APIKeyError(AgentError):
    """Raised when an LLM seat is created without its provider's API key."""

    def __init__(self, provider: str, env_var: str, setup_url: Optional[str] = None):
        self.provider = provider
        self.env_var = env_var
        self.setup_url = setup_url
        message = f"Missing API key for {provider}. Please set {env_var} in your .env file."
        if setup_url:
            message += f" Get your API key at: {setup_url}"
        super().__init__(message)
