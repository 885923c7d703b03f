"""
Agent implementations for Spyfall players.
"""

from .base_agent import (
    BaseAgent, ActionChoice, AskResult, AccusationResult, DefenseResult,
    AccusationVoteResult, ReactionResult,
)
from .llm_agent import SimpleLLMAgent
from .dummy_agent import DummyAgent
from .human_agent import HumanAgent
from .exceptions import AgentError, LLMCallError, APIKeyError
from .providers import LLMProvider, ProviderReply, create_provider, validate_api_key, get_available_providers
from .personalities import Personality, ALL_PERSONALITIES, get_personality_by_id, get_random_personality

__all__ = [
    'BaseAgent', 'ActionChoice', 'AskResult', 'AccusationResult', 'DefenseResult',
    'AccusationVoteResult', 'ReactionResult', 'SimpleLLMAgent', 'DummyAgent', 'HumanAgent',
    'AgentError', 'LLMCallError', 'APIKeyError', 'Personality', 'ALL_PERSONALITIES',
    'get_personality_by_id', 'get_random_personality', 'LLMProvider', 'ProviderReply', 'create_provider',
    'validate_api_key', 'get_available_providers',
]
