"""
LLM agent implementation. The vendor API sits behind an `LLMProvider`.
"""

import time
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from .base_agent import (
    BaseAgent, ActionChoice, AskResult, AccusationResult, DefenseResult,
    AccusationVoteResult, ReactionResult,
)
from .exceptions import LLMCallError
from .providers import LLMProvider, create_provider
from .personalities import Personality, NEUTRAL_PERSONALITY, apply_personality_to_prompt
from . import prompts
from ..core import Player, Turn, TurnAction, parse_field
from ..config.game_config import GameConfig, default_config

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


class SimpleLLMAgent(BaseAgent):
    """
    LLM-backed player.

    Keeps the whole conversation (system prompt plus every exchange) and hands
    it to the provider with each request; a stateful provider sends only the
    newest message. Replies are free text; structured fields are pulled out
    with `parse_field`. Without an explicit provider the seat plays on OpenAI.
    """

    agent_type = "simple_llm_agent"

    def __init__(self, player: Player, config: GameConfig = default_config,
                 event_emitter: Optional['EventEmitter'] = None,
                 personality: Personality = NEUTRAL_PERSONALITY,
                 roster: Optional[List[Player]] = None,
                 client: Optional[Any] = None,
                 provider: Optional[LLMProvider] = None):
        super().__init__(player, config)
        self.provider = provider or create_provider("openai", model=config.llm_model, client=client)
        self.provider_type = self.provider.provider_type
        self.model = self.provider.model
        self.temperature = config.llm_temperature
        self.event_emitter = event_emitter
        self.personality = personality
        self.roster: List[Player] = list(roster) if roster else []

        system_prompt = apply_personality_to_prompt(
            prompts.build_player_system_prompt(player.name, player.secret),
            personality,
        )
        self.memory: List[Dict[str, str]] = [{"role": "system", "content": system_prompt}]

    async def _call_llm_async(self, prompt: str, action_type: str) -> str:
        """
        Send a prompt with the full conversation so far and return the reply.

        An empty reply is returned as "" for the caller's fallback to handle.

        Raises:
            LLMCallError: If the API call itself fails
        """
        self.memory.append({"role": "user", "content": prompt})
        try:
            start_time = time.time()
            reply = await self.provider.chat(list(self.memory), self.temperature, self.config.max_action_tokens)
            latency_ms = (time.time() - start_time) * 1000
        except Exception as e:
            raise LLMCallError(
                self.player.name,
                action_type,
                f"LLM API call failed for {self.player.name} during {action_type}: {e}"
            ) from e

        content = reply.content
        self.memory.append({"role": "assistant", "content": content})

        if self.event_emitter:
            self.event_emitter.emit_prompt(self.player.name, action_type, prompt, content)
            if reply.total_tokens is not None:
                self.event_emitter.emit_llm_metadata(
                    self.player.name,
                    action_type,
                    reply.prompt_tokens,
                    reply.completion_tokens,
                    reply.total_tokens,
                    latency_ms,
                    self.model
                )

        return content

    def _remember_roster(self, players: List[Player]) -> List[Player]:
        if players:
            self.roster = list(players)
        return self.roster

    async def choose_action(self, players: List[Player], turns: List[Turn], can_accuse: bool) -> ActionChoice:
        players = self._remember_roster(players)
        raw = await self._call_llm_async(
            prompts.build_action_choice_prompt(players, turns, self.player, can_accuse),
            "choose_action"
        )
        action_raw = parse_field("ACTION", raw).lower()
        action = TurnAction.QUESTION
        if "guess" in action_raw:
            action = TurnAction.GUESS
        elif "accuse" in action_raw or "vote" in action_raw:
            action = TurnAction.VOTE
        return ActionChoice(action=action, thought=parse_field("THOUGHT", raw))

    async def ask(self, players: List[Player]) -> AskResult:
        players = self._remember_roster(players)
        raw = await self._call_llm_async(prompts.build_asker_instruction(players, self.player), "ask")
        return AskResult(
            target_name=parse_field("TARGET", raw),
            question=parse_field("QUESTION", raw),
            thought=parse_field("THOUGHT", raw),
        )

    async def answer(self, asker_name: str, question: str) -> str:
        return await self._call_llm_async(
            prompts.build_answer_instruction(asker_name, question, self.player.secret),
            "answer"
        )

    async def accuse(self, players: List[Player], turns: List[Turn]) -> AccusationResult:
        players = self._remember_roster(players)
        raw = await self._call_llm_async(prompts.build_accusation_prompt(players, turns, self.player), "accuse")
        return AccusationResult(
            target_name=parse_field("TARGET", raw),
            reason=parse_field("REASON", raw),
            thought=parse_field("THOUGHT", raw),
        )

    async def defend_against_accusation(self, accuser_name: str, accusation: str, turns: List[Turn]) -> DefenseResult:
        raw = await self._call_llm_async(
            prompts.build_defense_prompt(accuser_name, accusation, turns, self.roster),
            "defend"
        )
        return DefenseResult(
            defense=parse_field("DEFENSE", raw) or raw,
            thought=parse_field("THOUGHT", raw),
        )

    async def vote_on_accusation(self, accuser_name: str, accused_name: str, defense: str,
                                 turns: List[Turn]) -> AccusationVoteResult:
        raw = await self._call_llm_async(
            prompts.build_accusation_vote_prompt(accuser_name, accused_name, defense, turns, self.roster),
            "vote_on_accusation"
        )
        vote = "yes" if "yes" in parse_field("VOTE", raw).lower() else "no"
        return AccusationVoteResult(vote=vote, reason=parse_field("REASON", raw))

    async def vote(self, players: List[Player], turns: List[Turn]) -> str:
        players = self._remember_roster(players)
        return await self._call_llm_async(prompts.build_vote_prompt(players, turns, self.player), "vote")

    async def guess_location(self, turns: List[Turn], when_caught: bool) -> Optional[str]:
        if not self.player.is_spy:
            return None
        return await self._call_llm_async(
            prompts.build_spy_guess_prompt(turns, self.roster, when_caught),
            "guess_location"
        )

    async def react(self, event_type: str, author_name: str, content: str) -> ReactionResult:
        raw = await self._call_llm_async(prompts.build_reaction_prompt(event_type, author_name, content), "react")
        return ReactionResult(
            emoji=parse_field("EMOJI", raw) or "🤔",
            reaction=parse_field("REACTION", raw) or raw,
            suspicion=parse_field("SUSPICION", raw),
        )

    async def cleanup(self) -> None:
        """Close the provider's HTTP client."""
        await self.provider.close()
