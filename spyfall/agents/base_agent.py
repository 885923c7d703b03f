"""
Base agent interface for Spyfall players.
"""

from typing import List, Optional
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..core import Player, Turn, TurnAction
from ..config.game_config import GameConfig, default_config


@dataclass
class ActionChoice:
    """Advisory choice of what to do this turn; the judge may downgrade it."""
    action: TurnAction = TurnAction.QUESTION
    thought: str = ""


@dataclass
class AskResult:
    target_name: str
    question: str
    thought: str = ""


@dataclass
class AccusationResult:
    target_name: str
    reason: str
    thought: str = ""


@dataclass
class DefenseResult:
    defense: str
    thought: str = ""


@dataclass
class AccusationVoteResult:
    vote: str  # "yes" or "no"
    reason: str = ""

    @property
    def is_yes(self) -> bool:
        return self.vote == "yes"


@dataclass
class ReactionResult:
    """Flavor reaction of a bystander. Empty fields mean no reaction."""
    emoji: str = ""
    reaction: str = ""
    suspicion: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.emoji and self.reaction)


class BaseAgent(ABC):
    """
    Abstract base class for all player agents.

    This defines the interface that all agent implementations must follow.
    Every method is a coroutine and may wait indefinitely (an LLM call, a
    human at a terminal). An agent always acts as its own `player`.
    """

    agent_type = "base"

    def __init__(self, player: Player, config: GameConfig = default_config):
        """
        Initialize the agent.

        Args:
            player: The player this agent represents
            config: Game configuration
        """
        self.player = player
        self.config = config

    @abstractmethod
    async def choose_action(self, players: List[Player], turns: List[Turn], can_accuse: bool) -> ActionChoice:
        """
        Decide what to do with this turn.

        Args:
            players: All players in the game
            turns: Transcript so far
            can_accuse: Whether starting an accusation is allowed

        Returns:
            Advisory action choice
        """
        pass

    @abstractmethod
    async def ask(self, players: List[Player]) -> AskResult:
        """Nominate a target and a question."""
        pass

    @abstractmethod
    async def answer(self, asker_name: str, question: str) -> str:
        """Answer a question put to this player."""
        pass

    @abstractmethod
    async def accuse(self, players: List[Player], turns: List[Turn]) -> AccusationResult:
        """Name who this player accuses and why."""
        pass

    @abstractmethod
    async def defend_against_accusation(self, accuser_name: str, accusation: str, turns: List[Turn]) -> DefenseResult:
        """Produce a public defense."""
        pass

    @abstractmethod
    async def vote_on_accusation(self, accuser_name: str, accused_name: str, defense: str,
                                 turns: List[Turn]) -> AccusationVoteResult:
        """Cast a yes/no jury vote on an accusation."""
        pass

    @abstractmethod
    async def vote(self, players: List[Player], turns: List[Turn]) -> str:
        """
        Cast the end-of-rounds vote.

        Returns:
            Free text expected to contain a `VOTE: <name>` line
        """
        pass

    @abstractmethod
    async def guess_location(self, turns: List[Turn], when_caught: bool) -> Optional[str]:
        """
        Guess the location (spy only).

        Returns:
            Free text expected to contain `GUESS:` and `REASON:` lines, or None
        """
        pass

    async def react(self, event_type: str, author_name: str, content: str) -> ReactionResult:
        """React to someone else's question or answer. Default: no reaction."""
        return ReactionResult()

    async def cleanup(self) -> None:
        """Release any resources held by the agent."""
        return None

    def other_players(self, players: List[Player]) -> List[Player]:
        return [p for p in players if p.id != self.player.id]
