"""
Dummy Agent implementation with seeded random behavior.
"""

import random
from typing import List, Optional

from .base_agent import (
    BaseAgent, ActionChoice, AskResult, AccusationResult, DefenseResult,
    AccusationVoteResult,
)
from ..core import Player, Turn, TurnAction, all_location_names
from ..config.game_config import GameConfig, default_config

DUMMY_QUESTIONS = [
    "What do you usually wear here?",
    "How often do you come here?",
    "What would you be doing right now if you weren't talking to us?",
    "Is it noisy around here?",
    "Who else would you expect to meet here?",
]


class DummyAgent(BaseAgent):
    """
    Offline agent with simple, reproducible behavior:
    - Always asks a question unless it is the spy and a guess roll succeeds
    - Asks and votes for a random other player
    - Answers with its role (civilians) or a vague line (spy)
    - Jury votes are coin flips
    - The spy guesses a random location
    """

    agent_type = "dummy_agent"

    def __init__(self, player: Player, config: GameConfig = default_config, guess_chance: float = 0.0):
        super().__init__(player, config)
        seed = config.random_seed
        if seed is not None:
            # Combine seed with seat so each player has different but reproducible randomness
            self.random = random.Random(f"{seed}:{player.id}")
        else:
            self.random = random.Random()
        self.guess_chance = guess_chance

    async def choose_action(self, players: List[Player], turns: List[Turn], can_accuse: bool) -> ActionChoice:
        if self.player.is_spy and self.random.random() < self.guess_chance:
            return ActionChoice(action=TurnAction.GUESS, thought="Feeling lucky.")
        return ActionChoice(action=TurnAction.QUESTION)

    async def ask(self, players: List[Player]) -> AskResult:
        others = self.other_players(players)
        target = self.random.choice(others).name if others else ""
        return AskResult(target_name=target, question=self.random.choice(DUMMY_QUESTIONS))

    async def answer(self, asker_name: str, question: str) -> str:
        if self.player.is_spy:
            return "Hard to say, it depends on the day."
        return f"As the {self.player.secret.role.lower()}, I'd say it's business as usual."

    async def accuse(self, players: List[Player], turns: List[Turn]) -> AccusationResult:
        others = self.other_players(players)
        target = self.random.choice(others).name if others else ""
        return AccusationResult(target_name=target, reason="Your answers don't add up.")

    async def defend_against_accusation(self, accuser_name: str, accusation: str, turns: List[Turn]) -> DefenseResult:
        return DefenseResult(defense=f"{accuser_name}, I've answered everything honestly.")

    async def vote_on_accusation(self, accuser_name: str, accused_name: str, defense: str,
                                 turns: List[Turn]) -> AccusationVoteResult:
        vote = "yes" if self.random.random() < 0.5 else "no"
        return AccusationVoteResult(vote=vote, reason="Gut feeling.")

    async def vote(self, players: List[Player], turns: List[Turn]) -> str:
        others = self.other_players(players)
        target = self.random.choice(others).name if others else ""
        return f"VOTE: {target}\nWHY: Gut feeling."

    async def guess_location(self, turns: List[Turn], when_caught: bool) -> Optional[str]:
        if not self.player.is_spy:
            return None
        return f"GUESS: {self.random.choice(all_location_names())}\nREASON: A wild guess."
