"""
Human player driven from the terminal.
"""

import asyncio
from typing import Callable, List, Optional

from .base_agent import (
    BaseAgent, ActionChoice, AskResult, AccusationResult, DefenseResult,
    AccusationVoteResult,
)
from ..core import Player, Turn, TurnAction
from ..config.game_config import GameConfig, default_config


class HumanAgent(BaseAgent):
    """
    Reads a human's decisions from a line-input function.

    Input is read in a worker thread so the event loop stays free for other
    agents' reactions. Humans never react automatically.
    """

    agent_type = "human"

    def __init__(self, player: Player, config: GameConfig = default_config,
                 input_func: Callable[[str], str] = input):
        super().__init__(player, config)
        self.input_func = input_func

    async def _prompt(self, text: str) -> str:
        return (await asyncio.to_thread(self.input_func, text)).strip()

    def _candidates(self, players: List[Player]) -> str:
        return ", ".join(p.name for p in self.other_players(players))

    async def choose_action(self, players: List[Player], turns: List[Turn], can_accuse: bool) -> ActionChoice:
        print("\nYour turn! Choose an action:")
        print("  [Q] Ask a question")
        if self.player.is_spy:
            print("  [G] Guess the location (risky!)")
        if can_accuse:
            print("  [A] Accuse someone of being the spy!")

        choice = (await self._prompt("Your choice (Q/G/A): ")).upper()
        if choice == "G":
            return ActionChoice(action=TurnAction.GUESS)
        if choice == "A":
            return ActionChoice(action=TurnAction.VOTE)
        return ActionChoice(action=TurnAction.QUESTION)

    async def ask(self, players: List[Player]) -> AskResult:
        print("\nIt is your turn to ask.")
        target = await self._prompt(f"Choose a target ({self._candidates(players)}): ")
        question = await self._prompt("Your question: ")
        return AskResult(target_name=target, question=question)

    async def answer(self, asker_name: str, question: str) -> str:
        print(f"\n{asker_name} asked you: {question}")
        return await self._prompt("Your answer: ")

    async def accuse(self, players: List[Player], turns: List[Turn]) -> AccusationResult:
        print("\nYou're making an accusation!")
        target = await self._prompt(f"Who do you accuse? ({self._candidates(players)}): ")
        reason = await self._prompt("Why? (public statement): ")
        return AccusationResult(target_name=target, reason=reason)

    async def defend_against_accusation(self, accuser_name: str, accusation: str, turns: List[Turn]) -> DefenseResult:
        print(f"\n{accuser_name} accuses you of being the spy!")
        print(f'Their reason: "{accusation}"')
        return DefenseResult(defense=await self._prompt("Make your case! Your defense: "))

    async def vote_on_accusation(self, accuser_name: str, accused_name: str, defense: str,
                                 turns: List[Turn]) -> AccusationVoteResult:
        print(f"\n{accuser_name} accuses {accused_name} of being the spy!")
        print(f'{accused_name}\'s defense: "{defense}"')
        answer = (await self._prompt("Do you agree with the accusation? (Y/N): ")).upper()
        reason = await self._prompt("Why? (public): ")
        return AccusationVoteResult(vote="yes" if answer.startswith("Y") else "no", reason=reason)

    async def vote(self, players: List[Player], turns: List[Turn]) -> str:
        target = await self._prompt(f"\nVote for the SPY ({self._candidates(players)}): ")
        return f"VOTE: {target}"

    async def guess_location(self, turns: List[Turn], when_caught: bool) -> Optional[str]:
        if when_caught:
            print("\nYou've been caught! One last chance to guess the location.")
        else:
            print("\nYou're taking a risk and guessing the location now!")
        guess = await self._prompt("Your guess: ")
        return f"GUESS: {guess}\nREASON: Human intuition."
