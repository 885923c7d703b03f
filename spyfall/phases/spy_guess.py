"""
Spy location guess, shared by voluntary guesses and last-chance guesses after being caught.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, TYPE_CHECKING

from ..core import GameState, Judge, EarlyEndResult, Team, Turn, parse_field
from ..agents import BaseAgent

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


@dataclass
class SpyGuessResult:
    guess: str
    reason: str
    correct: bool


class SpyGuessHandler:
    """Asks the spy for a location guess and checks it."""

    def __init__(self, game_state: GameState, judge: Judge, event_emitter: Optional['EventEmitter'] = None):
        self.game_state = game_state
        self.judge = judge
        self.event_emitter = event_emitter

    async def resolve_guess(self, agents: Dict[str, BaseAgent], turns: List[Turn], when_caught: bool) -> SpyGuessResult:
        """
        Get the spy's guess and compare it with the true location.

        A missing or unparseable guess counts as wrong.
        """
        spy = self.game_state.get_spy()
        raw = await agents[spy.id].guess_location(list(turns), when_caught) or ""
        guess = parse_field("GUESS", raw)
        reason = parse_field("REASON", raw)

        self.judge.announce(f'{spy.name}: "I believe we are at the {guess.upper() or "..."}!"')
        if reason:
            self.judge.announce(f'Reason: "{reason}"')

        correct = self.judge.guess_matches(guess, self.game_state.pack.location)
        if self.event_emitter:
            self.event_emitter.emit_spy_guess(spy.name, guess, reason, correct, when_caught)
        return SpyGuessResult(guess=guess, reason=reason, correct=correct)

    async def handle_early_guess(self, agents: Dict[str, BaseAgent], turns: List[Turn]) -> EarlyEndResult:
        """Voluntary guess during the question rounds. Ends the game either way."""
        spy = self.game_state.get_spy()
        self.judge.announce(f"\n{spy.name} is taking a risk and guessing the location!")

        result = await self.resolve_guess(agents, turns, when_caught=False)
        if result.correct:
            return EarlyEndResult.end(Team.SPY, "Spy correctly guessed the location!")
        return EarlyEndResult.end(Team.CIVILIANS, "Spy guessed wrong!")
