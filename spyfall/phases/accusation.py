"""
Mid-game accusation: defense, jury vote and conviction.
"""

from typing import Dict, List, Optional, TYPE_CHECKING

from ..core import GameState, GamePhase, Judge, EarlyEndResult, Player, Team, Turn
from ..agents import BaseAgent
from .spy_guess import SpyGuessHandler

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


class AccusationHandler:
    """Resolves a single accusation to either an early end or a "continue" signal."""

    def __init__(self, game_state: GameState, judge: Judge, spy_guess_handler: SpyGuessHandler,
                 event_emitter: Optional['EventEmitter'] = None):
        self.game_state = game_state
        self.judge = judge
        self.spy_guess_handler = spy_guess_handler
        self.event_emitter = event_emitter

    async def handle_accusation(self, accuser: Player, agents: Dict[str, BaseAgent], turns: List[Turn]) -> EarlyEndResult:
        """
        Run one accusation started by `accuser`.

        The accuser votes yes and the accused votes no without being asked;
        every other player is asked for a jury vote. Conviction needs a strict
        majority of the whole table.
        """
        players = self.game_state.players
        spy = self.game_state.get_spy()

        accusation = await agents[accuser.id].accuse(list(players), list(turns))
        accused = self.judge.find_player(accusation.target_name)

        if accused is None or accused.id == accuser.id:
            self.judge.announce(f"{accuser.name} tried to make an invalid accusation. Skipping.")
            return EarlyEndResult.not_ended()

        previous_phase = self.game_state.phase
        self.game_state.start_phase(GamePhase.ACCUSATION)

        reason = accusation.reason or "No reason given"
        self.judge.announce(f"\n{accuser.name} accuses {accused.name} of being the spy!")
        if accusation.reason:
            self.judge.announce(f'"{accusation.reason}"')

        defense_result = await agents[accused.id].defend_against_accusation(accuser.name, reason, list(turns))
        self.judge.announce(f"\n{accused.name} defends themselves:")
        if defense_result.thought:
            self.judge.announce(f'{accused.name}\'s strategy: "{defense_result.thought}"')
        self.judge.announce(f'"{defense_result.defense}"')

        yes_votes = 1
        no_votes = 1
        self.judge.announce("\nVoting on the accusation...")
        self.judge.announce(f"{accuser.name}: YES (accuser)")
        self.judge.announce(f"{accused.name}: NO (accused)")

        jurors = [p for p in players if p.id not in (accuser.id, accused.id)]
        for juror in jurors:
            result = await agents[juror.id].vote_on_accusation(
                accuser.name, accused.name, defense_result.defense, list(turns)
            )
            if result.is_yes:
                yes_votes += 1
            else:
                no_votes += 1
            self.judge.announce(f'{juror.name}: {"YES" if result.is_yes else "NO"} - "{result.reason}"')

        majority = self.judge.majority_threshold(len(players))
        convicted = self.judge.is_convicted(yes_votes, len(players))
        self.judge.announce(f"\nResults: {yes_votes} YES, {no_votes} NO (need {majority} for majority)")

        if self.event_emitter:
            self.event_emitter.emit_accusation(
                accuser.name, accused.name, accusation.reason, yes_votes, no_votes, majority, convicted
            )

        if not convicted:
            self.judge.announce(f"Not enough votes. {accused.name} is NOT convicted.")
            self.game_state.start_phase(previous_phase)
            return EarlyEndResult.not_ended()

        self.judge.announce(f"The group convicts {accused.name}!")
        self.judge.announce(f"REVEAL: The Spy was {spy.name}!")

        if accused.id != spy.id:
            return EarlyEndResult.end(Team.SPY, f"Civilians convicted {accused.name} but the spy was {spy.name}!")

        self.judge.announce(f"\n{spy.name} was caught! But gets one last chance to guess the location...")
        self.game_state.start_phase(GamePhase.SPY_GUESS)
        guess = await self.spy_guess_handler.resolve_guess(agents, turns, when_caught=True)
        if guess.correct:
            return EarlyEndResult.end(Team.SPY, "Spy was caught but correctly guessed the location!")
        return EarlyEndResult.end(Team.CIVILIANS, "Spy was caught and couldn't guess the location!")
