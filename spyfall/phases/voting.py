"""
End-of-rounds voting, tally and the spy's last guess.
"""

from typing import Dict, List, Optional, TYPE_CHECKING

from ..core import GameState, GamePhase, Judge, TallyResult, Turn, parse_field, normalize_name
from ..agents import BaseAgent
from .spy_guess import SpyGuessHandler

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


class VotingHandler:
    """Handles the final vote once all rounds are played."""

    def __init__(self, game_state: GameState, judge: Judge, event_emitter: Optional['EventEmitter'] = None,
                 spy_guess_handler: Optional[SpyGuessHandler] = None):
        self.game_state = game_state
        self.judge = judge
        self.event_emitter = event_emitter
        self.spy_guess_handler = spy_guess_handler or SpyGuessHandler(game_state, judge, event_emitter)

    async def collect_votes(self, agents: Dict[str, BaseAgent], turns: List[Turn]) -> Dict[str, int]:
        """
        Ask every player, one at a time in seating order, who the spy is.

        A vote naming nobody valid (or the voter) goes to a random other player.

        Returns:
            Vote count per player name
        """
        self.judge.announce("\n=== VOTING PHASE ===")
        players = self.game_state.players
        votes: Dict[str, int] = {}

        for player in players:
            raw = await agents[player.id].vote(list(players), list(turns))
            thought = parse_field("THOUGHT", raw)
            vote_name = parse_field("VOTE", raw)
            why = parse_field("WHY", raw)

            if thought:
                self.judge.announce(f'\n{player.name}\'s voting logic: "{thought}"')

            target, used_fallback = self.judge.resolve_vote_target(player, vote_name)
            votes[target.name] = votes.get(target.name, 0) + 1
            self.judge.announce(f"{player.name} voted for: {target.name}" + (f" ({why})" if why else ""))

            if self.event_emitter:
                self.event_emitter.emit_vote(player.name, target.name, why, used_fallback)

        return votes

    async def run_voting_phase(self, agents: Dict[str, BaseAgent], turns: List[Turn]) -> TallyResult:
        """Collect votes and tally them."""
        self.game_state.start_phase(GamePhase.VOTING)
        counts = await self.collect_votes(agents, turns)
        tally = self.judge.tally_votes(counts)

        if self.event_emitter:
            self.event_emitter.emit_vote_results(tally.counts, tally.accused_name, tally.is_tie)

        spy = self.game_state.get_spy()
        if tally.is_tie:
            self.judge.announce("\nVERDICT: A tie! The group is paralyzed by doubt.")
        else:
            self.judge.announce(f"\nVERDICT: The group accuses {tally.accused_name}!")
        self.judge.announce(f"REVEAL: The Spy was {spy.name}!")
        return tally

    async def run_spy_guess_if_eligible(self, tally: TallyResult, agents: Dict[str, BaseAgent],
                                        turns: List[Turn]) -> bool:
        """
        Give the spy a last guess when they were accused or the vote tied.

        Returns:
            True if the spy guessed the location
        """
        spy = self.game_state.get_spy()
        accused_spy = tally.accused_name is not None and normalize_name(tally.accused_name) == normalize_name(spy.name)
        if not (accused_spy or tally.is_tie):
            return False

        self.game_state.start_phase(GamePhase.SPY_GUESS)
        self.judge.announce(f"\n{spy.name} attempts a final guess...")
        result = await self.spy_guess_handler.resolve_guess(agents, turns, when_caught=True)
        return result.correct
