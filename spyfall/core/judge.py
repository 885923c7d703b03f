"""
Judge/Moderator system for rule enforcement and game narration.
"""

import re
from typing import List, Optional, Dict, Tuple, TYPE_CHECKING
from dataclasses import dataclass, field

from .game_engine import GameState
from .player import Player, Team, TurnAction
from ..config.game_config import GameConfig, default_config

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


REASON_LOCATION_GUESSED = "Correctly identified the location"
REASON_SPY_CAUGHT = "Spy was caught"
REASON_TOTAL_DECEPTION = "Total deception"


def normalize_name(name: Optional[str]) -> str:
    """
    Canonical form used to compare player names and location guesses.

    Lowercases, trims, collapses inner whitespace, drops trailing punctuation
    and a leading "the ".
    """
    if not name:
        return ""
    text = re.sub(r"\s+", " ", name.strip().lower())
    text = text.strip("\"'*").rstrip(".!?,;:").strip()
    if text.startswith("the "):
        text = text[4:].strip()
    return text


@dataclass
class TallyResult:
    """Result of the end-of-rounds vote count."""
    accused_name: Optional[str]
    is_tie: bool
    counts: Dict[str, int] = field(default_factory=dict)


class Judge:
    """Judge/Moderator that enforces rules and narrates the game."""

    def __init__(self, game_state: GameState, config: GameConfig = default_config, event_emitter: Optional['EventEmitter'] = None):
        self.game_state = game_state
        self.config = config
        self.event_emitter = event_emitter
        self.announcements: List[str] = []

    @property
    def rng(self):
        return self.game_state.rng

    def announce(self, message: str) -> None:
        """Make a judge announcement."""
        self.announcements.append(message)
        if self.config.use_judge_announcements:
            print(message)
        if self.event_emitter:
            self.event_emitter.emit_log(message, self.game_state.phase.value)

    def find_player(self, name: Optional[str], candidates: Optional[List[Player]] = None) -> Optional[Player]:
        """Match a free-text name against players, ignoring case and whitespace."""
        wanted = normalize_name(name)
        if not wanted:
            return None
        for player in candidates if candidates is not None else self.game_state.players:
            if normalize_name(player.name) == wanted:
                return player
        return None

    def resolve_action(self, requested: Optional[TurnAction], player: Player, can_accuse: bool) -> TurnAction:
        """
        Downgrade an advisory action choice to one the player may legally take.

        Only the spy may guess, and accusing needs `can_accuse`. Anything else
        becomes a question.
        """
        if requested == TurnAction.GUESS and player.is_spy:
            return TurnAction.GUESS
        if requested == TurnAction.VOTE and can_accuse:
            return TurnAction.VOTE
        return TurnAction.QUESTION

    def legal_question_targets(self, asker: Player, last_asker: Optional[Player]) -> List[Player]:
        """
        Players the asker may question: not themselves and not whoever just asked them.

        When that leaves nobody (two-player games), anyone but the asker.
        """
        others = [p for p in self.game_state.players if p.id != asker.id]
        legal = [p for p in others if last_asker is None or p.id != last_asker.id]
        return legal or others

    def resolve_question_target(self, asker: Player, nominated_name: Optional[str],
                                last_asker: Optional[Player]) -> Tuple[Player, bool]:
        """
        Resolve the asker's nominated target.

        Returns:
            (target, used_fallback). A missing, unknown or illegal nomination
            falls back to a uniformly random legal target.
        """
        legal = self.legal_question_targets(asker, last_asker)
        nominated = self.find_player(nominated_name, legal)
        if nominated is not None:
            return nominated, False
        return self.rng.choice(legal), True

    def resolve_vote_target(self, voter: Player, vote_name: Optional[str]) -> Tuple[Player, bool]:
        """
        Resolve a final-vote name to a player other than the voter.

        Returns:
            (target, used_fallback)
        """
        candidates = [p for p in self.game_state.players if p.id != voter.id]
        target = self.find_player(vote_name, candidates)
        if target is not None:
            return target, False
        return self.rng.choice(candidates), True

    @staticmethod
    def majority_threshold(total_players: int) -> int:
        """Yes votes needed to convict: strict majority of the full roster."""
        return total_players // 2 + 1

    def is_convicted(self, yes_votes: int, total_players: Optional[int] = None) -> bool:
        if total_players is None:
            total_players = len(self.game_state.players)
        return yes_votes >= self.majority_threshold(total_players)

    @staticmethod
    def tally_votes(counts: Dict[str, int]) -> TallyResult:
        """
        Pick the accused from a vote count.

        Equal top counts are a tie with no accused; there is no random tie-break.
        """
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        if not ranked:
            return TallyResult(accused_name=None, is_tie=False, counts=dict(counts))
        is_tie = len(ranked) > 1 and ranked[0][1] == ranked[1][1]
        accused = None if is_tie else ranked[0][0]
        return TallyResult(accused_name=accused, is_tie=is_tie, counts=dict(counts))

    @staticmethod
    def guess_matches(guess: Optional[str], location: str) -> bool:
        """Case- and whitespace-insensitive location comparison. Empty never matches."""
        normalized = normalize_name(guess)
        return bool(normalized) and normalized == normalize_name(location)

    @staticmethod
    def resolve_winner(accused_name: Optional[str], is_tie: bool, spy_name: str,
                       spy_guessed_right: bool) -> Tuple[Team, str]:
        """
        Decide the winner after final voting.

        A correct spy guess always wins for the spy. Otherwise civilians win
        only if they accused the spy; a tie or a wrong accusation is a spy win.
        """
        if spy_guessed_right:
            return Team.SPY, REASON_LOCATION_GUESSED
        if accused_name is not None and not is_tie and normalize_name(accused_name) == normalize_name(spy_name):
            return Team.CIVILIANS, REASON_SPY_CAUGHT
        return Team.SPY, REASON_TOTAL_DECEPTION
