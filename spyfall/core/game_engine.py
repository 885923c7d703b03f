"""
Core game state: setup, phase transitions and end-of-game records.
"""

import random
from enum import Enum
from typing import List, Optional, Dict, Any, Sequence, Tuple, TYPE_CHECKING
from dataclasses import dataclass, field

from .player import Player, PlayerSecret, Team, Turn
from .locations import LocationPack, pick_random_location

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


class GamePhase(Enum):
    """Current game phase."""
    SETUP = "setup"
    QUESTIONS = "questions"
    ACCUSATION = "accusation"
    VOTING = "voting"
    SPY_GUESS = "spy_guess"
    GAME_OVER = "game_over"
    FAILED = "failed"  # Session aborted by a controller failure


@dataclass
class EarlyEndResult:
    """Outcome of a path that can stop the question rounds before the budget runs out."""
    ended: bool = False
    winner: Optional[Team] = None
    reason: str = ""

    @classmethod
    def not_ended(cls) -> "EarlyEndResult":
        return cls(ended=False)

    @classmethod
    def end(cls, winner: Team, reason: str) -> "EarlyEndResult":
        return cls(ended=True, winner=winner, reason=reason)


@dataclass
class RoundsResult:
    """Transcript produced by the question rounds, plus any early end."""
    turns: List[Turn]
    early_end: EarlyEndResult


@dataclass
class GameOutcome:
    """Final result payload of a session."""
    winner: Team
    reason: str
    accused_name: Optional[str] = None
    is_tie: bool = False
    early_end: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "winner": self.winner.value,
            "reason": self.reason,
            "accused_name": self.accused_name,
            "is_tie": self.is_tie,
            "early_end": self.early_end,
        }


@dataclass
class GameState:
    """Complete game state."""
    phase: GamePhase = GamePhase.SETUP
    players: List[Player] = field(default_factory=list)
    pack: Optional[LocationPack] = None

    # Game history
    action_log: List[Dict[str, Any]] = field(default_factory=list)

    # Result
    outcome: Optional[GameOutcome] = None
    random_seed: Optional[int] = None  # Seed for reproducible setup and fallbacks

    # Event emitter for reporting (optional)
    event_emitter: Optional['EventEmitter'] = None

    def __post_init__(self):
        self.rng = random.Random(self.random_seed)

    def setup_game(self, seats: Sequence[Tuple[str, bool]], pack: Optional[LocationPack] = None) -> None:
        """
        Create players and deal secrets.

        Exactly one seat, chosen uniformly, becomes the spy. Every other seat
        becomes a civilian at the same location with a distinct role drawn
        without replacement from the pack's role pool.

        Args:
            seats: (name, is_human) for each player, in seating order
            pack: Location to use; picked at random when omitted

        Raises:
            ValueError: If fewer than 2 seats, duplicate names, or too few roles
        """
        if len(seats) < 2:
            raise ValueError(f"Spyfall needs at least 2 players, got {len(seats)}")

        names = [name.strip().lower() for name, _ in seats]
        if len(set(names)) != len(names):
            raise ValueError("Player names must be unique")

        civilians = len(seats) - 1
        if pack is None:
            pack = pick_random_location(self.rng, min_roles=civilians)
        elif len(pack.roles) < civilians:
            raise ValueError(
                f"Location {pack.location} has {len(pack.roles)} roles but {civilians} civilians need one"
            )

        spy_index = self.rng.randrange(len(seats))
        roles = self.rng.sample(list(pack.roles), civilians)

        self.pack = pack
        self.players = []
        for index, (name, is_human) in enumerate(seats):
            if index == spy_index:
                secret = PlayerSecret.spy()
            else:
                secret = PlayerSecret.civilian(pack.location, roles.pop())
            self.players.append(Player(id=f"p{index + 1}", name=name, is_human=is_human, secret=secret))

        self._log_action("game_start", {"players": len(self.players), "location": pack.location})

    def get_player(self, player_id: str) -> Optional[Player]:
        """Get player by id."""
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def get_spy(self) -> Player:
        """Get the spy. Setup guarantees there is exactly one."""
        return next(p for p in self.players if p.is_spy)

    def get_civilians(self) -> List[Player]:
        """Get all civilian players."""
        return [p for p in self.players if not p.is_spy]

    def start_phase(self, phase: GamePhase) -> None:
        """Transition to a new phase."""
        self.phase = phase
        self._log_action("phase_start", {"phase": phase.value})
        if self.event_emitter:
            self.event_emitter.emit_phase_change(phase.value)

    def end_game(self, outcome: Optional[GameOutcome] = None, reason: str = "win_condition") -> None:
        """End the game with an outcome or failure."""
        if reason == "failed":
            self.phase = GamePhase.FAILED
            self.outcome = None
            self._log_action("game_failed", {})
        else:
            self.phase = GamePhase.GAME_OVER
            self.outcome = outcome
            self._log_action("game_over", outcome.to_dict() if outcome else {})
        if self.event_emitter:
            self.event_emitter.emit_phase_change(self.phase.value)

    def _log_action(self, action_type: str, data: Dict[str, Any]) -> None:
        """Log a game action."""
        self.action_log.append({
            "type": action_type,
            "phase": self.phase.value,
            "data": data
        })

    def get_game_info(self, all_locations: List[str], config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Snapshot of the dealt game, emitted once at setup for the reporting layer."""
        return {
            "location": self.pack.location if self.pack else None,
            "all_locations": all_locations,
            "roles": list(self.pack.roles) if self.pack else [],
            "players": [
                {"name": p.name, "role": p.role_name, "is_spy": p.is_spy, "is_human": p.is_human}
                for p in self.players
            ],
            "config": config or {},
        }

    def get_game_summary(self) -> Dict[str, Any]:
        """Get a summary of the current game state."""
        return {
            "phase": self.phase.value,
            "players": len(self.players),
            "location": self.pack.location if self.pack else None,
            "spy": self.get_spy().name if self.players else None,
            "winner": self.outcome.winner.value if self.outcome else None,
        }
