"""
Core game engine components: game state, players, locations, and rule enforcement.
"""

from .game_engine import GameState, GamePhase, EarlyEndResult, RoundsResult, GameOutcome
from .player import Player, PlayerSecret, SecretKind, Team, Turn, TurnAction
from .locations import LocationPack, LOCATIONS, all_location_names, get_location, pick_random_location
from .judge import Judge, TallyResult, normalize_name
from .parsing import parse_field

__all__ = [
    'GameState',
    'GamePhase',
    'EarlyEndResult',
    'RoundsResult',
    'GameOutcome',
    'Player',
    'PlayerSecret',
    'SecretKind',
    'Team',
    'Turn',
    'TurnAction',
    'LocationPack',
    'LOCATIONS',
    'all_location_names',
    'get_location',
    'pick_random_location',
    'Judge',
    'TallyResult',
    'normalize_name',
    'parse_field',
]
