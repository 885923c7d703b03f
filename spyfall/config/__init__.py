"""Game configuration: the GameConfig dataclass and YAML loading."""

from .game_config import (
    GameConfig, PlayerSlot, default_config, parse_player_slot,
    AGENT_TYPES, AGENT_MODES, PROVIDER_TYPES, DEFAULT_PROVIDER_ROTATION, STATEFUL_PROVIDERS,
)
from .config_loader import load_config, load_config_from_yaml, validate_config

__all__ = [
    'GameConfig', 'PlayerSlot', 'default_config', 'parse_player_slot', 'AGENT_TYPES', 'AGENT_MODES',
    'PROVIDER_TYPES', 'DEFAULT_PROVIDER_ROTATION', 'STATEFUL_PROVIDERS',
    'load_config', 'load_config_from_yaml', 'validate_config',
]
