"""
YAML loading and validation of game configurations.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional

from .game_config import GameConfig, AGENT_TYPES, AGENT_MODES, PROVIDER_TYPES, STATEFUL_PROVIDERS


def _coerce_personalities(raw: Any) -> Optional[Dict[int, str]]:
    """YAML gives seat keys as ints or strings depending on quoting."""
    if not raw:
        return None
    if not isinstance(raw, dict):
        raise ValueError("personalities must map seat numbers to personality ids")
    return {int(seat): str(personality_id) for seat, personality_id in raw.items()}


def validate_config(config: GameConfig) -> GameConfig:
    """
    Check a configuration before a game is built from it.

    Raises:
        ValueError: On unknown agent types, providers or modes, a stateful seat
            on a provider without server-side history, fewer than 2 seats, or a
            non-positive round count
    """
    for provider in config.providers or []:
        if provider.lower() not in PROVIDER_TYPES:
            raise ValueError(f"Unknown provider: {provider}. Must be one of {', '.join(PROVIDER_TYPES)}")

    seats = config.get_seats()
    for seat in seats:
        if seat.agent_type not in AGENT_TYPES:
            raise ValueError(
                f"Unknown agent type: {seat.agent_type}. "
                f"Must be one of {', '.join(AGENT_TYPES + PROVIDER_TYPES)}"
            )
        if seat.provider is None:
            continue
        if seat.mode not in AGENT_MODES:
            raise ValueError(f"Unknown agent mode: {seat.mode}. Must be one of {', '.join(AGENT_MODES)}")
        if seat.mode == "stateful" and seat.provider not in STATEFUL_PROVIDERS:
            raise ValueError(f"{seat.provider} does not support stateful mode; use memory")

    if len(seats) < 2:
        raise ValueError(f"Spyfall needs at least 2 players, got {len(seats)}")
    if config.rounds < 1:
        raise ValueError(f"rounds must be at least 1, got {config.rounds}")
    return config


def load_config_from_yaml(config_path: str) -> GameConfig:
    """
    Load game configuration from a YAML file.

    Keys missing from the file keep their defaults; unknown keys are reported
    and ignored.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Validated GameConfig

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the YAML file is invalid
        ValueError: If the resulting configuration is not playable
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, 'r') as f:
        values = yaml.safe_load(f) or {}

    config = GameConfig()
    for key, value in values.items():
        if not hasattr(config, key):
            print(f"Warning: Unknown config key '{key}' in YAML file")
            continue
        if key == "personalities":
            value = _coerce_personalities(value)
        setattr(config, key, value)

    return validate_config(config)


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """Load a YAML configuration, or a fresh default one when no path is given."""
    if config_path is None:
        return GameConfig()
    return load_config_from_yaml(config_path)
