"""
Game configuration and constants.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Dict, List, Union

AGENT_TYPES = ("simple_llm_agent", "dummy_agent", "human")

# LLM providers a seat can be played by, and the order mixed tables rotate through
PROVIDER_TYPES = ("openai", "anthropic", "google")
DEFAULT_PROVIDER_ROTATION = list(PROVIDER_TYPES)

# "memory" resends the whole conversation; "stateful" lets the provider keep it
AGENT_MODES = ("memory", "stateful")
STATEFUL_PROVIDERS = ("openai",)


@dataclass(frozen=True)
class PlayerSlot:
    """One resolved seat: who plays it and, for LLM seats, with which provider and model."""

    agent_type: str
    provider: Optional[str] = None
    model: Optional[str] = None
    mode: str = "memory"

    @property
    def is_human(self) -> bool:
        return self.agent_type == "human"

    def describe(self) -> str:
        if not self.provider:
            return self.agent_type
        label = f"{self.provider}/{self.model}" if self.model else self.provider
        return f"{label}:{self.mode}" if self.mode != "memory" else label


def parse_player_slot(raw: Union[str, Dict[str, Any]], default_mode: str = "memory") -> PlayerSlot:
    """
    Read one `player_slots` entry.

    Entries are an agent type ("human", "dummy_agent", "simple_llm_agent"), a
    provider with an optional mode ("anthropic", "openai:stateful"), or a
    mapping like {type: google, model: gemini-2.5-flash, mode: memory}.
    "thread" is accepted as an older name for the stateful mode.
    """
    if isinstance(raw, dict):
        kind = str(raw.get("type", "")).strip().lower()
        model = raw.get("model")
        mode = str(raw.get("mode") or default_mode).strip().lower()
    else:
        kind, _, mode = str(raw).strip().lower().partition(":")
        model = None
        mode = mode or default_mode

    if mode == "thread":
        mode = "stateful"
    if kind in PROVIDER_TYPES:
        return PlayerSlot("simple_llm_agent", provider=kind, model=model, mode=mode)
    return PlayerSlot(kind, model=model, mode=mode)


@dataclass
class GameConfig:
    """Configuration for game parameters."""

    # Game settings
    rounds: int = 9  # Number of question/answer turns, not full cycles
    num_players: int = 4
    allow_early_vote: bool = True  # Players may start an accusation on their turn
    enable_reactions: bool = True  # Bystanders react to each question and answer

    # LLM settings
    llm_model: Optional[str] = None  # Model for OpenAI seats; OPENAI_MODEL or gpt-4.1-mini when unset
    llm_temperature: float = 0.7
    max_action_tokens: int = 16000  # gpt-5 models need extra room for reasoning
    providers: Optional[List[str]] = field(default=None)  # Rotation for simple_llm_agent seats; OpenAI only when unset
    agent_mode: str = "memory"  # Mode of rotated seats: "memory" or "stateful"

    # Agent settings
    agent_type: str = "simple_llm_agent"  # Options: "simple_llm_agent", "dummy_agent" or "human" (used if player_slots not specified)
    player_slots: Optional[List[Union[str, Dict[str, Any]]]] = field(default=None)  # Per-seat agent types or providers, in seating order
    include_human: bool = False  # Seat a human in slot 1 (ignored when player_slots is set)
    personalities: Optional[Dict[int, str]] = field(default=None)  # {seat_number: personality_id}; random when missing
    random_seed: Optional[int] = None  # Random seed for reproducible setup and dummy agents

    # Output
    use_judge_announcements: bool = True  # Print narration to stdout
    runs_dir: str = "runs"

    def get_seats(self) -> List[PlayerSlot]:
        """
        Resolve every seat in order.

        simple_llm_agent seats without a provider take the next one from
        `providers`, cycling in seat order. OpenAI seats without a model get
        `llm_model`.
        """
        if self.player_slots:
            raw_slots = list(self.player_slots)
        else:
            raw_slots = [self.agent_type] * self.num_players
            if self.include_human and raw_slots:
                raw_slots[0] = "human"

        agent_mode = self.agent_mode.lower()
        rotation = [p.lower() for p in self.providers] if self.providers else ["openai"]
        seats = []
        rotated = 0
        for raw in raw_slots:
            seat = parse_player_slot(raw, agent_mode)
            if seat.agent_type == "simple_llm_agent" and seat.provider is None:
                seat = PlayerSlot(seat.agent_type, rotation[rotated % len(rotation)], seat.model, seat.mode)
                rotated += 1
            if seat.provider == "openai" and seat.model is None and self.llm_model:
                seat = PlayerSlot(seat.agent_type, seat.provider, self.llm_model, seat.mode)
            seats.append(seat)
        return seats

    def get_player_slots(self) -> List[str]:
        """Resolve the agent type of every seat."""
        return [seat.agent_type for seat in self.get_seats()]


# Default configuration instance
default_config = GameConfig()
