"""
Player, secret and transcript types for a Spyfall session.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Team(Enum):
    """Winning side of a game."""
    SPY = "spy"
    CIVILIANS = "civilians"


class TurnAction(Enum):
    """What the current asker does with their turn."""
    QUESTION = "question"
    GUESS = "guess"
    VOTE = "vote"  # Start an accusation


class SecretKind(Enum):
    """What a player secretly knows."""
    SPY = "SPY"
    CIVILIAN = "CIVILIAN"


@dataclass(frozen=True)
class PlayerSecret:
    """
    Secret knowledge dealt to a player at setup.

    Spies carry neither a location nor a role. Civilians carry both.
    """
    kind: SecretKind
    location: Optional[str] = None
    role: Optional[str] = None

    @classmethod
    def spy(cls) -> "PlayerSecret":
        return cls(kind=SecretKind.SPY)

    @classmethod
    def civilian(cls, location: str, role: str) -> "PlayerSecret":
        return cls(kind=SecretKind.CIVILIAN, location=location, role=role)

    @property
    def is_spy(self) -> bool:
        return self.kind == SecretKind.SPY

    def brief(self) -> str:
        """Short description of the secret, as shown to its owner."""
        if self.is_spy:
            return "YOU ARE THE SPY. You do NOT know the location. Blend in!"
        return f"Location: {self.location}\nYour role: {self.role}"


@dataclass(frozen=True)
class Player:
    """Represents a participant. Immutable after setup."""
    id: str
    name: str
    is_human: bool
    secret: PlayerSecret

    def __str__(self) -> str:
        return self.name

    @property
    def is_spy(self) -> bool:
        """Check if player is the spy."""
        return self.secret.is_spy

    @property
    def role_name(self) -> str:
        """Role for display; the spy shows as SPY."""
        return "SPY" if self.is_spy else (self.secret.role or "")


@dataclass(frozen=True)
class Turn:
    """One question/answer exchange in the transcript."""
    asker_id: str
    target_id: str
    question: str
    answer: str
