"""
Pytest fixtures for Spyfall game tests.
"""

import pytest
from typing import Dict, List, Optional

from spyfall.core import (
    GameState, Judge, LocationPack, Player, PlayerSecret, Turn
)
from spyfall.agents import (
    BaseAgent, ActionChoice, AskResult, AccusationResult, DefenseResult,
    AccusationVoteResult, ReactionResult,
)
from spyfall.config.game_config import GameConfig, default_config
from spyfall.web import EventEmitter


class ScriptedAgent(BaseAgent):
    """
    Agent whose replies are set directly on its attributes.

    `actions` is a queue of turn choices; once empty the agent asks a question.
    Every call is recorded in `calls` by method name.
    """

    agent_type = "scripted"

    def __init__(self, player: Player, config: GameConfig = default_config):
        super().__init__(player, config)
        self.actions: List[ActionChoice] = []
        self.ask_target = ""
        self.question = "What can you see from where you are?"
        self.answer_text = "Lots of people, mostly sitting down."
        self.accuse_target = ""
        self.accuse_reason = "Your answers are too vague."
        self.defense = "I've been as clear as anyone."
        self.jury_vote = "no"
        self.vote_text = ""
        self.guess_text: Optional[str] = None
        self.reaction = ReactionResult()
        self.calls: List[str] = []
        self.guess_calls: List[bool] = []
        self.cleaned_up = False

    async def choose_action(self, players, turns, can_accuse):
        self.calls.append("choose_action")
        if self.actions:
            return self.actions.pop(0)
        return ActionChoice()

    async def ask(self, players):
        self.calls.append("ask")
        return AskResult(target_name=self.ask_target, question=self.question)

    async def answer(self, asker_name, question):
        self.calls.append("answer")
        return self.answer_text

    async def accuse(self, players, turns):
        self.calls.append("accuse")
        return AccusationResult(target_name=self.accuse_target, reason=self.accuse_reason)

    async def defend_against_accusation(self, accuser_name, accusation, turns):
        self.calls.append("defend")
        return DefenseResult(defense=self.defense)

    async def vote_on_accusation(self, accuser_name, accused_name, defense, turns):
        self.calls.append("vote_on_accusation")
        return AccusationVoteResult(vote=self.jury_vote, reason="Just a hunch.")

    async def vote(self, players, turns):
        self.calls.append("vote")
        return self.vote_text

    async def guess_location(self, turns, when_caught):
        self.calls.append("guess_location")
        self.guess_calls.append(when_caught)
        return self.guess_text

    async def react(self, event_type, author_name, content):
        self.calls.append("react")
        return self.reaction

    async def cleanup(self):
        self.cleaned_up = True


@pytest.fixture
def game_config():
    """Test game configuration."""
    return GameConfig(
        rounds=4,
        random_seed=7,
        enable_reactions=False,
        use_judge_announcements=False  # Disable for cleaner test output
    )


@pytest.fixture
def airplane_pack():
    return LocationPack("Airplane", ("Captain", "Co-Pilot", "Flight Attendant", "Mechanic"))


@pytest.fixture
def game_state(airplane_pack):
    """
    Four seated players with a fixed deal:
    Alice (Captain), Bob (SPY), Carol (Co-Pilot), Dave (Flight Attendant).
    """
    state = GameState(random_seed=7)
    state.pack = airplane_pack
    state.players = [
        Player("p1", "Alice", False, PlayerSecret.civilian("Airplane", "Captain")),
        Player("p2", "Bob", False, PlayerSecret.spy()),
        Player("p3", "Carol", False, PlayerSecret.civilian("Airplane", "Co-Pilot")),
        Player("p4", "Dave", False, PlayerSecret.civilian("Airplane", "Flight Attendant")),
    ]
    return state


@pytest.fixture
def recorded_events():
    """Events seen by the emitter, as (event_type, data) pairs."""
    return []


@pytest.fixture
def event_emitter(recorded_events):
    emitter = EventEmitter()
    emitter.register_listener(lambda event_type, data: recorded_events.append((event_type, data)))
    return emitter


@pytest.fixture
def judge(game_state, game_config, event_emitter):
    """Create a judge instance."""
    return Judge(game_state, game_config, event_emitter=event_emitter)


@pytest.fixture
def agents(game_state, game_config) -> Dict[str, ScriptedAgent]:
    """One scripted agent per player, keyed by player id."""
    return {player.id: ScriptedAgent(player, game_config) for player in game_state.players}


@pytest.fixture
def spy_player(game_state) -> Player:
    return game_state.get_spy()


@pytest.fixture
def sample_turns() -> List[Turn]:
    return [
        Turn("p1", "p3", "Do you like your job?", "It has its ups and downs."),
        Turn("p3", "p2", "How did you get here?", "Same as everyone else."),
    ]


def events_of(recorded_events, event_type: str) -> List[dict]:
    """Payloads of every recorded event of one type."""
    return [data for kind, data in recorded_events if kind == event_type]
