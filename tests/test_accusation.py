"""
Tests for mid-game accusations.
"""

import asyncio
from spyfall.core import GamePhase, Team
from spyfall.phases import AccusationHandler, SpyGuessHandler

from conftest import events_of


def _handler(game_state, judge, event_emitter):
    spy_guess = SpyGuessHandler(game_state, judge, event_emitter)
    return AccusationHandler(game_state, judge, spy_guess, event_emitter)


def _accuse(handler, game_state, agents, accuser_name, sample_turns):
    accuser = judge_player(game_state, accuser_name)
    return asyncio.run(handler.handle_accusation(accuser, agents, sample_turns))


def judge_player(game_state, name):
    return next(p for p in game_state.players if p.name == name)


def test_unknown_target_voids_accusation(game_state, judge, agents, event_emitter, sample_turns):
    agents["p1"].accuse_target = "Zelda"
    handler = _handler(game_state, judge, event_emitter)

    result = _accuse(handler, game_state, agents, "Alice", sample_turns)

    assert result.ended is False
    assert "Alice tried to make an invalid accusation. Skipping." in judge.announcements
    assert all("defend" not in agent.calls for agent in agents.values())


def test_self_accusation_is_void(game_state, judge, agents, event_emitter, sample_turns):
    agents["p1"].accuse_target = "alice"
    handler = _handler(game_state, judge, event_emitter)

    result = _accuse(handler, game_state, agents, "Alice", sample_turns)

    assert result.ended is False
    assert all("vote_on_accusation" not in agent.calls for agent in agents.values())


def test_not_convicted_restores_phase(game_state, judge, agents, event_emitter, recorded_events, sample_turns):
    game_state.start_phase(GamePhase.QUESTIONS)
    agents["p1"].accuse_target = "Carol"
    handler = _handler(game_state, judge, event_emitter)

    result = _accuse(handler, game_state, agents, "Alice", sample_turns)

    assert result.ended is False
    assert game_state.phase == GamePhase.QUESTIONS
    # Accuser and accused vote without being asked
    assert "vote_on_accusation" not in agents["p1"].calls
    assert "vote_on_accusation" not in agents["p3"].calls
    assert "defend" in agents["p3"].calls

    accusation = events_of(recorded_events, "accusation")[0]
    assert accusation["yes_votes"] == 1
    assert accusation["no_votes"] == 3
    assert accusation["majority"] == 3
    assert accusation["convicted"] is False


def test_half_of_table_is_not_enough(game_state, judge, agents, event_emitter, sample_turns):
    agents["p1"].accuse_target = "Carol"
    agents["p2"].jury_vote = "yes"
    handler = _handler(game_state, judge, event_emitter)

    result = _accuse(handler, game_state, agents, "Alice", sample_turns)
    assert result.ended is False


def test_convicting_innocent_hands_spy_the_win(game_state, judge, agents, event_emitter, sample_turns):
    agents["p1"].accuse_target = "Carol"
    agents["p2"].jury_vote = "yes"
    agents["p4"].jury_vote = "yes"
    handler = _handler(game_state, judge, event_emitter)

    result = _accuse(handler, game_state, agents, "Alice", sample_turns)

    assert result.ended is True
    assert result.winner == Team.SPY
    assert result.reason == "Civilians convicted Carol but the spy was Bob!"
    assert agents["p2"].guess_calls == []


def test_convicted_spy_guessing_right_still_wins(game_state, judge, agents, event_emitter, recorded_events, sample_turns):
    agents["p1"].accuse_target = "Bob"
    agents["p3"].jury_vote = "yes"
    agents["p4"].jury_vote = "yes"
    agents["p2"].guess_text = "GUESS: Airplane\nREASON: Someone mentioned seat belts."
    handler = _handler(game_state, judge, event_emitter)

    result = _accuse(handler, game_state, agents, "Alice", sample_turns)

    assert result.ended is True
    assert result.winner == Team.SPY
    assert result.reason == "Spy was caught but correctly guessed the location!"
    assert agents["p2"].guess_calls == [True]
    guess = events_of(recorded_events, "spy_guess")[0]
    assert guess["correct"] is True
    assert guess["when_caught"] is True


def test_convicted_spy_without_guess_loses(game_state, judge, agents, event_emitter, sample_turns):
    agents["p3"].accuse_target = "bob"
    agents["p1"].jury_vote = "yes"
    agents["p4"].jury_vote = "yes"
    agents["p2"].guess_text = None
    handler = _handler(game_state, judge, event_emitter)

    result = _accuse(handler, game_state, agents, "Carol", sample_turns)

    assert result.ended is True
    assert result.winner == Team.CIVILIANS
    assert result.reason == "Spy was caught and couldn't guess the location!"
