"""
Tests for bystander reactions.
"""

import asyncio
import pytest
from spyfall.agents import LLMCallError, ReactionResult
from spyfall.phases import ReactionsHandler

from conftest import events_of


def test_reactions_logged_in_reactor_order(game_state, judge, agents, event_emitter, recorded_events):
    alice, bob, carol, dave = game_state.players

    async def slow_reaction(event_type, author_name, content):
        await asyncio.sleep(0.05)
        return ReactionResult(emoji="😮", reaction="Slow but sure.")

    agents["p3"].react = slow_reaction
    agents["p4"].reaction = ReactionResult(emoji="😂", reaction="Fast one!", suspicion="Alice is hiding something")

    handler = ReactionsHandler(game_state, judge, event_emitter)
    collected = asyncio.run(handler.collect_reactions([carol, dave], agents, "question", "Alice", "Where are we?"))

    assert [player.name for player, _ in collected] == ["Carol", "Dave"]
    assert [e["player_name"] for e in events_of(recorded_events, "reaction")] == ["Carol", "Dave"]
    assert events_of(recorded_events, "reaction")[1]["suspicion"] == "Alice is hiding something"


def test_empty_reactions_are_skipped(game_state, judge, agents, event_emitter, recorded_events):
    alice, bob, carol, dave = game_state.players
    agents["p2"].reaction = ReactionResult(emoji="", reaction="")
    agents["p3"].reaction = ReactionResult(emoji="👀", reaction="")

    handler = ReactionsHandler(game_state, judge, event_emitter)
    collected = asyncio.run(handler.collect_reactions([bob, carol], agents, "answer", "Dave", "It's fine."))

    assert collected == []
    assert events_of(recorded_events, "reaction") == []


def test_no_reactors(game_state, judge, agents):
    handler = ReactionsHandler(game_state, judge)
    assert asyncio.run(handler.collect_reactions([], agents, "question", "Alice", "Hi")) == []


def test_failed_reaction_waits_for_other_reactors(game_state, judge, agents, event_emitter, recorded_events):
    alice, bob, carol, dave = game_state.players
    finished = []

    async def failing_reaction(event_type, author_name, content):
        raise LLMCallError("Carol", "react", "connection reset")

    async def slow_reaction(event_type, author_name, content):
        await asyncio.sleep(0.05)
        finished.append("Dave")
        return ReactionResult(emoji="😮", reaction="Slow but sure.")

    agents["p3"].react = failing_reaction
    agents["p4"].react = slow_reaction

    async def react_then_check_tasks():
        with pytest.raises(LLMCallError):
            await ReactionsHandler(game_state, judge, event_emitter).collect_reactions(
                [carol, dave], agents, "question", "Alice", "Where are we?"
            )
        return [task for task in asyncio.all_tasks() if task is not asyncio.current_task()]

    leftover = asyncio.run(react_then_check_tasks())

    assert leftover == []
    assert finished == ["Dave"]
    assert events_of(recorded_events, "reaction") == []
