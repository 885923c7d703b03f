"""
Bystander reactions to questions and answers.
"""

import asyncio
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

from ..core import GameState, Judge, Player
from ..agents import BaseAgent, ReactionResult

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


class ReactionsHandler:
    """Collects flavor reactions. Nothing in the game depends on their content."""

    def __init__(self, game_state: GameState, judge: Judge, event_emitter: Optional['EventEmitter'] = None):
        self.game_state = game_state
        self.judge = judge
        self.event_emitter = event_emitter

    async def collect_reactions(self, reactors: List[Player], agents: Dict[str, BaseAgent],
                                event_type: str, author_name: str, content: str) -> List[Tuple[Player, ReactionResult]]:
        """
        Ask every reactor in parallel and log the non-empty reactions.

        Results are logged in reactor order, not completion order.

        Raises:
            LLMCallError: The first reactor failure, once every reactor has finished
        """
        reactors = [p for p in reactors if p.id in agents]
        if not reactors:
            return []

        # All reactions settle before the first failure is re-raised
        results = await asyncio.gather(*[
            agents[p.id].react(event_type, author_name, content) for p in reactors
        ], return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result

        collected = []
        for player, result in zip(reactors, results):
            if result.is_empty:
                continue
            collected.append((player, result))
            self.judge.announce(f'  {result.emoji} {player.name}: "{result.reaction}"')
            if result.suspicion:
                self.judge.announce(f"     -> {result.suspicion}")
            if self.event_emitter:
                self.event_emitter.emit_reaction(player.name, event_type, result.emoji, result.reaction, result.suspicion)
        return collected
