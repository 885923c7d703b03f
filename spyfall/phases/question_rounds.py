"""
Question rounds: the main turn loop of questions, answers, guesses and accusations.
"""

from typing import Dict, List, Optional, TYPE_CHECKING

from ..core import GameState, GamePhase, Judge, EarlyEndResult, RoundsResult, Player, Turn, TurnAction
from ..agents import BaseAgent
from .accusation import AccusationHandler
from .reactions import ReactionsHandler
from .spy_guess import SpyGuessHandler

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


class QuestionRoundsHandler:
    """
    Drives up to `rounds` turns.

    Initiative passes to whoever just answered, and nobody may ask the
    player who just asked them. The transcript is owned here and only handed
    out as copies.
    """

    def __init__(self, game_state: GameState, judge: Judge, event_emitter: Optional['EventEmitter'] = None,
                 spy_guess_handler: Optional[SpyGuessHandler] = None,
                 accusation_handler: Optional[AccusationHandler] = None,
                 reactions_handler: Optional[ReactionsHandler] = None):
        self.game_state = game_state
        self.judge = judge
        self.event_emitter = event_emitter
        self.spy_guess_handler = spy_guess_handler or SpyGuessHandler(game_state, judge, event_emitter)
        self.accusation_handler = accusation_handler or AccusationHandler(
            game_state, judge, self.spy_guess_handler, event_emitter
        )
        self.reactions_handler = reactions_handler or ReactionsHandler(game_state, judge, event_emitter)

        self.turns: List[Turn] = []
        self.current_asker: Optional[Player] = None
        self.last_asker: Optional[Player] = None
        self.round_count = 0

    async def run_question_rounds(self, agents: Dict[str, BaseAgent], rounds: int,
                                  allow_early_vote: bool = True, enable_reactions: bool = True) -> RoundsResult:
        """
        Run the turn loop until the round budget is spent or the game ends early.

        Args:
            agents: Agent for every player, keyed by player id
            rounds: Number of turns to play
            allow_early_vote: Whether players may start accusations
            enable_reactions: Whether bystanders react to each exchange

        Returns:
            The transcript and the early-end result
        """
        self.game_state.start_phase(GamePhase.QUESTIONS)
        players = self.game_state.players
        self.current_asker = self.game_state.rng.choice(players)
        self.last_asker = None
        self.round_count = 0
        early_end = EarlyEndResult.not_ended()

        while self.round_count < rounds and not early_end.ended:
            self.round_count += 1
            asker = self.current_asker
            self.judge.announce(f"\n--- Turn {self.round_count}/{rounds}: {asker.name} ---")

            choice = await agents[asker.id].choose_action(list(players), list(self.turns), allow_early_vote)
            action = self.judge.resolve_action(choice.action, asker, allow_early_vote)

            if action == TurnAction.GUESS:
                early_end = await self.spy_guess_handler.handle_early_guess(agents, self.turns)
                continue

            if action == TurnAction.VOTE:
                if choice.thought:
                    self.judge.announce(f'{asker.name}\'s thought: "{choice.thought}"')
                # The accusation handler puts the phase back when nobody is convicted
                early_end = await self.accusation_handler.handle_accusation(asker, agents, self.turns)
                continue

            await self._play_question(asker, agents, enable_reactions)

        return RoundsResult(turns=list(self.turns), early_end=early_end)

    async def _play_question(self, asker: Player, agents: Dict[str, BaseAgent], enable_reactions: bool) -> None:
        players = self.game_state.players
        ask = await agents[asker.id].ask(list(players))
        target, used_fallback = self.judge.resolve_question_target(asker, ask.target_name, self.last_asker)
        if used_fallback and ask.target_name:
            self.judge.announce(f"({asker.name} can't ask {ask.target_name}; asking {target.name} instead)")

        question = ask.question or "Anything you'd like to tell us?"
        if ask.thought:
            self.judge.announce(f'{asker.name}\'s thought: "{ask.thought}"')
        self.judge.announce(f"{asker.name} -> {target.name}: {question}")

        bystanders = [p for p in players if p.id not in (asker.id, target.id)]
        if enable_reactions:
            await self.reactions_handler.collect_reactions(bystanders, agents, "question", asker.name, question)

        answer = await agents[target.id].answer(asker.name, question)
        self.judge.announce(f"{target.name}: {answer}")

        if enable_reactions:
            await self.reactions_handler.collect_reactions(bystanders, agents, "answer", target.name, answer)

        self.turns.append(Turn(asker_id=asker.id, target_id=target.id, question=question, answer=answer))
        if self.event_emitter:
            self.event_emitter.emit_turn(self.round_count, asker.name, target.name, question, answer, used_fallback)

        self.last_asker = asker
        self.current_asker = target
