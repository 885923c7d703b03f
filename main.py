"""
Main game loop for Spyfall simulation.
"""

import argparse
import asyncio
import random
from typing import Callable, Dict, List, Optional, Tuple

from dotenv import load_dotenv

from spyfall.core import GameState, GameOutcome, Judge, LocationPack, Player, all_location_names
from spyfall.agents import BaseAgent, SimpleLLMAgent, DummyAgent, HumanAgent, AgentError, APIKeyError, LLMCallError
from spyfall.agents.providers import create_provider
from spyfall.agents.personalities import get_personality_by_id, get_random_personality
from spyfall.phases import QuestionRoundsHandler, VotingHandler, SpyGuessHandler
from spyfall.config.game_config import GameConfig, PlayerSlot, DEFAULT_PROVIDER_ROTATION
from spyfall.config.config_loader import load_config, validate_config
from spyfall.web import EventEmitter, RunRecorder

AgentFactory = Callable[[Player, GameConfig], BaseAgent]


class SpyfallGame:
    """Main game controller."""

    def __init__(self, config: Optional[GameConfig] = None, event_emitter: Optional[EventEmitter] = None,
                 run_name: Optional[str] = None, agent_factory: Optional[AgentFactory] = None,
                 pack: Optional[LocationPack] = None, record: bool = True):
        """
        Args:
            config: Game configuration
            event_emitter: Reporting sink; one recording to runs/ is created when omitted
            run_name: Name of the run directory
            agent_factory: Builds the agent for each seated player instead of the configured agent types
            pack: Location to play; random when omitted
            record: Whether a default emitter should write run files
        """
        self.config = validate_config(config or GameConfig())
        self.run_recorder: Optional[RunRecorder] = None

        if event_emitter is None:
            if record:
                self.run_recorder = RunRecorder(self.config.runs_dir)
                run_name = self.run_recorder.create_run(run_name)
                print(f"Recording game to: {self.config.runs_dir}/{run_name}/")
            self.event_emitter = EventEmitter(self.run_recorder)
        else:
            self.event_emitter = event_emitter
            self.run_recorder = event_emitter.run_recorder

        # Generate seed if not provided
        if self.config.random_seed is None:
            self.config.random_seed = random.randint(0, 2**31 - 1)

        self.game_state = GameState(random_seed=self.config.random_seed, event_emitter=self.event_emitter)
        self.judge = Judge(self.game_state, self.config, event_emitter=self.event_emitter)

        seats = self.config.get_seats()
        self.game_state.setup_game(self._seat_names(seats), pack=pack)

        # Phase handlers share one spy guess handler
        self.spy_guess_handler = SpyGuessHandler(self.game_state, self.judge, event_emitter=self.event_emitter)
        self.rounds_handler = QuestionRoundsHandler(
            self.game_state, self.judge, event_emitter=self.event_emitter, spy_guess_handler=self.spy_guess_handler
        )
        self.voting_handler = VotingHandler(
            self.game_state, self.judge, event_emitter=self.event_emitter, spy_guess_handler=self.spy_guess_handler
        )

        self.agent_factory = agent_factory
        try:
            self.agents: Dict[str, BaseAgent] = self._initialize_agents(seats)
        except APIKeyError as e:
            if self.run_recorder:
                self.run_recorder.save_failure(str(e))
            raise

    @staticmethod
    def _seat_names(seats: List[PlayerSlot]) -> List[Tuple[str, bool]]:
        names = []
        agent_index = 0
        for seat in seats:
            if seat.is_human:
                names.append(("You", True))
            else:
                agent_index += 1
                names.append((f"Agent{agent_index}", False))
        return names

    def _initialize_agents(self, seats: List[PlayerSlot]) -> Dict[str, BaseAgent]:
        """Create an agent for every seat based on config."""
        personality_rng = random.Random(self.config.random_seed)
        agents: Dict[str, BaseAgent] = {}
        for seat_number, (player, seat) in enumerate(zip(self.game_state.players, seats), start=1):
            agents[player.id] = self._create_agent(player, seat, seat_number, personality_rng)
        return agents

    def _create_agent(self, player: Player, seat: PlayerSlot, seat_number: int,
                      personality_rng: random.Random) -> BaseAgent:
        """
        Create the agent for one seat.

        Raises:
            APIKeyError: If an LLM seat's provider has no API key configured
        """
        if self.agent_factory is not None:
            return self.agent_factory(player, self.config)
        if seat.agent_type == "dummy_agent":
            return DummyAgent(player, self.config)
        if seat.agent_type == "human":
            return HumanAgent(player, self.config)

        personalities = self.config.personalities or {}
        if seat_number in personalities:
            personality = get_personality_by_id(personalities[seat_number])
        else:
            personality = get_random_personality(personality_rng)
        return SimpleLLMAgent(
            player, self.config,
            event_emitter=self.event_emitter,
            personality=personality,
            roster=self.game_state.players,
            provider=create_provider(seat.provider, model=seat.model, mode=seat.mode),
        )

    def _emit_setup(self) -> None:
        config_data = {
            "rounds": self.config.rounds,
            "allow_early_vote": self.config.allow_early_vote,
            "enable_reactions": self.config.enable_reactions,
            "llm_model": self.config.llm_model,
            "providers": self.config.providers,
            "player_slots": [seat.describe() for seat in self.config.get_seats()],
            "random_seed": self.config.random_seed,
        }
        info = self.game_state.get_game_info(all_location_names(), config_data)
        self.event_emitter.emit_game_info(info)

        for player in self.game_state.players:
            agent = self.agents[player.id]
            personality = getattr(agent, "personality", None)
            self.event_emitter.emit_agent_created(
                player.name,
                agent.agent_type,
                personality.id if personality else None,
                getattr(agent, "model", None),
                getattr(agent, "provider_type", None),
            )

        if self.run_recorder:
            self.run_recorder.save_metadata(info)

    async def run_game_async(self) -> GameOutcome:
        """
        Play a full session.

        Agent cleanup always runs, whether the game finishes or a controller
        call aborts it.

        Raises:
            LLMCallError: If an LLM call fails
            Exception: Whatever else a controller raises (a closed stdin, a
                custom agent's own error), as well as KeyboardInterrupt.
                Every failure is reported and the session marked failed first.
        """
        self._emit_setup()
        spy = self.game_state.get_spy()
        pack = self.game_state.pack

        try:
            rounds_result = await self.rounds_handler.run_question_rounds(
                self.agents,
                self.config.rounds,
                allow_early_vote=self.config.allow_early_vote,
                enable_reactions=self.config.enable_reactions,
            )

            if rounds_result.early_end.ended:
                early_end = rounds_result.early_end
                outcome = GameOutcome(winner=early_end.winner, reason=early_end.reason, early_end=True)
            else:
                tally = await self.voting_handler.run_voting_phase(self.agents, rounds_result.turns)
                spy_guessed_right = await self.voting_handler.run_spy_guess_if_eligible(
                    tally, self.agents, rounds_result.turns
                )
                winner, reason = self.judge.resolve_winner(tally.accused_name, tally.is_tie, spy.name, spy_guessed_right)
                outcome = GameOutcome(winner=winner, reason=reason, accused_name=tally.accused_name, is_tie=tally.is_tie)
        except LLMCallError as e:
            self._record_failure(e.message, e.player_name, e.action_type)
            raise
        except (Exception, KeyboardInterrupt, asyncio.CancelledError) as e:
            self._record_failure(f"{type(e).__name__}: {e}" if str(e) else type(e).__name__)
            raise
        finally:
            await asyncio.gather(*[agent.cleanup() for agent in self.agents.values()])

        self.game_state.end_game(outcome)
        self._announce_result(pack.location, spy.name, outcome)
        self.event_emitter.emit_game_over(outcome.to_dict())
        if self.run_recorder:
            self.run_recorder.save_outcome(outcome.to_dict())
        return outcome

    def _record_failure(self, message: str, player_name: Optional[str] = None,
                        action_type: Optional[str] = None) -> None:
        print(f"\nFATAL ERROR: {message}")
        if player_name:
            print(f"   Player: {player_name}")
        if action_type:
            print(f"   Action: {action_type}")
        self.event_emitter.emit_fatal_error(message, player_name, action_type)
        self.game_state.end_game(reason="failed")
        if self.run_recorder:
            self.run_recorder.save_failure(message, player_name, action_type)

    def run_game(self) -> GameOutcome:
        """Synchronous entry point."""
        return asyncio.run(self.run_game_async())

    def _announce_result(self, location: str, spy_name: str, outcome: GameOutcome) -> None:
        winner_display = "SPY WINS!" if outcome.winner.value == "spy" else "CIVILIANS WIN!"
        self.judge.announce("\n" + "=" * 30)
        self.judge.announce(f"ACTUAL LOCATION: {location}")
        self.judge.announce(f"THE SPY WAS: {spy_name}")
        self.judge.announce(f"RESULT: {winner_display} ({outcome.reason})")
        self.judge.announce("=" * 30 + "\n")

    def get_game_summary(self) -> Dict:
        """Get final game summary as dictionary."""
        return {
            "outcome": self.game_state.outcome.to_dict() if self.game_state.outcome else None,
            "turns": len(self.rounds_handler.turns),
            "final_state": self.game_state.get_game_summary(),
            "action_log": self.game_state.action_log[-10:],  # Last 10 actions
        }


def list_runs(runs_dir: str) -> None:
    """Print one line per recorded game: name, location, spy and result."""
    runs = RunRecorder(runs_dir).list_runs()
    if not runs:
        print(f"No runs found in {runs_dir}/")
        return
    for run in runs:
        line = f"{run['name']:<28} {run['result']:<14} location={run['location'] or '?'} spy={run['spy'] or '?'}"
        if run["reason"]:
            line += f" ({run['reason']})"
        print(line)


def main():
    """Entry point for running a game."""
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Run a Spyfall game simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                  # Use default config
  python main.py --config configs/dummy_agent.yaml  # Offline dummy agents
  python main.py --players 5 --rounds 12 --human  # Five seats, you in seat 1
  python main.py --model gpt-4o-mini              # Override model for OpenAI seats
  python main.py --mixed                          # Rotate seats through OpenAI, Anthropic and Google
  python main.py --seats openai,anthropic,human   # One provider per seat
  python main.py --list-runs                      # Summarize recorded games
        """
    )
    parser.add_argument("--config", "-c", type=str, default=None,
                        help="Path to YAML configuration file (default: use default config)")
    parser.add_argument("--seed", "-s", type=int, default=None,
                        help="Random seed for reproducible behavior (generated and shown if not provided)")
    parser.add_argument("--model", "-m", type=str, default=None,
                        help="Model for OpenAI seats. Overrides config file setting.")
    parser.add_argument("--rounds", type=int, default=None,
                        help="Number of question/answer turns (1-30)")
    parser.add_argument("--players", type=int, default=None,
                        help="Number of players")
    parser.add_argument("--human", action="store_true",
                        help="Take seat 1 yourself")
    parser.add_argument("--no-early-vote", action="store_true",
                        help="Disable mid-game accusations")
    parser.add_argument("--run-name", "-r", type=str, default=None,
                        help="Custom name for this run (default: auto-generated timestamp)")
    parser.add_argument("--seats", type=str, default=None,
                        help="Comma-separated seats, e.g. \"openai,anthropic:memory,human,google\"")
    parser.add_argument("--mixed", action="store_true",
                        help="Rotate LLM seats through the default provider rotation")
    parser.add_argument("--list-runs", action="store_true",
                        help="List recorded runs and their results, then exit")

    args = parser.parse_args()

    config = load_config(args.config)
    if args.list_runs:
        list_runs(config.runs_dir)
        return
    config.random_seed = args.seed
    if args.model is not None:
        config.llm_model = args.model
    if args.rounds is not None:
        config.rounds = args.rounds
    config.rounds = min(30, max(1, config.rounds))
    if args.players is not None:
        config.num_players = args.players
    if args.human:
        config.include_human = True
    if args.no_early_vote:
        config.allow_early_vote = False
    if args.seats:
        config.player_slots = [slot.strip() for slot in args.seats.split(",") if slot.strip()]
    if args.mixed:
        config.providers = list(DEFAULT_PROVIDER_ROTATION)

    print("Spyfall Game Simulation")
    print("=" * 60)
    if args.config:
        print(f"Using config: {args.config}")
    print(f"Seats: {', '.join(seat.describe() for seat in config.get_seats())}")
    print(f"Rounds: {config.rounds}")
    print("=" * 60)

    try:
        game = SpyfallGame(config=config, run_name=args.run_name)
    except APIKeyError as e:
        print(f"\n{e}")
        return

    try:
        game.run_game()
    except (AgentError, EOFError):
        print("\nGAME FAILED - Fatal Error")
    except KeyboardInterrupt:
        print("\nGAME FAILED - Interrupted")
    finally:
        print(f"Random Seed: {game.config.random_seed}")
        if game.run_recorder and game.run_recorder.get_run_path():
            print(f"Game events saved to: {game.run_recorder.get_run_path()}")


if __name__ == "__main__":
    main()
