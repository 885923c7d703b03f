"""
Event emitter for reporting game events to listeners and run files.
"""

from typing import Callable, Dict, Any, Optional, List
from threading import Lock

from .run_recorder import RunRecorder

EventListener = Callable[[str, Dict[str, Any]], None]


class EventEmitter:
    """
    Event emitter that records game events to files and forwards them to listeners.

    Listeners are plain callables taking (event_type, data). The emitter knows
    nothing about who is listening or for how long.
    """

    def __init__(self, run_recorder: Optional[RunRecorder] = None):
        self.run_recorder = run_recorder
        self._listeners: List[EventListener] = []
        self._lock = Lock()

    def register_listener(self, listener: EventListener) -> None:
        """Subscribe a callable to every future event."""
        with self._lock:
            self._listeners.append(listener)

    def unregister_listener(self, listener: EventListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _emit(self, event_type: str, data: Dict[str, Any]) -> None:
        """Emit an event by recording it to file and notifying listeners."""
        if self.run_recorder:
            try:
                self.run_recorder.record_event(event_type, data)
            except Exception as e:
                # Don't let recording errors break the game
                print(f"Error recording event: {e}")

        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event_type, data)
            except Exception as e:
                print(f"Error in event listener: {e}")

    def emit_log(self, line: str, phase: str) -> None:
        """Emit one human-readable narration line."""
        self._emit("log", {
            "line": line,
            "phase": phase
        })

    def emit_game_info(self, info: Dict[str, Any]) -> None:
        """Emit the one-time snapshot of the dealt game."""
        self._emit("game_info", info)

    def emit_agent_created(self, player_name: str, agent_type: str, personality: Optional[str] = None,
                           model: Optional[str] = None, provider: Optional[str] = None) -> None:
        """Emit agent creation event. LLM seats also report their provider and model."""
        self._emit("agent_created", {
            "player_name": player_name,
            "agent_type": agent_type,
            "personality": personality,
            "model": model,
            "provider": provider
        })

    def emit_phase_change(self, phase: str) -> None:
        """Emit phase change event."""
        self._emit("phase_change", {
            "phase": phase
        })

    def emit_turn(self, round_number: int, asker: str, target: str, question: str, answer: str,
                  target_fallback: bool = False) -> None:
        """Emit a recorded question/answer exchange."""
        self._emit("turn", {
            "round": round_number,
            "asker": asker,
            "target": target,
            "question": question,
            "answer": answer,
            "target_fallback": target_fallback
        })

    def emit_reaction(self, player_name: str, event_type: str, emoji: str, reaction: str, suspicion: str) -> None:
        """Emit a bystander reaction."""
        self._emit("reaction", {
            "player_name": player_name,
            "event_type": event_type,
            "emoji": emoji,
            "reaction": reaction,
            "suspicion": suspicion
        })

    def emit_accusation(self, accuser: str, accused: str, reason: str, yes_votes: int, no_votes: int,
                        majority: int, convicted: bool) -> None:
        """Emit the result of a mid-game accusation."""
        self._emit("accusation", {
            "accuser": accuser,
            "accused": accused,
            "reason": reason,
            "yes_votes": yes_votes,
            "no_votes": no_votes,
            "majority": majority,
            "convicted": convicted
        })

    def emit_vote(self, voter: str, target: str, why: str, fallback: bool = False) -> None:
        """Emit individual final vote event."""
        self._emit("vote", {
            "voter": voter,
            "target": target,
            "why": why,
            "fallback": fallback
        })

    def emit_vote_results(self, vote_counts: Dict[str, int], accused_name: Optional[str], is_tie: bool) -> None:
        """Emit voting results event."""
        self._emit("vote_results", {
            "vote_counts": vote_counts,
            "accused_name": accused_name,
            "is_tie": is_tie
        })

    def emit_spy_guess(self, spy: str, guess: str, reason: str, correct: bool, when_caught: bool) -> None:
        """Emit a spy location guess."""
        self._emit("spy_guess", {
            "spy": spy,
            "guess": guess,
            "reason": reason,
            "correct": correct,
            "when_caught": when_caught
        })

    def emit_prompt(self, player_name: str, action_type: str, prompt: str, response: str) -> None:
        """Emit an LLM prompt together with the reply it produced."""
        self._emit("prompt", {
            "player_name": player_name,
            "action_type": action_type,
            "prompt": prompt,
            "response": response
        })

    def emit_game_over(self, outcome: Dict[str, Any]) -> None:
        """Emit game over event with winner, reason, accused_name and is_tie."""
        self._emit("game_over", outcome)

    def emit_fatal_error(self, error_message: str, player_name: Optional[str] = None, action_type: Optional[str] = None) -> None:
        """Emit fatal error event."""
        self._emit("fatal_error", {
            "error_message": error_message,
            "player_name": player_name,
            "action_type": action_type
        })

    def emit_llm_metadata(self, player_name: str, action_type: str, prompt_tokens: int,
                          completion_tokens: int, total_tokens: int, latency_ms: float,
                          model: str) -> None:
        """Emit LLM API call metadata (tokens, latency)."""
        self._emit("llm_metadata", {
            "player_name": player_name,
            "action_type": action_type,
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": total_tokens,
            "latency_ms": latency_ms,
            "model": model
        })
