"""
Run recorder: one directory per game under runs/.

Each run holds `events.jsonl`, one reporting event per line, and
`metadata.json`, the dealt game plus its final result once the game ends.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, List, Optional
from threading import Lock

# Result labels for a run, keyed by the `status` stored in metadata.json
RESULT_LABELS = {
    "spy": "Spy Wins",
    "civilians": "Civilians Win",
    "failed": "Failed",
    "unfinished": "Unfinished",
}


class RunRecorder:
    """Writes the events and result of one Spyfall game, and reads back past runs."""

    def __init__(self, runs_dir: str = "runs"):
        self.runs_dir = Path(runs_dir)
        self.current_run_dir: Optional[Path] = None
        self.events_file: Optional[Path] = None
        self.metadata_file: Optional[Path] = None
        self._lock = Lock()
        self._event_count = 0
        self._metadata: Dict[str, Any] = {}

    def create_run(self, run_name: Optional[str] = None) -> str:
        """
        Create the directory for a new game.

        Args:
            run_name: Directory name; `spyfall_<timestamp>` when omitted

        Returns:
            The run name
        """
        if run_name is None:
            run_name = f"spyfall_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

        self.current_run_dir = self.runs_dir / run_name
        self.current_run_dir.mkdir(parents=True, exist_ok=True)
        self.events_file = self.current_run_dir / "events.jsonl"
        self.metadata_file = self.current_run_dir / "metadata.json"
        self._event_count = 0
        self._metadata = {"status": "unfinished"}
        return run_name

    def record_event(self, event_type: str, data: Dict[str, Any]) -> None:
        """Append one event to events.jsonl. A no-op until a run is created."""
        if not self.events_file:
            return

        with self._lock:
            event = {
                "timestamp": datetime.now().isoformat(),
                "event_type": event_type,
                "data": data,
                "sequence": self._event_count,
            }
            self._event_count += 1
            with open(self.events_file, 'a') as f:
                f.write(json.dumps(event, default=str) + '\n')

    def save_metadata(self, game_info: Dict[str, Any]) -> None:
        """Store the dealt game (location, roles, seats, config) in metadata.json."""
        if not self.metadata_file:
            return
        self._metadata.update(game_info)
        self._write_metadata()

    def save_outcome(self, outcome: Dict[str, Any]) -> None:
        """
        Store a finished game's result in metadata.json.

        Args:
            outcome: `GameOutcome.to_dict()`; its winner becomes the run status
        """
        if not self.metadata_file:
            return
        self._metadata["status"] = outcome["winner"]
        self._metadata["outcome"] = outcome
        self._metadata["finished_at"] = datetime.now().isoformat()
        self._write_metadata()

    def save_failure(self, error_message: str, player_name: Optional[str] = None,
                     action_type: Optional[str] = None) -> None:
        """Mark the run as failed, keeping whatever controller call aborted it."""
        if not self.metadata_file:
            return
        self._metadata["status"] = "failed"
        self._metadata["error"] = {
            "error_message": error_message,
            "player_name": player_name,
            "action_type": action_type,
        }
        self._metadata["finished_at"] = datetime.now().isoformat()
        self._write_metadata()

    def _write_metadata(self) -> None:
        with self._lock:
            with open(self.metadata_file, 'w') as f:
                json.dump(self._metadata, f, indent=2, default=str)

    def get_run_path(self) -> Optional[Path]:
        """Get the current run directory path."""
        return self.current_run_dir

    def read_events(self, run_name: Optional[str] = None) -> List[Dict[str, Any]]:
        """Load every event of the current run, or of a named past run, in order."""
        events_file = self.runs_dir / run_name / "events.jsonl" if run_name else self.events_file
        if not events_file or not events_file.exists():
            return []
        with open(events_file, 'r') as f:
            return [json.loads(line) for line in f if line.strip()]

    def list_runs(self) -> List[Dict[str, Any]]:
        """
        Summarize every run under runs_dir, newest name first.

        The status comes from metadata.json. Runs whose metadata never got a
        result (a crash before the recorder was told) fall back to scanning
        their events for `game_over` or `fatal_error`.
        """
        runs: List[Dict[str, Any]] = []
        if not self.runs_dir.exists():
            return runs

        for run_dir in sorted(self.runs_dir.iterdir(), reverse=True):
            if not run_dir.is_dir():
                continue

            metadata = _load_json(run_dir / "metadata.json")
            events = self.read_events(run_dir.name) if (run_dir / "events.jsonl").exists() else []
            status = metadata.get("status", "unfinished")
            outcome = metadata.get("outcome")

            if status == "unfinished":
                for event in events:
                    if event.get("event_type") == "game_over":
                        outcome = event.get("data", {})
                        status = outcome.get("winner", "unfinished")
                    elif event.get("event_type") == "fatal_error":
                        status = "failed"

            spy = next((p["name"] for p in metadata.get("players", []) if p.get("is_spy")), None)
            runs.append({
                "name": run_dir.name,
                "path": str(run_dir),
                "location": metadata.get("location"),
                "spy": spy,
                "status": status,
                "result": RESULT_LABELS.get(status, status),
                "reason": outcome.get("reason") if outcome else None,
                "event_count": len(events),
            })

        return runs


def _load_json(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with open(path, 'r') as f:
        return json.load(f)
