"""
JSONL Turn Transcript Logger.

Logs every attempted turn (both chosen actions, whether the turn was
accepted, and the resulting state) so a trial can be replayed later.
"""

import json
import os
from datetime import datetime
from typing import Dict, List, Optional, Tuple

import numpy as np

from duel_ai.schema import Action, parse_action


def convert_numpy(obj):
    """Convert numpy types to Python native types for JSON serialization."""
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.bool_):
        return bool(obj)
    elif isinstance(obj, dict):
        return {k: convert_numpy(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [convert_numpy(v) for v in obj]
    return obj


class DuelLogger:
    """
    Logger for duel transcripts in JSONL format.
    """

    def __init__(self, log_dir: str = None, enabled: bool = True):
        """
        Initialize transcript logger.

        Args:
            log_dir: Directory to write logs. Defaults to data/duel/transcripts/
            enabled: Whether logging is active
        """
        self.enabled = enabled

        if log_dir is None:
            base_path = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
            log_dir = os.path.join(base_path, "data", "duel", "transcripts")

        self.log_dir = log_dir
        self.current_file = None
        self.current_trial_id = None
        self.turn_idx = 0
        self.seed = None

        if self.enabled:
            os.makedirs(self.log_dir, exist_ok=True)

    def start_trial(self, seed: int = None, trial_id: str = None, filename: str = None):
        """Start a new trial. Consecutive trials share a file unless filename changes."""
        if not self.enabled:
            return

        self.seed = seed
        self.turn_idx = 0

        if trial_id is None:
            trial_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        self.current_trial_id = trial_id

        if filename is not None:
            self.current_file = os.path.join(self.log_dir, filename)
        elif self.current_file is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.current_file = os.path.join(self.log_dir, f"duel_{timestamp}.jsonl")

    def log_turn(
        self,
        left_action: Action,
        right_action: Action,
        accepted: bool,
        state: Dict,
        illegal_side: Optional[str] = None,
    ):
        """
        Log a single attempted turn.

        Args:
            left_action: Action chosen by the left wizard
            right_action: Action chosen by the right wizard
            accepted: False when the turn was rejected as illegal
            state: Duel state dict after the turn (unchanged if rejected)
            illegal_side: Side that could not pay, if rejected
        """
        if not self.enabled or self.current_file is None:
            return

        entry = {
            "timestamp": datetime.now().isoformat(),
            "type": "turn",
            "seed": convert_numpy(self.seed),
            "trial_id": self.current_trial_id,
            "turn_idx": self.turn_idx,
            "left_action": left_action.value,
            "right_action": right_action.value,
            "accepted": bool(accepted),
            "illegal_side": illegal_side,
            "state": convert_numpy(state),
        }
        self._write(entry, "turn")
        self.turn_idx += 1

    def end_trial(self, final_info: Dict = None):
        """End current trial."""
        if not self.enabled:
            return

        if final_info and self.current_file:
            entry = {
                "timestamp": datetime.now().isoformat(),
                "trial_id": self.current_trial_id,
                "type": "trial_end",
                "total_turns": self.turn_idx,
                "final_info": convert_numpy(final_info),
            }
            self._write(entry, "trial end")

        self.current_trial_id = None
        self.turn_idx = 0

    def _write(self, entry: Dict, what: str):
        try:
            with open(self.current_file, "a") as f:
                f.write(json.dumps(entry) + "\n")
        except OSError as e:
            print(f"Warning: Failed to write {what}: {e}")


def load_transcript(path: str, trial_id: str = None) -> List[Tuple[Action, Action]]:
    """
    Read the action pairs of one trial back from a JSONL transcript.

    Args:
        path: Transcript file
        trial_id: Trial to extract; defaults to the first trial in the file

    Returns:
        Ordered (left_action, right_action) pairs, rejected turns included
    """
    pairs = []
    with open(path, "r") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            entry = json.loads(line)
            if entry.get("type") != "turn":
                continue
            if trial_id is None:
                trial_id = entry["trial_id"]
            if entry["trial_id"] != trial_id:
                continue
            pairs.append((parse_action(entry["left_action"]), parse_action(entry["right_action"])))
    return pairs
