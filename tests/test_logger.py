import json

import numpy as np

from duel_ai.logger import DuelLogger, convert_numpy, load_transcript
from duel_ai.schema import Action


def read_entries(path):
    with open(path) as f:
        return [json.loads(line) for line in f if line.strip()]


def test_logger_writes_turns_and_trial_end(tmp_path) -> None:
    logger = DuelLogger(log_dir=str(tmp_path))
    logger.start_trial(seed=np.int64(4), trial_id="t1", filename="duel.jsonl")

    logger.log_turn(Action.STRIKE, Action.REFLECT, accepted=True, state={"turn_count": 1})
    logger.log_turn(
        Action.LIGHTNING_BOLT, Action.STRIKE, accepted=False,
        state={"turn_count": 1}, illegal_side="left",
    )
    logger.end_trial({"outcome": "left_wins"})

    entries = read_entries(tmp_path / "duel.jsonl")

    assert [e["type"] for e in entries] == ["turn", "turn", "trial_end"]
    assert entries[0]["seed"] == 4
    assert entries[0]["left_action"] == "strike"
    assert entries[1]["turn_idx"] == 1
    assert entries[1]["accepted"] is False
    assert entries[1]["illegal_side"] == "left"
    assert entries[2]["total_turns"] == 2
    assert entries[2]["final_info"] == {"outcome": "left_wins"}


def test_load_transcript_selects_trial(tmp_path) -> None:
    logger = DuelLogger(log_dir=str(tmp_path))

    logger.start_trial(trial_id="a", filename="many.jsonl")
    logger.log_turn(Action.STRIKE, Action.STRIKE, accepted=True, state={})
    logger.end_trial({"outcome": "both_dead"})

    logger.start_trial(trial_id="b")
    logger.log_turn(Action.CONCENTRATE, Action.MANA_SHIELD, accepted=True, state={})
    logger.log_turn(Action.FIREBALL, Action.REFLECT, accepted=True, state={})
    logger.end_trial({"outcome": "right_wins"})

    path = str(tmp_path / "many.jsonl")

    assert load_transcript(path) == [(Action.STRIKE, Action.STRIKE)]
    assert load_transcript(path, trial_id="b") == [
        (Action.CONCENTRATE, Action.MANA_SHIELD),
        (Action.FIREBALL, Action.REFLECT),
    ]


def test_log_turn_without_trial_is_ignored(tmp_path) -> None:
    logger = DuelLogger(log_dir=str(tmp_path))

    logger.log_turn(Action.STRIKE, Action.STRIKE, accepted=True, state={})

    assert list(tmp_path.iterdir()) == []


def test_write_failure_prints_warning(tmp_path, capsys) -> None:
    logger = DuelLogger(log_dir=str(tmp_path))
    logger.start_trial(trial_id="x", filename="missing_dir/duel.jsonl")

    logger.log_turn(Action.STRIKE, Action.STRIKE, accepted=True, state={})

    assert "Warning: Failed to write turn" in capsys.readouterr().out
    assert logger.turn_idx == 1


def test_convert_numpy_handles_nested_values() -> None:
    converted = convert_numpy({"a": np.arange(2), "b": [np.float32(0.5), np.bool_(True)]})

    assert converted == {"a": [0, 1], "b": [0.5, True]}
