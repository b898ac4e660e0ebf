"""
Headless Trial Runner and Monte Carlo Driver.

Run duels without UI and tally outcomes over many independent trials.
"""

import multiprocessing
import time
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple, Union

import numpy as np

from duel_ai.logger import DuelLogger
from duel_ai.policy_heuristic import Policy, get_policy, make_scripted_policy
from duel_ai.schema import Action
from duel_sim.config import DuelConfig, REFERENCE_CONFIG, SHORT_DUEL_CONFIG
from duel_sim.mechanics import (
    IllegalMoveError, Outcome, TrialResult, TurnRecord, is_terminal, resolve_turn
)
from duel_sim.state import Side, create_duel

PolicyRef = Union[str, Policy]


def _resolve_policy(policy: PolicyRef) -> Policy:
    if isinstance(policy, str):
        return get_policy(policy)
    return policy


# =============================================================================
# SINGLE TRIAL
# =============================================================================

def run_trial(
    config: DuelConfig,
    left_policy: PolicyRef,
    right_policy: PolicyRef,
    rng: np.random.Generator = None,
    seed: int = None,
    logger: DuelLogger = None,
    record_transcript: bool = False,
    verbose: bool = False
) -> TrialResult:
    """
    Run a single duel to completion.

    Each iteration asks both policies for an action and resolves the turn.
    A rejected turn changes nothing; fresh actions are drawn next iteration.

    Args:
        config: Duel configuration
        left_policy: Policy (or registered policy name) for the left wizard
        right_policy: Policy (or registered policy name) for the right wizard
        rng: Random generator shared by both policies
        seed: Seed for a new generator when rng is not given
        logger: Optional transcript logger
        record_transcript: Keep every attempted turn on the result
        verbose: Print turn details

    Returns:
        TrialResult with the outcome and final state
    """
    left_policy = _resolve_policy(left_policy)
    right_policy = _resolve_policy(right_policy)
    if rng is None:
        rng = np.random.default_rng(seed)

    state = create_duel(config)
    transcript: List[TurnRecord] = []
    illegal_turns = 0

    if logger:
        logger.start_trial(seed=seed)

    done, outcome = is_terminal(state)
    while not done:
        if config.max_turns is not None and state.turn_count >= config.max_turns:
            outcome = Outcome.TIE
            break

        left_action = left_policy(state, Side.LEFT, rng)
        right_action = right_policy(state, Side.RIGHT, rng)

        record = TurnRecord(left_action=left_action, right_action=right_action)
        try:
            state = resolve_turn(state, left_action, right_action, config)
        except IllegalMoveError as e:
            illegal_turns += 1
            record.accepted = False
            record.illegal_side = e.side
            if verbose:
                print(f"Turn {state.turn_count + 1}: rejected ({e})")

        if verbose and record.accepted:
            print(
                f"Turn {state.turn_count}: L {left_action.value} / R {right_action.value} -> "
                f"L {state.left.health}hp {state.left.resource}mp, "
                f"R {state.right.health}hp {state.right.resource}mp"
            )

        if logger:
            logger.log_turn(
                left_action,
                right_action,
                accepted=record.accepted,
                state=state.to_dict(),
                illegal_side=record.illegal_side.value if record.illegal_side else None,
            )
        if record_transcript:
            transcript.append(record)

        done, outcome = is_terminal(state)

    result = TrialResult(
        outcome=outcome,
        turn_count=state.turn_count,
        final_state=state,
        illegal_turns=illegal_turns,
        transcript=transcript,
    )

    if logger:
        logger.end_trial({
            "outcome": outcome.value,
            "turn_count": state.turn_count,
            "illegal_turns": illegal_turns,
            "final_state": state.to_dict(),
        })

    if verbose:
        print(f"Trial ended: {outcome.value} after {state.turn_count} turns")

    return result


def replay_trial(
    actions: Sequence[Tuple[Action, Action]],
    config: DuelConfig = None
) -> TrialResult:
    """
    Reproduce a trial from its recorded sequence of action pairs.

    Rejected pairs must be included, in order. Pairs left over once the
    duel has ended are ignored.

    Raises:
        ValueError: If the actions run out before the duel ends
    """
    config = config or DuelConfig()
    left_script = make_scripted_policy(pair[0] for pair in actions)
    right_script = make_scripted_policy(pair[1] for pair in actions)
    try:
        return run_trial(config, left_script, right_script, seed=0, record_transcript=True)
    except IndexError:
        raise ValueError(
            f"Transcript of {len(actions)} turns ends before the duel is decided"
        ) from None


# =============================================================================
# MONTE CARLO AGGREGATION
# =============================================================================

@dataclass
class MonteCarloSummary:
    """Outcome tallies and turn statistics over many trials."""
    counts: Dict[Outcome, int] = field(default_factory=lambda: {o: 0 for o in Outcome})
    n_trials: int = 0
    total_turns: int = 0
    total_turns_sq: int = 0
    illegal_turns: int = 0

    def add(self, result: TrialResult) -> None:
        """Tally one finished trial."""
        self.counts[result.outcome] += 1
        self.n_trials += 1
        self.total_turns += result.turn_count
        self.total_turns_sq += result.turn_count * result.turn_count
        self.illegal_turns += result.illegal_turns

    def merge(self, other: "MonteCarloSummary") -> "MonteCarloSummary":
        """Combine two partial summaries into a new one."""
        return MonteCarloSummary(
            counts={o: self.counts[o] + other.counts[o] for o in Outcome},
            n_trials=self.n_trials + other.n_trials,
            total_turns=self.total_turns + other.total_turns,
            total_turns_sq=self.total_turns_sq + other.total_turns_sq,
            illegal_turns=self.illegal_turns + other.illegal_turns,
        )

    def win_rate(self, outcome: Outcome) -> float:
        if self.n_trials == 0:
            return 0.0
        return self.counts[outcome] / self.n_trials

    @property
    def avg_turns(self) -> float:
        if self.n_trials == 0:
            return 0.0
        return self.total_turns / self.n_trials

    @property
    def std_turns(self) -> float:
        if self.n_trials == 0:
            return 0.0
        variance = self.total_turns_sq / self.n_trials - self.avg_turns ** 2
        return float(np.sqrt(max(0.0, variance)))

    @property
    def ties(self) -> int:
        """Trials with no winner: mutual destruction plus turn-cap ties."""
        return self.counts[Outcome.BOTH_DEAD] + self.counts[Outcome.TIE]

    def format_summary(self) -> str:
        return (
            f"L: {self.counts[Outcome.LEFT_WINS]}, "
            f"R: {self.counts[Outcome.RIGHT_WINS]}, "
            f"T: {self.ties}"
        )

    def to_dict(self) -> Dict:
        return {
            "n_trials": self.n_trials,
            "counts": {o.value: c for o, c in self.counts.items()},
            "avg_turns": self.avg_turns,
            "std_turns": self.std_turns,
            "avg_illegal_turns": self.illegal_turns / self.n_trials if self.n_trials else 0.0,
            "left_win_rate": self.win_rate(Outcome.LEFT_WINS),
            "right_win_rate": self.win_rate(Outcome.RIGHT_WINS),
        }


def run_chunk(
    config: DuelConfig,
    left_policy: PolicyRef,
    right_policy: PolicyRef,
    seed_seq: np.random.SeedSequence,
    n_trials: int
) -> MonteCarloSummary:
    """Run a block of trials on one RNG stream and return its partial summary."""
    rng = np.random.default_rng(seed_seq)
    left_policy = _resolve_policy(left_policy)
    right_policy = _resolve_policy(right_policy)

    summary = MonteCarloSummary()
    for _ in range(n_trials):
        summary.add(run_trial(config, left_policy, right_policy, rng=rng))
    return summary


def _worker_run_chunk(work_item: Tuple) -> MonteCarloSummary:
    config_dict, left_policy, right_policy, seed_seq, n_trials = work_item
    return run_chunk(DuelConfig.from_dict(config_dict), left_policy, right_policy, seed_seq, n_trials)


def run_n_trials(
    config: DuelConfig = None,
    left_policy: PolicyRef = "random",
    right_policy: PolicyRef = "random",
    n_trials: int = None,
    base_seed: int = None,
    n_workers: int = None,
    verbose: bool = False
) -> MonteCarloSummary:
    """
    Run many independent trials and aggregate outcomes.

    Trials are split into chunks of config.chunk_size, each with its own
    RNG stream spawned from base_seed, so the totals do not depend on how
    many workers run them.

    Args:
        config: Duel configuration (defaults to the reference setup)
        left_policy: Policy or registered name for the left wizard
        right_policy: Policy or registered name for the right wizard
        n_trials: Overrides config.n_trials
        base_seed: Overrides config.seed
        n_workers: Overrides config.n_workers; >1 uses a process pool
        verbose: Print chunk progress

    Returns:
        Aggregated MonteCarloSummary

    Raises:
        ValueError: If the config, with overrides applied, is out of range
    """
    overrides = {"n_trials": n_trials, "seed": base_seed, "n_workers": n_workers}
    config = (config or REFERENCE_CONFIG).with_overrides(
        **{k: v for k, v in overrides.items() if v is not None}
    ).validate()
    n_trials, base_seed, n_workers = config.n_trials, config.seed, config.n_workers

    chunk_sizes = [config.chunk_size] * (n_trials // config.chunk_size)
    if n_trials % config.chunk_size:
        chunk_sizes.append(n_trials % config.chunk_size)
    seed_seqs = np.random.SeedSequence(base_seed).spawn(len(chunk_sizes))

    work_items = [
        (config.to_dict(), left_policy, right_policy, seed_seq, size)
        for seed_seq, size in zip(seed_seqs, chunk_sizes)
    ]

    if n_workers > 1 and len(work_items) > 1:
        n_workers = min(n_workers, len(work_items), multiprocessing.cpu_count() or 1)
        if verbose:
            print(f"Running {n_trials} trials in {len(work_items)} chunks on {n_workers} workers")
        with multiprocessing.Pool(processes=n_workers) as pool:
            partials = pool.map(_worker_run_chunk, work_items)
    else:
        partials = []
        for i, item in enumerate(work_items):
            if verbose:
                print(f"Chunk {i + 1}/{len(work_items)} ({item[-1]} trials)")
            partials.append(_worker_run_chunk(item))

    summary = MonteCarloSummary()
    for partial in partials:
        summary = summary.merge(partial)
    return summary


def main():
    """Run the reference Monte Carlo comparison."""
    print("=" * 60)
    print("Wizard Duel Monte Carlo")
    print("=" * 60)

    presets = (("25 HP", REFERENCE_CONFIG), ("15 HP", SHORT_DUEL_CONFIG))

    for label, preset in presets:
        cfg = preset.with_overrides(n_workers=multiprocessing.cpu_count() or 1, seed=42)
        print(f"\nRunning {cfg.n_trials} trials ({label}, random vs random)...")
        start_time = time.time()

        summary = run_n_trials(cfg)

        elapsed = time.time() - start_time
        print(summary.format_summary())
        print(f"  Left Win Rate: {summary.win_rate(Outcome.LEFT_WINS)*100:.2f}%")
        print(f"  Right Win Rate: {summary.win_rate(Outcome.RIGHT_WINS)*100:.2f}%")
        print(f"  Both Dead: {summary.counts[Outcome.BOTH_DEAD]}")
        print(f"  Average Turns: {summary.avg_turns:.1f} ± {summary.std_turns:.1f}")
        print(f"  ({elapsed:.2f}s)")

    print("\n" + "=" * 60)
    print("Done!")


if __name__ == "__main__":
    main()
