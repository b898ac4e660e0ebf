"""
Deterministic Duel Mechanics.

Resolves one simultaneous turn: both chosen actions are checked against
their own side's resource, costs are paid, each action is evaluated
against the other, and the passive resource gain is applied.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from duel_ai.actions import action_cost, is_action_legal
from duel_ai.schema import Action, get_action_def, is_damaging
from duel_sim.config import DuelConfig
from duel_sim.state import ActorState, DuelState, Side


class Outcome(Enum):
    """Result of a finished duel."""
    LEFT_WINS = "left_wins"
    RIGHT_WINS = "right_wins"
    TIE = "tie"              # Stopped by the turn cap with both alive
    BOTH_DEAD = "both_dead"  # Mutual destruction on the same turn


class IllegalMoveError(Exception):
    """Raised when a wizard chooses an action it cannot afford."""

    def __init__(self, side: Side, action: Action):
        self.side = side
        self.action = action
        super().__init__(
            f"{side.value.capitalize()} wizard cannot afford {get_action_def(action).name} "
            f"(cost {action_cost(action)})"
        )


@dataclass
class TurnRecord:
    """One attempted turn, accepted or rejected."""
    left_action: Action
    right_action: Action
    accepted: bool = True
    illegal_side: Optional[Side] = None

    def to_dict(self):
        return {
            "left_action": self.left_action.value,
            "right_action": self.right_action.value,
            "accepted": self.accepted,
            "illegal_side": self.illegal_side.value if self.illegal_side else None,
        }


@dataclass
class TrialResult:
    """Outcome of one duel plus diagnostics."""
    outcome: Outcome
    turn_count: int
    final_state: DuelState
    illegal_turns: int = 0
    transcript: List[TurnRecord] = field(default_factory=list)

    def to_dict(self):
        return {
            "outcome": self.outcome.value,
            "turn_count": self.turn_count,
            "final_state": self.final_state.to_dict(),
            "illegal_turns": self.illegal_turns,
            "transcript": [t.to_dict() for t in self.transcript],
        }


# =============================================================================
# SATURATING ARITHMETIC
# =============================================================================

def saturating_sub(value: int, amount: int) -> int:
    """Subtract, clamping at 0."""
    return max(0, value - amount)


def saturating_add(value: int, amount: int) -> int:
    """Add, clamping at 0."""
    return max(0, value + amount)


def damage_actor(actor: ActorState, damage: int) -> None:
    actor.health = saturating_sub(actor.health, damage)


def add_resource(actor: ActorState, amount: int) -> None:
    actor.resource = saturating_add(actor.resource, amount)


def remove_resource(actor: ActorState, amount: int) -> None:
    actor.resource = saturating_sub(actor.resource, amount)


def concentrate_gain(config: DuelConfig) -> int:
    """Resource added by Concentrate: the config override, else the catalog gain."""
    if config.concentrate_gain is not None:
        return config.concentrate_gain
    return get_action_def(Action.CONCENTRATE).gain


# =============================================================================
# TURN RESOLUTION
# =============================================================================

def check_legality(state: DuelState, left_action: Action, right_action: Action) -> None:
    """
    Validate both actions against the pre-turn state.

    Raises:
        IllegalMoveError: For the first side (left, then right) that cannot pay
    """
    for side, action in ((Side.LEFT, left_action), (Side.RIGHT, right_action)):
        if not is_action_legal(state.actor(side), action):
            raise IllegalMoveError(side, action)


def evaluate(
    state: DuelState,
    attacker_side: Side,
    attacker_action: Action,
    defender_action: Action,
    config: DuelConfig,
) -> None:
    """
    Apply one side's action against the other side's action, in place.

    Damaging actions are redirected by Reflect and blocked by ManaShield.
    Concentrate always restores resource to its caster. ManaShield and
    Reflect do nothing on their own.
    """
    attacker = state.actor(attacker_side)
    defender = state.opponent(attacker_side)

    if is_damaging(attacker_action):
        damage = get_action_def(attacker_action).damage
        if defender_action is Action.REFLECT:
            damage_actor(attacker, damage)
        elif defender_action is Action.MANA_SHIELD:
            pass
        else:
            damage_actor(defender, damage)
    elif attacker_action is Action.CONCENTRATE:
        add_resource(attacker, concentrate_gain(config))


def resolve_turn(
    state: DuelState,
    left_action: Action,
    right_action: Action,
    config: Optional[DuelConfig] = None,
) -> DuelState:
    """
    Resolve one simultaneous turn.

    The input state is never modified; the new state is built on a copy
    and returned only when both actions were legal.

    Args:
        state: Pre-turn duel state
        left_action: Action chosen by the left wizard
        right_action: Action chosen by the right wizard
        config: Gain amounts (defaults to DuelConfig())

    Returns:
        Post-turn duel state with turn_count advanced by one

    Raises:
        IllegalMoveError: If either side cannot afford its action
    """
    config = config or DuelConfig()
    check_legality(state, left_action, right_action)

    next_state = state.copy()

    # Costs come out of each side's own pre-turn resource
    for side, action in ((Side.LEFT, left_action), (Side.RIGHT, right_action)):
        remove_resource(next_state.actor(side), action_cost(action))

    evaluate(next_state, Side.LEFT, left_action, right_action, config)
    evaluate(next_state, Side.RIGHT, right_action, left_action, config)

    add_resource(next_state.left, config.passive_gain)
    add_resource(next_state.right, config.passive_gain)

    next_state.turn_count += 1
    return next_state


# =============================================================================
# TERMINATION
# =============================================================================

def is_terminal(state: DuelState) -> Tuple[bool, Optional[Outcome]]:
    """
    Check whether the duel has ended.

    Returns:
        (done, outcome); outcome is None while the duel continues
    """
    left_dead = state.left.health == 0
    right_dead = state.right.health == 0

    if left_dead and right_dead:
        return True, Outcome.BOTH_DEAD
    if left_dead:
        return True, Outcome.RIGHT_WINS
    if right_dead:
        return True, Outcome.LEFT_WINS
    return False, None


def get_winner(state: DuelState) -> Optional[Side]:
    """Get the winning side, or None if undecided or both died."""
    _, outcome = is_terminal(state)
    if outcome is Outcome.LEFT_WINS:
        return Side.LEFT
    if outcome is Outcome.RIGHT_WINS:
        return Side.RIGHT
    return None
