"""
Action Catalog and Observation Schema for the Wizard Duel.

Defines the closed set of duel actions, their damage and resource
effects, and the fixed-size numeric observation vector.
"""

from dataclasses import dataclass
from enum import Enum
import numbers
from typing import Dict, List, Any


# =============================================================================
# ACTION SPACE
# =============================================================================

class Action(Enum):
    """Closed set of moves a wizard can choose each turn."""
    STRIKE = "strike"
    FIREBALL = "fireball"
    LIGHTNING_BOLT = "lightning_bolt"
    MANA_SHIELD = "mana_shield"
    REFLECT = "reflect"
    CONCENTRATE = "concentrate"


@dataclass(frozen=True)
class ActionDef:
    """Constant properties of a single action."""
    name: str
    damage: int = 0  # Dealt to an unshielded, non-reflecting opponent
    cost: int = 0    # Resource paid by the actor
    gain: int = 0    # Resource gained by the actor (DuelConfig may override)

    @property
    def resource_delta(self) -> int:
        """Signed catalog resource change for the actor (negative = consumed)."""
        return self.gain - self.cost


ACTION_CATALOG: Dict[Action, ActionDef] = {
    Action.STRIKE: ActionDef(name="Strike", damage=2),
    Action.FIREBALL: ActionDef(name="Fireball", damage=3, cost=1),
    Action.LIGHTNING_BOLT: ActionDef(name="LightningBolt", damage=5, cost=2),
    Action.MANA_SHIELD: ActionDef(name="ManaShield", cost=1),
    Action.REFLECT: ActionDef(name="Reflect", cost=2),
    Action.CONCENTRATE: ActionDef(name="Concentrate", gain=4),
}

# Catalog order doubles as the discrete action index
ALL_ACTIONS: List[Action] = list(Action)
DAMAGING_ACTIONS = frozenset({Action.STRIKE, Action.FIREBALL, Action.LIGHTNING_BOLT})

TOTAL_ACTIONS = len(ALL_ACTIONS)  # 6


def get_action_def(action: Action) -> ActionDef:
    """Look up the catalog entry for an action."""
    return ACTION_CATALOG[action]


def is_damaging(action: Action) -> bool:
    """True for Strike, Fireball and LightningBolt."""
    return action in DAMAGING_ACTIONS


def action_index_to_action(action_index: int) -> Action:
    """Convert a discrete action index to an Action."""
    if not 0 <= int(action_index) < TOTAL_ACTIONS:
        raise ValueError(f"Action index out of range: {action_index}")
    return ALL_ACTIONS[int(action_index)]


def action_to_index(action: Action) -> int:
    """Convert an Action to its discrete action index."""
    return ALL_ACTIONS.index(action)


def parse_action(value: Any) -> Action:
    """
    Resolve an Action from an Action, an index, an enum value or a catalog name.

    Accepts "fireball", "FIREBALL" and "Fireball" alike.
    """
    if isinstance(value, Action):
        return value
    if isinstance(value, numbers.Integral):
        return action_index_to_action(value)

    text = str(value).strip()
    for action, action_def in ACTION_CATALOG.items():
        if text in (action.value, action.name, action_def.name):
            return action
    raise ValueError(f"Unknown action: {value!r}")


# =============================================================================
# OBSERVATION SCHEMA
# =============================================================================

@dataclass
class ObservationSpec:
    """Defines the observation vector structure (from one side's perspective)."""

    # A) Self state: health_pct, resource
    SELF_START = 0
    SELF_SIZE = 2

    # B) Opponent state: health_pct, resource
    OPPONENT_START = SELF_START + SELF_SIZE
    OPPONENT_SIZE = 2

    # C) Global: turn_count
    GLOBAL_START = OPPONENT_START + OPPONENT_SIZE
    GLOBAL_SIZE = 1

    # D) Legal action flags, one per catalog entry
    MASK_START = GLOBAL_START + GLOBAL_SIZE
    MASK_SIZE = TOTAL_ACTIONS

    TOTAL_SIZE = MASK_START + MASK_SIZE


# Scaling constants for normalization
MAX_RESOURCE = 20
MAX_TURNS_SCALE = 100


def get_observation_size() -> int:
    """Return total observation vector size."""
    return ObservationSpec.TOTAL_SIZE


def get_action_size() -> int:
    """Return total action space size."""
    return TOTAL_ACTIONS
