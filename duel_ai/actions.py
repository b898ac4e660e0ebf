"""
Action Space: validate and mask duel actions.

Legality is side-local: a wizard may choose an action only if its own
resource covers that action's own cost. The opponent's action and
resource never matter.
"""

import numpy as np
from typing import List

from duel_ai.schema import Action, ALL_ACTIONS, TOTAL_ACTIONS, get_action_def
from duel_sim.state import ActorState, DuelState, Side


def action_cost(action: Action) -> int:
    """Resource an actor must hold (and pays) to use the action."""
    return get_action_def(action).cost


def is_action_legal(actor: ActorState, action: Action) -> bool:
    """Check whether the actor can afford the action."""
    return actor.resource >= action_cost(action)


def action_mask(state: DuelState, side: Side) -> np.ndarray:
    """
    Get boolean mask of legal actions for one side.

    Args:
        state: Current duel state
        side: Side choosing the action

    Returns:
        Boolean array of shape (TOTAL_ACTIONS,), in catalog order
    """
    actor = state.actor(side)
    mask = np.zeros(TOTAL_ACTIONS, dtype=bool)
    for idx, action in enumerate(ALL_ACTIONS):
        mask[idx] = is_action_legal(actor, action)
    return mask


def valid_actions(state: DuelState, side: Side) -> List[Action]:
    """List the actions one side may legally choose."""
    actor = state.actor(side)
    return [a for a in ALL_ACTIONS if is_action_legal(actor, a)]
