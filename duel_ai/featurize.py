"""
Featurization: Convert duel state to fixed-size numeric observation vector.
"""

import numpy as np
from typing import Optional

from duel_ai.actions import action_mask
from duel_ai.schema import ObservationSpec, MAX_RESOURCE, MAX_TURNS_SCALE
from duel_sim.config import DuelConfig
from duel_sim.state import DuelState, Side, state_to_ai_dict


def clamp(value: float, min_val: float = 0.0, max_val: float = 1.0) -> float:
    """Clamp value to range."""
    return max(min_val, min(max_val, value))


def scale(value: float, max_value: float, min_value: float = 0.0) -> float:
    """Scale value to [0, 1] range."""
    if max_value == min_value:
        return 0.0
    return clamp((value - min_value) / (max_value - min_value))


def featurize_state(
    state: DuelState,
    side: Side,
    config: Optional[DuelConfig] = None
) -> np.ndarray:
    """
    Convert a duel state to an observation vector from one side's view.

    Args:
        state: Current duel state
        side: Side whose perspective is encoded
        config: Used for the health scale (initial health)

    Returns:
        float32 array of shape (ObservationSpec.TOTAL_SIZE,) with values in [0, 1]
    """
    config = config or DuelConfig()
    view = state_to_ai_dict(state, side)
    obs = np.zeros(ObservationSpec.TOTAL_SIZE, dtype=np.float32)

    i = ObservationSpec.SELF_START
    obs[i] = scale(view["self"]["health"], config.initial_health)
    obs[i + 1] = scale(view["self"]["resource"], MAX_RESOURCE)

    i = ObservationSpec.OPPONENT_START
    obs[i] = scale(view["opponent"]["health"], config.initial_health)
    obs[i + 1] = scale(view["opponent"]["resource"], MAX_RESOURCE)

    obs[ObservationSpec.GLOBAL_START] = scale(view["turn_count"], MAX_TURNS_SCALE)

    start = ObservationSpec.MASK_START
    obs[start:start + ObservationSpec.MASK_SIZE] = action_mask(state, side).astype(np.float32)

    return obs
