"""
Gym-like Duel Environment.

Provides a standard RL interface where the agent controls one wizard
and a fixed policy controls the other.
"""

import numpy as np
from typing import Dict, Tuple, Optional, Union

import gymnasium as gym
from gymnasium import spaces

from duel_ai.actions import action_mask
from duel_ai.featurize import featurize_state
from duel_ai.policy_heuristic import Policy, get_policy
from duel_ai.schema import action_index_to_action, get_action_size, get_observation_size
from duel_sim.config import DuelConfig
from duel_sim.mechanics import IllegalMoveError, Outcome, is_terminal, resolve_turn
from duel_sim.state import DuelState, Side, create_duel

WIN_REWARD = 1.0
LOSS_REWARD = -1.0
ILLEGAL_MOVE_PENALTY = -0.1


class DuelEnv:
    """
    Gym-like duel environment for RL training.

    Each step is one simultaneous turn: the agent's action plus the
    opponent policy's action. An illegal pair skips the turn.
    """

    def __init__(
        self,
        seed: int = None,
        config: DuelConfig = None,
        opponent_policy: Union[str, Policy] = "random",
        agent_side: Side = Side.LEFT,
        max_steps: int = 200
    ):
        """
        Initialize duel environment.

        Args:
            seed: Random seed for reproducibility
            config: Duel configuration
            opponent_policy: Policy (or registered name) for the other wizard
            agent_side: Side controlled by the agent
            max_steps: Maximum steps (attempted turns) before truncation
        """
        self.seed_value = seed
        self.config = config or DuelConfig()
        self.opponent_policy = get_policy(opponent_policy) if isinstance(opponent_policy, str) else opponent_policy
        self.agent_side = agent_side
        self.max_steps = max_steps

        self.state: Optional[DuelState] = None
        self.rng: Optional[np.random.Generator] = None
        self.step_count: int = 0

        self.observation_size = get_observation_size()
        self.action_size = get_action_size()

    def reset(self, seed: int = None) -> Tuple[np.ndarray, Dict]:
        """
        Reset environment to the opening state.

        Returns:
            (observation, info)
        """
        if seed is not None:
            self.seed_value = seed

        self.rng = np.random.default_rng(self.seed_value)
        self.step_count = 0
        self.state = create_duel(self.config)

        return self._get_observation(), self._get_info()

    def step(self, action_index: int) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        """
        Resolve one turn with the agent's action.

        Args:
            action_index: Catalog index of the agent's action

        Returns:
            (observation, reward, done, truncated, info)

        Raises:
            RuntimeError: If the env was not reset or the duel already ended
        """
        if self.state is None:
            raise RuntimeError("Environment not reset")
        if is_terminal(self.state)[0]:
            raise RuntimeError("Duel is over; call reset()")

        self.step_count += 1
        agent_action = action_index_to_action(action_index)
        opponent_action = self.opponent_policy(self.state, self.agent_side.other(), self.rng)

        if self.agent_side is Side.LEFT:
            left_action, right_action = agent_action, opponent_action
        else:
            left_action, right_action = opponent_action, agent_action

        reward = 0.0
        illegal_side = None
        try:
            self.state = resolve_turn(self.state, left_action, right_action, self.config)
        except IllegalMoveError as e:
            illegal_side = e.side
            if e.side is self.agent_side:
                reward += ILLEGAL_MOVE_PENALTY

        done, outcome = is_terminal(self.state)
        if done:
            reward += self._outcome_reward(outcome)

        truncated = not done and self.step_count >= self.max_steps

        info = self._get_info()
        info["illegal_move"] = illegal_side is not None
        info["illegal_side"] = illegal_side.value if illegal_side else None
        info["opponent_action"] = opponent_action.value
        info["outcome"] = outcome.value if outcome else None

        return self._get_observation(), reward, done, truncated, info

    def _outcome_reward(self, outcome: Outcome) -> float:
        agent_wins = Outcome.LEFT_WINS if self.agent_side is Side.LEFT else Outcome.RIGHT_WINS
        agent_loses = Outcome.RIGHT_WINS if self.agent_side is Side.LEFT else Outcome.LEFT_WINS
        if outcome is agent_wins:
            return WIN_REWARD
        if outcome is agent_loses:
            return LOSS_REWARD
        return 0.0

    def _get_observation(self) -> np.ndarray:
        """Get current observation vector."""
        if self.state is None:
            return np.zeros(self.observation_size, dtype=np.float32)
        return featurize_state(self.state, self.agent_side, self.config)

    def _get_info(self) -> Dict:
        """Get info dict including action mask."""
        if self.state is None:
            return {"action_mask": np.zeros(self.action_size, dtype=bool)}

        return {
            "action_mask": action_mask(self.state, self.agent_side),
            "turn_count": self.state.turn_count,
            "step_count": self.step_count,
        }

    def render_text(self) -> str:
        """Render current state as text for debugging."""
        if self.state is None:
            return "Environment not reset"

        lines = [f"=== Turn {self.state.turn_count} ==="]
        for side in (Side.LEFT, Side.RIGHT):
            actor = self.state.actor(side)
            status = "ALIVE" if actor.is_alive else "DOWN"
            marker = " <--" if side is self.agent_side else ""
            lines.append(
                f"  {side.value.capitalize()}: HP {actor.health}/{self.config.initial_health} "
                f"Mana {actor.resource} [{status}]{marker}"
            )
        return "\n".join(lines)


class DuelGymEnv(gym.Env):
    """Gymnasium-compatible wrapper for DuelEnv."""

    metadata = {"render_modes": ["text"]}

    def __init__(
        self,
        seed: int = None,
        config: DuelConfig = None,
        opponent_policy: Union[str, Policy] = "random",
        agent_side: Side = Side.LEFT,
        max_steps: int = 200
    ):
        super().__init__()

        self.env = DuelEnv(
            seed=seed,
            config=config,
            opponent_policy=opponent_policy,
            agent_side=agent_side,
            max_steps=max_steps
        )

        self.observation_space = spaces.Box(
            low=0.0,
            high=1.0,
            shape=(self.env.observation_size,),
            dtype=np.float32
        )

        self.action_space = spaces.Discrete(self.env.action_size)

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)
        return self.env.reset(seed=seed)

    def step(self, action):
        return self.env.step(int(action))

    def render(self):
        return self.env.render_text()

    def get_action_mask(self) -> np.ndarray:
        """Get current action mask for masked action selection."""
        info = self.env._get_info()
        return info.get("action_mask", np.ones(self.env.action_size, dtype=bool))
