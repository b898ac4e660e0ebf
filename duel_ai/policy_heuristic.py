"""
Action-Selection Policies for Duel Wizards.

Every policy has the signature (state, side, rng) -> Action and is called
once per side per turn. The random policy is the reference baseline; the
others exist for comparison runs and deterministic tests.
"""

import numpy as np
from typing import Callable, Dict, Iterable

from duel_ai.actions import is_action_legal, valid_actions
from duel_ai.schema import Action, ALL_ACTIONS
from duel_sim.state import DuelState, Side

Policy = Callable[[DuelState, Side, np.random.Generator], Action]

# Strongest first
ATTACK_PREFERENCE = [Action.LIGHTNING_BOLT, Action.FIREBALL, Action.STRIKE]

# At or below this health the heuristic turns defensive
LOW_HEALTH_THRESHOLD = 5


def random_policy(state: DuelState, side: Side, rng: np.random.Generator) -> Action:
    """Uniform choice over all six actions, legal or not."""
    return ALL_ACTIONS[int(rng.integers(len(ALL_ACTIONS)))]


def masked_random_policy(state: DuelState, side: Side, rng: np.random.Generator) -> Action:
    """Uniform choice over the actions this side can afford."""
    legal = valid_actions(state, side)
    return legal[int(rng.integers(len(legal)))]


def aggressive_policy(state: DuelState, side: Side, rng: np.random.Generator) -> Action:
    """Strongest affordable attack; Strike costs nothing so one always is."""
    actor = state.actor(side)
    return next(a for a in ATTACK_PREFERENCE if is_action_legal(actor, a))


def passive_policy(state: DuelState, side: Side, rng: np.random.Generator) -> Action:
    """Never attacks. Two passive wizards never finish a duel."""
    actor = state.actor(side)
    if is_action_legal(actor, Action.MANA_SHIELD):
        return Action.MANA_SHIELD
    return Action.CONCENTRATE


def heuristic_select_action(state: DuelState, side: Side, rng: np.random.Generator) -> Action:
    """
    Simple resource-aware policy.

    - Broke: Concentrate (unless a Strike finishes the opponent)
    - Low health: Reflect or ManaShield when affordable, picked at random
    - Otherwise: strongest affordable attack that does not waste the
      opportunity to bank resource for a LightningBolt
    """
    actor = state.actor(side)
    opponent = state.opponent(side)

    if opponent.health <= 2:
        return Action.STRIKE

    if actor.resource == 0:
        return Action.CONCENTRATE

    if actor.health <= LOW_HEALTH_THRESHOLD:
        defenses = [a for a in (Action.REFLECT, Action.MANA_SHIELD) if is_action_legal(actor, a)]
        if defenses:
            return defenses[int(rng.integers(len(defenses)))]

    if is_action_legal(actor, Action.LIGHTNING_BOLT):
        return Action.LIGHTNING_BOLT

    # One short of a bolt: bank resource half the time
    if rng.random() < 0.5:
        return Action.CONCENTRATE
    return aggressive_policy(state, side, rng)


def make_scripted_policy(actions: Iterable[Action]) -> Policy:
    """
    Build a policy that replays a fixed sequence of actions.

    Raises:
        IndexError: When called more times than there are actions
    """
    script = list(actions)
    position = {"i": 0}

    def scripted_policy(state: DuelState, side: Side, rng: np.random.Generator) -> Action:
        i = position["i"]
        if i >= len(script):
            raise IndexError(f"Scripted policy exhausted after {len(script)} actions")
        position["i"] = i + 1
        return script[i]

    return scripted_policy


# Named policies; worker processes receive the name rather than the function
POLICIES: Dict[str, Policy] = {
    "random": random_policy,
    "masked_random": masked_random_policy,
    "heuristic": heuristic_select_action,
    "aggressive": aggressive_policy,
    "passive": passive_policy,
}


def get_policy(name: str) -> Policy:
    """Look up a registered policy by name."""
    try:
        return POLICIES[name]
    except KeyError:
        raise ValueError(f"Unknown policy: {name!r} (known: {', '.join(sorted(POLICIES))})") from None
