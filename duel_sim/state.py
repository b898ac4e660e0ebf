"""
Pure Python Duel State Container.

This module defines the duel state structure used by the simulation.
States are plain data; only the resolution engine produces new ones.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from duel_sim.config import DuelConfig


class Side(Enum):
    """One of the two duelling wizards."""
    LEFT = "left"
    RIGHT = "right"

    def other(self) -> "Side":
        return Side.RIGHT if self is Side.LEFT else Side.LEFT


@dataclass
class ActorState:
    """Health and resource of one wizard."""
    health: int = 25
    resource: int = 1

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    def to_dict(self) -> Dict:
        return {"health": self.health, "resource": self.resource}

    @classmethod
    def from_dict(cls, d: Dict) -> "ActorState":
        return cls(
            health=int(d.get("health", cls.health)),
            resource=int(d.get("resource", cls.resource)),
        )

    def copy(self) -> "ActorState":
        return ActorState(health=self.health, resource=self.resource)


@dataclass
class DuelState:
    """Complete duel state: both wizards plus the resolved turn counter."""
    left: ActorState = field(default_factory=ActorState)
    right: ActorState = field(default_factory=ActorState)
    turn_count: int = 0

    def actor(self, side: Side) -> ActorState:
        """Get the state of the given side."""
        return self.left if side is Side.LEFT else self.right

    def opponent(self, side: Side) -> ActorState:
        """Get the state of the side facing the given one."""
        return self.actor(side.other())

    def to_dict(self) -> Dict:
        return {
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
            "turn_count": self.turn_count,
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "DuelState":
        return cls(
            left=ActorState.from_dict(d.get("left", {})),
            right=ActorState.from_dict(d.get("right", {})),
            turn_count=int(d.get("turn_count", 0)),
        )

    def copy(self) -> "DuelState":
        """Create an independent copy of the state."""
        return DuelState(
            left=self.left.copy(),
            right=self.right.copy(),
            turn_count=self.turn_count,
        )


def create_duel(config: Optional[DuelConfig] = None) -> DuelState:
    """
    Create the opening state of a duel.

    Both wizards start with the configured health and resource.
    """
    config = config or DuelConfig()
    return DuelState(
        left=ActorState(health=config.initial_health, resource=config.initial_resource),
        right=ActorState(health=config.initial_health, resource=config.initial_resource),
        turn_count=0,
    )


def state_to_ai_dict(state: DuelState, side: Side) -> Dict:
    """Convert DuelState to the perspective dict used by policies and featurization."""
    return {
        "self": state.actor(side).to_dict(),
        "opponent": state.opponent(side).to_dict(),
        "side": side.value,
        "turn_count": state.turn_count,
    }
