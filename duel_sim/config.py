"""
Duel and Monte Carlo Configuration.

All tunable numbers live here; nothing in the engine is hardcoded.
"""

from dataclasses import dataclass, asdict, fields, replace
from typing import Dict, Optional, Any


@dataclass(frozen=True)
class DuelConfig:
    """Configuration for a single duel and for batches of trials."""
    initial_health: int = 25
    initial_resource: int = 1
    passive_gain: int = 1          # Added to both sides after every resolved turn
    concentrate_gain: Optional[int] = None  # Overrides the catalog gain of Concentrate
    n_trials: int = 1_000_000
    max_turns: Optional[int] = None  # None = no cap (trial ends only on a death)
    chunk_size: int = 10_000       # Trials per independent RNG stream
    n_workers: int = 1
    seed: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict) -> "DuelConfig":
        """Build a config from a dict; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in (d or {}).items() if k in known})

    def with_overrides(self, **overrides) -> "DuelConfig":
        """Return a copy with some fields replaced."""
        return replace(self, **overrides)

    def validate(self) -> "DuelConfig":
        """
        Check value ranges.

        Raises:
            ValueError: If any value is outside its allowed range
        """
        if self.initial_health <= 0:
            raise ValueError(f"initial_health must be positive, got {self.initial_health}")
        for name in ("initial_resource", "passive_gain", "concentrate_gain", "n_trials"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")
        if self.max_turns is not None and self.max_turns <= 0:
            raise ValueError(f"max_turns must be positive or None, got {self.max_turns}")
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.n_workers <= 0:
            raise ValueError(f"n_workers must be positive, got {self.n_workers}")
        return self


# The two configurations observed in reference runs
REFERENCE_CONFIG = DuelConfig()
SHORT_DUEL_CONFIG = DuelConfig(initial_health=15)
