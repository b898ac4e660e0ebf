# Simulation module for headless wizard duels
# This module provides:
# - config.py: duel and Monte Carlo configuration
# - state.py: pure Python duel state container
# - mechanics.py: deterministic turn resolution
# - env.py: Gym-like environment wrapper
# - runner.py: trial runner and Monte Carlo driver

__version__ = "0.1.0"
