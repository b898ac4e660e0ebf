# AI module for duel action selection
# This module provides:
# - schema.py: action catalog and observation specification
# - featurize.py: state to numeric vector conversion
# - actions.py: action legality and masking
# - policy_heuristic.py: action-selection policies
# - logger.py: JSONL turn transcript logging

__version__ = "0.1.0"
