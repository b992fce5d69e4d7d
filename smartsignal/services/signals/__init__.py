"""
Signal Classifier

CONTRACT:
    Input:  ConfluenceResult + RuleSet + StrategyConfig
    Output: SignalLevel + exit levels

RESPONSIBILITIES:
    - Classify the confluence tally into one of 7 signal levels
    - Place stop-loss / take-profit (structural or fixed distance)
    - Compute risk/reward
"""

from smartsignal.services.signals.classifier import classify
from smartsignal.services.signals.targets import (
    ExitLevels,
    fixed_exits,
    structural_exits,
    risk_reward_ratio,
)

__all__ = [
    "classify",
    "ExitLevels",
    "fixed_exits",
    "structural_exits",
    "risk_reward_ratio",
]
