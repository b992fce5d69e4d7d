"""
Confluence Engine

CONTRACT:
    Input:  ConfluenceInputs (latest indicator values + structure) + RuleSet
    Output: ConfluenceResult

Two presets share one engine: BASIC (moving averages, RSI, MACD,
Bollinger) and ENHANCED (momentum plus smart-money structure).
"""

from smartsignal.services.confluence.engine import evaluate, score_confidence
from smartsignal.services.confluence.presets import (
    RuleSet,
    TargetMode,
    BASIC_RULES,
    ENHANCED_RULES,
    get_rule_set,
)
from smartsignal.services.confluence.rules import ConfluenceInputs, RuleOutcome

__all__ = [
    "evaluate",
    "score_confidence",
    "RuleSet",
    "TargetMode",
    "BASIC_RULES",
    "ENHANCED_RULES",
    "get_rule_set",
    "ConfluenceInputs",
    "RuleOutcome",
]
