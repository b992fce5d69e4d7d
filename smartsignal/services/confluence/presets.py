"""
Strategy Presets

A preset is data, not code: an ordered rule table, a confidence model,
the signal tiers the classifier may emit, and how exit levels are placed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from smartsignal.schemas.signals import SignalLevel, StrategyPreset
from smartsignal.services.confluence import rules
from smartsignal.services.confluence.rules import Rule


class BoostBase(str, Enum):
    """What the confidence boost is proportional to."""

    CONFLUENCE_SCORE = "CONFLUENCE_SCORE"
    REASON_COUNT = "REASON_COUNT"


class TargetMode(str, Enum):
    """How stop-loss and take-profit levels are placed."""

    STRUCTURAL = "STRUCTURAL"  # order blocks / FVGs / liquidity, ATR fallback
    FIXED = "FIXED"  # fixed pip distance and reward ratio


@dataclass(frozen=True)
class ConfidenceModel:
    boost_base: BoostBase
    boost_factor: float
    boost_cap: float
    ceiling: float
    neutral_confidence: float
    floor: Optional[float] = None
    floor_threshold: Optional[int] = None


@dataclass(frozen=True)
class TierThreshold:
    """Minimum score, side difference and confidence for a signal tier."""

    min_score: int
    min_diff: int
    min_confidence: float
    buy: SignalLevel
    sell: SignalLevel


@dataclass(frozen=True)
class RuleSet:
    preset: StrategyPreset
    rules: tuple[Rule, ...]
    confidence: ConfidenceModel
    tiers: tuple[TierThreshold, ...]  # strongest first
    base_buy: SignalLevel
    base_sell: SignalLevel
    target_mode: TargetMode


# =============================================================================
# PRESETS
# =============================================================================


BASIC_RULES = RuleSet(
    preset=StrategyPreset.BASIC,
    rules=(
        rules.sma_trend,
        rules.ema_relation,
        rules.rsi_momentum,
        rules.macd_signal_cross,
        rules.bollinger_position,
    ),
    confidence=ConfidenceModel(
        boost_base=BoostBase.REASON_COUNT,
        boost_factor=5,
        boost_cap=20,
        ceiling=100,
        neutral_confidence=0,
    ),
    tiers=(),
    base_buy=SignalLevel.BUY,
    base_sell=SignalLevel.SELL,
    target_mode=TargetMode.FIXED,
)

ENHANCED_RULES = RuleSet(
    preset=StrategyPreset.ENHANCED,
    rules=(
        rules.rsi_extremes,
        rules.macd_histogram,
        rules.ema_trend,
        rules.near_bullish_fvg,
        rules.near_bearish_fvg,
        rules.near_demand_block,
        rules.near_supply_block,
        rules.market_structure,
        rules.volume_confirmation,
        rules.session_filter,
    ),
    confidence=ConfidenceModel(
        boost_base=BoostBase.CONFLUENCE_SCORE,
        boost_factor=2,
        boost_cap=25,
        ceiling=95,
        neutral_confidence=50,
        floor=60,
        floor_threshold=5,
    ),
    tiers=(
        TierThreshold(12, 6, 85, SignalLevel.STRONG_BUY, SignalLevel.STRONG_SELL),
        TierThreshold(8, 4, 75, SignalLevel.BUY, SignalLevel.SELL),
    ),
    base_buy=SignalLevel.WEAK_BUY,
    base_sell=SignalLevel.WEAK_SELL,
    target_mode=TargetMode.STRUCTURAL,
)

_PRESETS = {
    StrategyPreset.BASIC: BASIC_RULES,
    StrategyPreset.ENHANCED: ENHANCED_RULES,
}


def get_rule_set(preset: StrategyPreset) -> RuleSet:
    """Look up the rule table of a preset."""
    return _PRESETS[preset]
