"""
Confluence Rules

Each rule inspects a snapshot of latest values and either abstains
(returns None) or returns one RuleOutcome. Rules never see full series.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, NamedTuple, Optional

from smartsignal.schemas.indicators import IndicatorSeries, MarketContext, latest
from smartsignal.schemas.structure import (
    StructureSnapshot,
    FairValueGap,
    FVGDirection,
    OrderBlock,
    OrderBlockType,
    VolumeProfile,
    Bias,
)


# Relative band around a zone that still counts as "near" (0.2%)
NEAR_ZONE_LOWER = 0.998
NEAR_ZONE_UPPER = 1.002

# Averages closer than this relative distance are treated as equal
LEVEL_TOLERANCE = 1e-9


class RuleOutcome(NamedTuple):
    """Contribution of one fired rule. NEUTRAL only moves the confluence score."""

    side: Bias
    points: int
    reason: str


@dataclass
class ConfluenceInputs:
    """Latest indicator values and structure the rules are evaluated against."""

    price: float
    sma_20: Optional[float] = None
    sma_50: Optional[float] = None
    ema_12: Optional[float] = None
    ema_26: Optional[float] = None
    rsi: Optional[float] = None
    macd: Optional[float] = None
    macd_signal: Optional[float] = None
    histogram: Optional[float] = None
    prev_histogram: Optional[float] = None
    bb_upper: Optional[float] = None
    bb_middle: Optional[float] = None
    bb_lower: Optional[float] = None
    fair_value_gaps: list[FairValueGap] = field(default_factory=list)
    order_blocks: list[OrderBlock] = field(default_factory=list)
    volume_profile: VolumeProfile = VolumeProfile.MEDIUM
    microstructure: Bias = Bias.NEUTRAL
    session_active: bool = False

    @classmethod
    def from_analysis(
        cls,
        price: float,
        indicators: IndicatorSeries,
        structure: StructureSnapshot,
        context: MarketContext,
        as_of: Optional[datetime] = None,
    ) -> "ConfluenceInputs":
        """Snapshot of values defined on the candle stamped `as_of`."""

        def current(series, offset=1):
            return latest(series, offset, as_of=as_of)

        return cls(
            price=price,
            sma_20=current(indicators.sma_20),
            sma_50=current(indicators.sma_50),
            ema_12=current(indicators.ema_12),
            ema_26=current(indicators.ema_26),
            rsi=current(indicators.rsi_14),
            macd=current(indicators.macd.macd),
            macd_signal=current(indicators.macd.signal),
            histogram=current(indicators.macd.histogram),
            prev_histogram=current(indicators.macd.histogram, 2),
            bb_upper=current(indicators.bollinger_bands.upper),
            bb_middle=current(indicators.bollinger_bands.middle),
            bb_lower=current(indicators.bollinger_bands.lower),
            fair_value_gaps=list(structure.fair_value_gaps),
            order_blocks=list(structure.order_blocks),
            volume_profile=structure.volume_profile,
            microstructure=structure.microstructure,
            session_active=context.session_active,
        )


Rule = Callable[[ConfluenceInputs], Optional[RuleOutcome]]


def _near(price: float, lower: float, upper: float) -> bool:
    return lower * NEAR_ZONE_LOWER <= price <= upper * NEAR_ZONE_UPPER


def _level(a: float, b: float) -> bool:
    """Equal up to floating-point rounding."""
    return math.isclose(a, b, rel_tol=LEVEL_TOLERANCE)


# =============================================================================
# BASIC RULES
# =============================================================================


def sma_trend(x: ConfluenceInputs) -> Optional[RuleOutcome]:
    if x.sma_20 is None or x.sma_50 is None:
        return None
    if _level(x.sma_20, x.sma_50):
        return None
    if x.sma_20 > x.sma_50 and x.price > x.sma_20:
        return RuleOutcome(Bias.BULLISH, 2, "Price above rising SMA20 > SMA50")
    if x.sma_20 < x.sma_50 and x.price < x.sma_20:
        return RuleOutcome(Bias.BEARISH, 2, "Price below falling SMA20 < SMA50")
    return None


def ema_relation(x: ConfluenceInputs) -> Optional[RuleOutcome]:
    if x.ema_12 is None or x.ema_26 is None:
        return None
    if _level(x.ema_12, x.ema_26):
        return None
    if x.ema_12 > x.ema_26:
        return RuleOutcome(Bias.BULLISH, 1, "EMA12 > EMA26 (bullish crossover)")
    if x.ema_12 < x.ema_26:
        return RuleOutcome(Bias.BEARISH, 1, "EMA12 < EMA26 (bearish crossover)")
    return None


def rsi_momentum(x: ConfluenceInputs) -> Optional[RuleOutcome]:
    if x.rsi is None:
        return None
    if x.rsi < 30:
        return RuleOutcome(Bias.BULLISH, 2, f"RSI oversold at {x.rsi:.1f}")
    if x.rsi > 70:
        return RuleOutcome(Bias.BEARISH, 2, f"RSI overbought at {x.rsi:.1f}")
    if x.rsi < 45:
        return RuleOutcome(Bias.BULLISH, 1, "RSI showing bullish momentum")
    if x.rsi > 55:
        return RuleOutcome(Bias.BEARISH, 1, "RSI showing bearish momentum")
    return None


def macd_signal_cross(x: ConfluenceInputs) -> Optional[RuleOutcome]:
    if x.macd is None or x.macd_signal is None or x.histogram is None:
        return None
    if x.macd > x.macd_signal and x.histogram > 0:
        return RuleOutcome(Bias.BULLISH, 1, "MACD bullish crossover")
    if x.macd < x.macd_signal and x.histogram < 0:
        return RuleOutcome(Bias.BEARISH, 1, "MACD bearish crossover")
    return None


def bollinger_position(x: ConfluenceInputs) -> Optional[RuleOutcome]:
    if x.bb_upper is None or x.bb_middle is None or x.bb_lower is None:
        return None
    # Zero-width bands carry no position information
    if x.bb_upper <= x.bb_lower or _level(x.bb_upper, x.bb_lower):
        return None
    if x.price <= x.bb_lower:
        return RuleOutcome(Bias.BULLISH, 2, "Price at lower Bollinger Band (oversold)")
    if x.price >= x.bb_upper:
        return RuleOutcome(Bias.BEARISH, 2, "Price at upper Bollinger Band (overbought)")
    if x.price > x.bb_middle:
        return RuleOutcome(Bias.BULLISH, 1, "Price above BB middle line")
    return RuleOutcome(Bias.BEARISH, 1, "Price below BB middle line")


# =============================================================================
# ENHANCED RULES
# =============================================================================


def rsi_extremes(x: ConfluenceInputs) -> Optional[RuleOutcome]:
    if x.rsi is None:
        return None
    if x.rsi < 30:
        return RuleOutcome(Bias.BULLISH, 4, f"RSI oversold: {x.rsi:.1f}")
    if x.rsi > 70:
        return RuleOutcome(Bias.BEARISH, 4, f"RSI overbought: {x.rsi:.1f}")
    if x.rsi < 40:
        return RuleOutcome(Bias.BULLISH, 2, f"RSI bullish: {x.rsi:.1f}")
    if x.rsi > 60:
        return RuleOutcome(Bias.BEARISH, 2, f"RSI bearish: {x.rsi:.1f}")
    return None


def macd_histogram(x: ConfluenceInputs) -> Optional[RuleOutcome]:
    if x.histogram is None or x.prev_histogram is None:
        return None
    if x.prev_histogram <= 0 < x.histogram:
        return RuleOutcome(Bias.BULLISH, 5, "MACD bullish crossover")
    if x.prev_histogram >= 0 > x.histogram:
        return RuleOutcome(Bias.BEARISH, 5, "MACD bearish crossover")
    if x.histogram > 0:
        return RuleOutcome(Bias.BULLISH, 2, "MACD above zero")
    if x.histogram < 0:
        return RuleOutcome(Bias.BEARISH, 2, "MACD below zero")
    return None


def ema_trend(x: ConfluenceInputs) -> Optional[RuleOutcome]:
    if x.ema_12 is None or x.ema_26 is None:
        return None
    if _level(x.ema_12, x.ema_26):
        return None
    if x.ema_12 > x.ema_26 and x.price > x.ema_12:
        return RuleOutcome(Bias.BULLISH, 3, "Bullish EMA trend")
    if x.ema_12 < x.ema_26 and x.price < x.ema_12:
        return RuleOutcome(Bias.BEARISH, 3, "Bearish EMA trend")
    return None


def _near_gap(x: ConfluenceInputs, direction: FVGDirection) -> Optional[FairValueGap]:
    return next(
        (
            g
            for g in x.fair_value_gaps
            if g.direction == direction
            and not g.filled
            and _near(x.price, g.lower_bound, g.upper_bound)
        ),
        None,
    )


def _near_block(x: ConfluenceInputs, direction: OrderBlockType) -> Optional[OrderBlock]:
    return next(
        (
            b
            for b in x.order_blocks
            if b.direction == direction
            and not b.tested
            and _near(x.price, b.lower_bound, b.upper_bound)
        ),
        None,
    )


def near_bullish_fvg(x: ConfluenceInputs) -> Optional[RuleOutcome]:
    gap = _near_gap(x, FVGDirection.BULLISH)
    if gap is None:
        return None
    return RuleOutcome(Bias.BULLISH, 3, f"Near bullish FVG ({gap.strength:.1f} pips)")


def near_bearish_fvg(x: ConfluenceInputs) -> Optional[RuleOutcome]:
    gap = _near_gap(x, FVGDirection.BEARISH)
    if gap is None:
        return None
    return RuleOutcome(Bias.BEARISH, 3, f"Near bearish FVG ({gap.strength:.1f} pips)")


def near_demand_block(x: ConfluenceInputs) -> Optional[RuleOutcome]:
    block = _near_block(x, OrderBlockType.DEMAND)
    if block is None:
        return None
    return RuleOutcome(Bias.BULLISH, 3, f"Near demand block (strength: {block.strength:.1f})")


def near_supply_block(x: ConfluenceInputs) -> Optional[RuleOutcome]:
    block = _near_block(x, OrderBlockType.SUPPLY)
    if block is None:
        return None
    return RuleOutcome(Bias.BEARISH, 3, f"Near supply block (strength: {block.strength:.1f})")


def market_structure(x: ConfluenceInputs) -> Optional[RuleOutcome]:
    if x.microstructure == Bias.BULLISH:
        return RuleOutcome(Bias.BULLISH, 2, "Bullish market structure")
    if x.microstructure == Bias.BEARISH:
        return RuleOutcome(Bias.BEARISH, 2, "Bearish market structure")
    return None


def volume_confirmation(x: ConfluenceInputs) -> Optional[RuleOutcome]:
    if x.volume_profile == VolumeProfile.HIGH:
        return RuleOutcome(Bias.NEUTRAL, 2, "High volume confirmation")
    return None


def session_filter(x: ConfluenceInputs) -> Optional[RuleOutcome]:
    if x.session_active:
        return RuleOutcome(Bias.NEUTRAL, 1, "Active trading session")
    return RuleOutcome(Bias.NEUTRAL, -1, "Outside major sessions")
