"""
Smart Money Structure Detection

Pure functions over a candle window: fair value gaps, order blocks,
liquidity zones, volume profile and microstructure bias.
Each detector converts the window to OHLCV arrays once and scans those.
"""

import numpy as np
from typing import Sequence

from smartsignal.schemas.market import Candle
from smartsignal.schemas.structure import (
    FairValueGap,
    FVGDirection,
    OrderBlock,
    OrderBlockType,
    LiquidityZone,
    LiquiditySide,
    VolumeProfile,
    Bias,
)
from smartsignal.services.indicators.calculations import OHLCVData


# Most recent elements kept per collection
MAX_FAIR_VALUE_GAPS = 8
MAX_ORDER_BLOCKS = 6
MAX_LIQUIDITY_ZONES = 8

# Order blocks
MIN_BODY_FRACTION = 0.5
VOLUME_LOOKBACK = 5

# Liquidity zones
SWING_LOOKBACK = 3
TOUCH_WINDOW = 10
TOUCH_WEIGHT = 0.3

# Volume profile
PROFILE_LOOKBACK = 10
HIGH_VOLUME_RATIO = 1.3
LOW_VOLUME_RATIO = 0.7

MICROSTRUCTURE_LOOKBACK = 5


def _volumes(data: OHLCVData) -> np.ndarray:
    """Candle volumes, with a missing (zero) volume counted as 1."""
    return np.where(data.volumes > 0, data.volumes, 1.0)


def _avg_prior_volume(volumes: np.ndarray, index: int) -> float:
    """Sum of up to 5 prior volumes divided by 5."""
    return float(np.sum(volumes[max(0, index - VOLUME_LOOKBACK) : index])) / VOLUME_LOOKBACK


# =============================================================================
# FAIR VALUE GAPS
# =============================================================================


def detect_fair_value_gaps(
    candles: Sequence[Candle], min_size: float = 0.0002
) -> list[FairValueGap]:
    """
    Find three-candle price voids.

    Bullish: candle[i-1].low > candle[i+1].high.
    Bearish: candle[i-1].high < candle[i+1].low.
    A gap is filled once a candle after the pattern trades back through
    its far bound.
    """
    data = OHLCVData.from_candles(candles)
    highs, lows, closes = data.highs, data.lows, data.closes
    gaps: list[FairValueGap] = []

    for i in range(1, len(data) - 1):
        if lows[i - 1] > highs[i + 1]:
            size = lows[i - 1] - highs[i + 1]
            if size >= min_size:
                gaps.append(
                    FairValueGap(
                        direction=FVGDirection.BULLISH,
                        upper_bound=float(lows[i - 1]),
                        lower_bound=float(highs[i + 1]),
                        origin_index=i,
                        strength=float(size / closes[i - 1] * 10000),
                    )
                )

        if highs[i - 1] < lows[i + 1]:
            size = lows[i + 1] - highs[i - 1]
            if size >= min_size:
                gaps.append(
                    FairValueGap(
                        direction=FVGDirection.BEARISH,
                        upper_bound=float(lows[i + 1]),
                        lower_bound=float(highs[i - 1]),
                        origin_index=i,
                        strength=float(size / closes[i - 1] * 10000),
                    )
                )

    for gap in gaps:
        after = gap.origin_index + 2
        if gap.direction == FVGDirection.BULLISH:
            gap.filled = bool(np.any(lows[after:] <= gap.lower_bound))
        else:
            gap.filled = bool(np.any(highs[after:] >= gap.upper_bound))

    return gaps[-MAX_FAIR_VALUE_GAPS:]


# =============================================================================
# ORDER BLOCKS
# =============================================================================


def detect_order_blocks(
    candles: Sequence[Candle], volume_multiplier: float = 1.2
) -> list[OrderBlock]:
    """
    Find high-volume candles with a body of at least half their range.

    Demand blocks (bullish candles) are tested once a later low re-enters
    the range; supply blocks once a later high does.
    """
    data = OHLCVData.from_candles(candles)
    opens, highs, lows, closes = data.opens, data.highs, data.lows, data.closes
    volumes = _volumes(data)
    blocks: list[OrderBlock] = []

    for i in range(3, len(data) - 3):
        volume = float(volumes[i])
        avg_volume = _avg_prior_volume(volumes, i)

        if volume <= avg_volume * volume_multiplier:
            continue

        candle_range = highs[i] - lows[i]
        if candle_range <= 0:
            continue

        body_fraction = abs(closes[i] - opens[i]) / candle_range
        if body_fraction < MIN_BODY_FRACTION:
            continue

        if closes[i] > opens[i]:
            direction = OrderBlockType.DEMAND
            later = lows[i + 1 :]
        elif closes[i] < opens[i]:
            direction = OrderBlockType.SUPPLY
            later = highs[i + 1 :]
        else:
            continue

        blocks.append(
            OrderBlock(
                direction=direction,
                upper_bound=float(highs[i]),
                lower_bound=float(lows[i]),
                volume=volume,
                origin_index=i,
                tested=bool(np.any((later >= lows[i]) & (later <= highs[i]))),
                strength=float((volume / avg_volume) * body_fraction),
            )
        )

    return blocks[-MAX_ORDER_BLOCKS:]


# =============================================================================
# LIQUIDITY ZONES
# =============================================================================


def _liquidity_strength(
    levels: np.ndarray, volumes: np.ndarray, index: int, tolerance: float
) -> float:
    """Relative volume plus a bonus for nearby candles touching the same level."""
    price = levels[index]
    band = price * tolerance

    start = max(0, index - TOUCH_WINDOW)
    window = levels[start : index + TOUCH_WINDOW]
    touches = int(np.sum(np.abs(window - price) <= band)) - 1  # the swing itself

    return float(volumes[index] / _avg_prior_volume(volumes, index) + touches * TOUCH_WEIGHT)


def detect_liquidity_zones(
    candles: Sequence[Candle], tolerance: float = 0.0002
) -> list[LiquidityZone]:
    """
    Find swing extremes over 3 candles on each side.

    Swing highs carry sell-side liquidity, swing lows buy-side liquidity.
    A zone is swept once any later candle trades beyond it.
    """
    data = OHLCVData.from_candles(candles)
    highs, lows = data.highs, data.lows
    volumes = _volumes(data)
    zones: list[LiquidityZone] = []
    k = SWING_LOOKBACK

    for i in range(k, len(data) - k):
        neighbors = np.r_[i - k : i, i + 1 : i + k + 1]

        if np.all(highs[neighbors] < highs[i]):
            zones.append(
                LiquidityZone(
                    direction=LiquiditySide.SELL_SIDE,
                    price=float(highs[i]),
                    strength=_liquidity_strength(highs, volumes, i, tolerance),
                    origin_index=i,
                    swept=bool(np.any(highs[i + 1 :] > highs[i])),
                )
            )

        if np.all(lows[neighbors] > lows[i]):
            zones.append(
                LiquidityZone(
                    direction=LiquiditySide.BUY_SIDE,
                    price=float(lows[i]),
                    strength=_liquidity_strength(lows, volumes, i, tolerance),
                    origin_index=i,
                    swept=bool(np.any(lows[i + 1 :] < lows[i])),
                )
            )

    return zones[-MAX_LIQUIDITY_ZONES:]


# =============================================================================
# VOLUME PROFILE / MICROSTRUCTURE
# =============================================================================


def classify_volume_profile(candles: Sequence[Candle]) -> VolumeProfile:
    """Latest volume against the mean of the last 10 candles."""
    if not candles:
        return VolumeProfile.MEDIUM

    recent = _volumes(OHLCVData.from_candles(candles[-PROFILE_LOOKBACK:]))
    current = recent[-1]
    avg_volume = np.mean(recent)

    if current > avg_volume * HIGH_VOLUME_RATIO:
        return VolumeProfile.HIGH
    if current > avg_volume * LOW_VOLUME_RATIO:
        return VolumeProfile.MEDIUM
    return VolumeProfile.LOW


def classify_microstructure(
    candles: Sequence[Candle],
    fair_value_gaps: Sequence[FairValueGap],
    order_blocks: Sequence[OrderBlock],
) -> Bias:
    """Majority vote of recent price action and unresolved structure around price."""
    if not candles:
        return Bias.NEUTRAL

    recent = OHLCVData.from_candles(candles[-MICROSTRUCTURE_LOOKBACK:])
    price = candles[-1].close

    higher_highs = int(np.sum(np.diff(recent.highs) > 0))
    lower_lows = int(np.sum(np.diff(recent.lows) < 0))

    bullish = 0
    bearish = 0
    if higher_highs > lower_lows:
        bullish += 1
    elif lower_lows > higher_highs:
        bearish += 1

    for gap in fair_value_gaps:
        if gap.filled:
            continue
        if gap.direction == FVGDirection.BULLISH and price > gap.lower_bound:
            bullish += 1
        elif gap.direction == FVGDirection.BEARISH and price < gap.upper_bound:
            bearish += 1

    for block in order_blocks:
        if block.tested:
            continue
        if block.direction == OrderBlockType.DEMAND and price > block.lower_bound:
            bullish += 1
        elif block.direction == OrderBlockType.SUPPLY and price < block.upper_bound:
            bearish += 1

    if bullish > bearish:
        return Bias.BULLISH
    if bearish > bullish:
        return Bias.BEARISH
    return Bias.NEUTRAL
