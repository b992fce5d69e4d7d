"""
Exit Level Calculation

Stop-loss, take-profit and trailing-stop placement for a classified signal.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from smartsignal.schemas.signals import SignalLevel, StrategyConfig
from smartsignal.schemas.structure import (
    FairValueGap,
    FVGDirection,
    OrderBlock,
    OrderBlockType,
    LiquidityZone,
    LiquiditySide,
)

PIP = 0.0001
DEFAULT_ATR = 0.001  # used when ATR is not yet defined
BLOCK_BUFFER_ATR = 0.3
TRAILING_STOP_ATR = 0.6
STRONG_TP_FACTOR = 1.25  # STRONG signals aim 25% further on the ATR fallback


@dataclass
class ExitLevels:
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    trailing_stop: Optional[float] = None


def risk_reward_ratio(
    price: float, stop_loss: Optional[float], take_profit: Optional[float]
) -> Optional[float]:
    """|take_profit - price| / |price - stop_loss|; None when undefined."""
    if stop_loss is None or take_profit is None:
        return None

    risk = abs(price - stop_loss)
    if risk == 0:
        return None
    return abs(take_profit - price) / risk


def fixed_exits(level: SignalLevel, price: float, config: StrategyConfig) -> ExitLevels:
    """Fixed pip stop and a reward multiple of it."""
    if level == SignalLevel.HOLD:
        return ExitLevels()

    distance = config.stop_loss_pips * PIP
    direction = 1 if level.is_buy else -1

    return ExitLevels(
        stop_loss=price - direction * distance,
        take_profit=price + direction * distance * config.take_profit_ratio,
    )


def _structural_stop(
    level: SignalLevel, price: float, atr: float, order_blocks: Sequence[OrderBlock], config: StrategyConfig
) -> float:
    if level.is_buy:
        below = [
            b for b in order_blocks
            if b.direction == OrderBlockType.DEMAND and b.upper_bound < price
        ]
        if below:
            block = max(below, key=lambda b: b.upper_bound)
            return block.lower_bound - atr * BLOCK_BUFFER_ATR
        return price - atr * config.atr_multiplier_sl

    above = [
        b for b in order_blocks
        if b.direction == OrderBlockType.SUPPLY and b.lower_bound > price
    ]
    if above:
        block = min(above, key=lambda b: b.lower_bound)
        return block.upper_bound + atr * BLOCK_BUFFER_ATR
    return price + atr * config.atr_multiplier_sl


def _structural_target(
    level: SignalLevel,
    price: float,
    atr: float,
    fair_value_gaps: Sequence[FairValueGap],
    liquidity_zones: Sequence[LiquidityZone],
    config: StrategyConfig,
) -> float:
    multiplier = config.atr_multiplier_tp
    if level.is_strong:
        multiplier *= STRONG_TP_FACTOR

    if level.is_buy:
        candidates = [
            g.lower_bound for g in fair_value_gaps
            if g.direction == FVGDirection.BEARISH and not g.filled and g.lower_bound > price
        ] + [
            z.price for z in liquidity_zones
            if z.direction == LiquiditySide.SELL_SIDE and not z.swept and z.price > price
        ]
        return min(candidates) if candidates else price + atr * multiplier

    candidates = [
        g.upper_bound for g in fair_value_gaps
        if g.direction == FVGDirection.BULLISH and not g.filled and g.upper_bound < price
    ] + [
        z.price for z in liquidity_zones
        if z.direction == LiquiditySide.BUY_SIDE and not z.swept and z.price < price
    ]
    return max(candidates) if candidates else price - atr * multiplier


def structural_exits(
    level: SignalLevel,
    price: float,
    atr: Optional[float],
    fair_value_gaps: Sequence[FairValueGap],
    order_blocks: Sequence[OrderBlock],
    liquidity_zones: Sequence[LiquidityZone],
    config: StrategyConfig,
) -> ExitLevels:
    """
    Structure-aware exits.

    Stop: just beyond the nearest order block behind price, else an ATR multiple.
    Target: nearest unfilled opposing FVG edge or unswept liquidity level
    ahead of price, else an ATR multiple.
    """
    if level == SignalLevel.HOLD:
        return ExitLevels()

    atr = atr or DEFAULT_ATR

    return ExitLevels(
        stop_loss=_structural_stop(level, price, atr, order_blocks, config),
        take_profit=_structural_target(
            level, price, atr, fair_value_gaps, liquidity_zones, config
        ),
        trailing_stop=atr * TRAILING_STOP_ATR if config.use_trailing_stop else None,
    )
