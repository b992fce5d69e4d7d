"""
CONTRACT 2: Indicator Engine

Input: list[Candle]
Output: IndicatorSeries + MarketContext

Every series is an ordered list of IndicatorPoint, one per eligible candle.
A series is shorter than the candle list by the indicator's warm-up period,
and empty when there are not enough candles.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class MarketRegime(str, Enum):
    TRENDING = "TRENDING"
    RANGING = "RANGING"


class TrendStrength(str, Enum):
    WEAK = "WEAK"
    MODERATE = "MODERATE"
    STRONG = "STRONG"


class VolatilityLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class TradingSession(str, Enum):
    TOKYO = "TOKYO"
    LONDON = "LONDON"
    NEW_YORK = "NEW_YORK"


# =============================================================================
# SERIES
# =============================================================================


class IndicatorPoint(BaseModel):
    """One indicator value stamped with the candle it belongs to."""

    timestamp: datetime
    value: float


class MACDSeries(BaseModel):
    """MACD line, signal line and histogram (right-aligned)."""

    macd: list[IndicatorPoint] = Field(default_factory=list)
    signal: list[IndicatorPoint] = Field(default_factory=list)
    histogram: list[IndicatorPoint] = Field(default_factory=list)


class BollingerSeries(BaseModel):
    """Bollinger Bands."""

    upper: list[IndicatorPoint] = Field(default_factory=list)
    middle: list[IndicatorPoint] = Field(default_factory=list)
    lower: list[IndicatorPoint] = Field(default_factory=list)


class IndicatorSeries(BaseModel):
    """All indicator series computed for one candle sequence."""

    sma_20: list[IndicatorPoint] = Field(default_factory=list)
    sma_50: list[IndicatorPoint] = Field(default_factory=list)
    ema_12: list[IndicatorPoint] = Field(default_factory=list)
    ema_26: list[IndicatorPoint] = Field(default_factory=list)
    rsi_14: list[IndicatorPoint] = Field(default_factory=list)
    macd: MACDSeries = Field(default_factory=MACDSeries)
    bollinger_bands: BollingerSeries = Field(default_factory=BollingerSeries)
    adx_14: list[IndicatorPoint] = Field(default_factory=list)
    plus_di: list[IndicatorPoint] = Field(default_factory=list)
    minus_di: list[IndicatorPoint] = Field(default_factory=list)
    atr_14: list[IndicatorPoint] = Field(default_factory=list)


def latest(
    series: list[IndicatorPoint], offset: int = 1, as_of: Optional[datetime] = None
) -> Optional[float]:
    """
    Value `offset` points from the end, or None when the series is too short.

    With `as_of`, a series whose last point is not stamped `as_of` is stale
    (the indicator was undefined on the latest candle) and yields None.
    """
    if len(series) < offset:
        return None
    if as_of is not None and series[-1].timestamp != as_of:
        return None
    return series[-offset].value


# =============================================================================
# MARKET CONTEXT
# =============================================================================


class PivotPoints(BaseModel):
    """Standard pivot levels from the most recent candle."""

    pivot: float
    r1: float
    r2: float
    s1: float
    s2: float


class MarketContext(BaseModel):
    """Regime, volatility and session classification for the latest candle."""

    regime: MarketRegime
    trend_strength: TrendStrength
    volatility: VolatilityLevel
    session_active: bool
    active_sessions: list[TradingSession] = Field(default_factory=list)
    pivot_points: PivotPoints
    latest_adx: Optional[float] = None
    latest_atr: Optional[float] = None
    atr_percent: float = Field(default=0.0, ge=0)
