"""
Market Context Classifiers

Maps the latest ADX and ATR readings onto discrete regime and
volatility labels.
"""

from typing import Optional

from smartsignal.schemas.indicators import MarketRegime, TrendStrength, VolatilityLevel


# ADX thresholds
ADX_STRONG = 30
ADX_MODERATE = 20
ADX_WEAK = 15

# ATR as % of price
ATR_PCT_HIGH = 1.5
ATR_PCT_MEDIUM = 0.8


def classify_regime(latest_adx: Optional[float]) -> tuple[MarketRegime, TrendStrength]:
    """Classify trend regime from the latest ADX (missing ADX counts as 0)."""
    value = latest_adx or 0.0

    if value > ADX_STRONG:
        return MarketRegime.TRENDING, TrendStrength.STRONG
    elif value > ADX_MODERATE:
        return MarketRegime.TRENDING, TrendStrength.MODERATE
    elif value > ADX_WEAK:
        return MarketRegime.RANGING, TrendStrength.WEAK
    return MarketRegime.RANGING, TrendStrength.WEAK


def atr_percent(latest_atr: Optional[float], price: float) -> float:
    """ATR as a percentage of price."""
    if not latest_atr or price <= 0:
        return 0.0
    return latest_atr / price * 100


def classify_volatility(latest_atr: Optional[float], price: float) -> VolatilityLevel:
    """Classify volatility from ATR relative to price (missing ATR counts as 0)."""
    pct = atr_percent(latest_atr, price)

    if pct > ATR_PCT_HIGH:
        return VolatilityLevel.HIGH
    elif pct > ATR_PCT_MEDIUM:
        return VolatilityLevel.MEDIUM
    return VolatilityLevel.LOW
