"""
Indicator Engine

CONTRACT:
    Input:  list[Candle]
    Output: IndicatorSeries + MarketContext

RESPONSIBILITIES:
    - Calculate trend and momentum indicators (SMA, EMA, RSI, MACD, ADX)
    - Calculate volatility indicators (ATR, Bollinger Bands)
    - Compute pivot points
    - Classify market regime, volatility and trading session

PURE PYTHON - Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from smartsignal.services.indicators.service import (
    compute_indicator_series,
    build_market_context,
)

__all__ = [
    "compute_indicator_series",
    "build_market_context",
]
