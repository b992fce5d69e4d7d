"""
Indicator Engine Implementation

Calculates all indicator series and the market context from candles.
Pure NumPy calculations, no I/O.
"""

from datetime import datetime
from typing import Sequence
import numpy as np

from smartsignal.schemas.market import Candle
from smartsignal.schemas.indicators import (
    IndicatorPoint,
    IndicatorSeries,
    MACDSeries,
    BollingerSeries,
    MarketContext,
    PivotPoints,
    latest,
)
from smartsignal.core.sessions import active_sessions
from smartsignal.services.indicators.calculations import (
    OHLCVData,
    sma,
    ema,
    rsi,
    macd,
    bollinger_bands,
    adx,
    atr,
    pivot_points,
)
from smartsignal.services.indicators.context import (
    classify_regime,
    classify_volatility,
    atr_percent,
)


def _to_points(timestamps: np.ndarray, values: np.ndarray) -> list[IndicatorPoint]:
    """Pair each defined value with its candle timestamp, dropping NaN warm-up."""
    return [
        IndicatorPoint(timestamp=ts, value=float(v))
        for ts, v in zip(timestamps, values)
        if not np.isnan(v)
    ]


def compute_indicator_series(candles: Sequence[Candle]) -> IndicatorSeries:
    """Calculate every indicator series for a candle sequence."""
    if not candles:
        return IndicatorSeries()

    data = OHLCVData.from_candles(candles)
    ts = data.timestamps
    closes, highs, lows = data.closes, data.highs, data.lows

    macd_line, signal_line, histogram = macd(closes, 12, 26, 9)
    upper, middle, lower = bollinger_bands(closes, 20, 2.0)
    adx_values, plus_di, minus_di = adx(highs, lows, closes, 14)

    return IndicatorSeries(
        sma_20=_to_points(ts, sma(closes, 20)),
        sma_50=_to_points(ts, sma(closes, 50)),
        ema_12=_to_points(ts, ema(closes, 12)),
        ema_26=_to_points(ts, ema(closes, 26)),
        rsi_14=_to_points(ts, rsi(closes, 14)),
        macd=MACDSeries(
            macd=_to_points(ts, macd_line),
            signal=_to_points(ts, signal_line),
            histogram=_to_points(ts, histogram),
        ),
        bollinger_bands=BollingerSeries(
            upper=_to_points(ts, upper),
            middle=_to_points(ts, middle),
            lower=_to_points(ts, lower),
        ),
        adx_14=_to_points(ts, adx_values),
        plus_di=_to_points(ts, plus_di),
        minus_di=_to_points(ts, minus_di),
        atr_14=_to_points(ts, atr(highs, lows, closes, 14)),
    )


def build_market_context(
    candles: Sequence[Candle],
    indicators: IndicatorSeries,
    now: datetime,
) -> MarketContext:
    """Classify regime, volatility and session for the latest candle."""
    last = candles[-1]
    latest_adx = latest(indicators.adx_14, as_of=last.timestamp)
    latest_atr = latest(indicators.atr_14, as_of=last.timestamp)

    regime, strength = classify_regime(latest_adx)
    sessions = active_sessions(now)

    return MarketContext(
        regime=regime,
        trend_strength=strength,
        volatility=classify_volatility(latest_atr, last.close),
        session_active=len(sessions) > 0,
        active_sessions=sessions,
        pivot_points=PivotPoints(**pivot_points(last.high, last.low, last.close)),
        latest_adx=latest_adx,
        latest_atr=latest_atr,
        atr_percent=atr_percent(latest_atr, last.close),
    )
