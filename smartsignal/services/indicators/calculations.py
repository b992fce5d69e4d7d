"""
Technical Indicator Calculations

Pure NumPy implementations of technical indicators.
All math is deterministic.

Every function returns an array aligned index-for-index with its input
candles. Positions where an indicator is not yet defined hold NaN.
"""

import numpy as np
from typing import Optional, Sequence
from dataclasses import dataclass

from smartsignal.schemas.market import Candle


@dataclass
class OHLCVData:
    """OHLCV data arrays for calculations."""

    timestamps: np.ndarray
    opens: np.ndarray
    highs: np.ndarray
    lows: np.ndarray
    closes: np.ndarray
    volumes: np.ndarray

    @classmethod
    def from_candles(cls, candles: Sequence[Candle]) -> "OHLCVData":
        return cls(
            timestamps=np.array([c.timestamp for c in candles], dtype=object),
            opens=np.array([c.open for c in candles], dtype=float),
            highs=np.array([c.high for c in candles], dtype=float),
            lows=np.array([c.low for c in candles], dtype=float),
            closes=np.array([c.close for c in candles], dtype=float),
            volumes=np.array([c.volume for c in candles], dtype=float),
        )

    def __len__(self) -> int:
        return len(self.closes)


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def _window_mean(window: np.ndarray) -> float:
    """Mean of a window; a constant window yields its value exactly."""
    if window.max() == window.min():
        return float(window[0])
    return np.mean(window)


def sma(data: np.ndarray, period: int) -> np.ndarray:
    """Simple Moving Average."""
    result = np.full(len(data), np.nan)
    if period <= 0 or len(data) < period:
        return result

    for i in range(period - 1, len(data)):
        result[i] = _window_mean(data[i - period + 1 : i + 1])
    return result


def ema(data: np.ndarray, period: int) -> np.ndarray:
    """
    Exponential Moving Average.

    Seeded with the mean of the first `period` values. Leading NaNs (the
    warm-up of an upstream indicator) are skipped before seeding.
    """
    result = np.full(len(data), np.nan)
    valid = np.flatnonzero(~np.isnan(data))
    if period <= 0 or len(valid) < period:
        return result

    multiplier = 2 / (period + 1)
    start = valid[0]
    seed = start + period - 1

    # Start with SMA
    result[seed] = _window_mean(data[start : seed + 1])

    for i in range(seed + 1, len(data)):
        result[i] = (data[i] - result[i - 1]) * multiplier + result[i - 1]

    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def rsi(closes: np.ndarray, period: int = 14) -> np.ndarray:
    """
    Relative Strength Index.

    Simple (non-smoothed) average of the last `period` gains and losses.
    A window with no price movement at all has no defined RSI and stays NaN.
    """
    result = np.full(len(closes), np.nan)
    if period <= 0 or len(closes) < period + 1:
        return result

    deltas = np.diff(closes)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    for i in range(period, len(closes)):
        avg_gain = np.mean(gains[i - period : i])
        avg_loss = np.mean(losses[i - period : i])

        if avg_gain == 0 and avg_loss == 0:
            continue

        rs = 100.0 if avg_loss == 0 else avg_gain / avg_loss
        result[i] = 100 - (100 / (1 + rs))

    return result


def macd(
    closes: np.ndarray,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    MACD (Moving Average Convergence Divergence).

    Fast and slow EMAs are paired on the same candle, so the line starts
    where the slow EMA does.

    Returns: (macd_line, signal_line, histogram)
    """
    fast_ema = ema(closes, fast_period)
    slow_ema = ema(closes, slow_period)

    macd_line = fast_ema - slow_ema

    # Signal line is EMA of MACD line
    signal_line = ema(macd_line, signal_period)

    # Histogram
    histogram = macd_line - signal_line

    return macd_line, signal_line, histogram


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def true_range(highs: np.ndarray, lows: np.ndarray, closes: np.ndarray) -> np.ndarray:
    """True Range of each candle against the previous close. First value is NaN."""
    tr = np.full(len(closes), np.nan)

    for i in range(1, len(closes)):
        tr[i] = max(
            highs[i] - lows[i],
            abs(highs[i] - closes[i - 1]),
            abs(lows[i] - closes[i - 1]),
        )

    return tr


def atr(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, period: int = 14
) -> np.ndarray:
    """Average True Range (simple mean of the last `period` true ranges)."""
    return sma(true_range(highs, lows, closes), period)


def bollinger_bands(
    closes: np.ndarray, period: int = 20, std_dev: float = 2.0
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Bollinger Bands (population standard deviation).

    Returns: (upper, middle, lower)
    """
    middle = sma(closes, period)

    std = np.full(len(closes), np.nan)
    for i in range(period - 1, len(closes)):
        window = closes[i - period + 1 : i + 1]
        std[i] = 0.0 if window.max() == window.min() else np.std(window)

    upper = middle + (std_dev * std)
    lower = middle - (std_dev * std)

    return upper, middle, lower


# =============================================================================
# TREND INDICATORS
# =============================================================================


def adx(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, period: int = 14
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Average Directional Index.

    Directional movement and true range use simple trailing means. The
    first `period - 1` outputs are raw DX; after that each ADX value is the
    mean of the previous `period - 1` ADX values and the current DX.

    Returns: (adx, plus_di, minus_di)
    """
    n = len(closes)
    adx_result = np.full(n, np.nan)
    plus_di = np.full(n, np.nan)
    minus_di = np.full(n, np.nan)
    if period <= 0 or n < period + 1:
        return adx_result, plus_di, minus_di

    plus_dm = np.full(n, np.nan)
    minus_dm = np.full(n, np.nan)

    for i in range(1, n):
        up_move = highs[i] - highs[i - 1]
        down_move = lows[i - 1] - lows[i]

        plus_dm[i] = max(up_move, 0.0) if up_move > down_move else 0.0
        minus_dm[i] = max(down_move, 0.0) if down_move > up_move else 0.0

    avg_tr = sma(true_range(highs, lows, closes), period)
    avg_plus_dm = sma(plus_dm, period)
    avg_minus_dm = sma(minus_dm, period)

    history: list[float] = []
    for i in range(period, n):
        if avg_tr[i] == 0:
            plus_di[i] = 0.0
            minus_di[i] = 0.0
        else:
            plus_di[i] = avg_plus_dm[i] / avg_tr[i] * 100
            minus_di[i] = avg_minus_dm[i] / avg_tr[i] * 100

        di_sum = plus_di[i] + minus_di[i]
        dx = 0.0 if di_sum == 0 else abs(plus_di[i] - minus_di[i]) / di_sum * 100

        if i < 2 * period - 1:
            value = dx
        else:
            recent = history[-(period - 1) :] if period > 1 else []
            value = (sum(recent) + dx) / (len(recent) + 1)

        history.append(value)
        adx_result[i] = value

    return adx_result, plus_di, minus_di


# =============================================================================
# SUPPORT/RESISTANCE
# =============================================================================


def pivot_points(high: float, low: float, close: float) -> dict:
    """Standard floor-trader pivot points."""
    pivot = (high + low + close) / 3
    return {
        "pivot": pivot,
        "r1": (2 * pivot) - low,
        "r2": pivot + (high - low),
        "s1": (2 * pivot) - high,
        "s2": pivot - (high - low),
    }


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def get_last_valid(arr: np.ndarray) -> Optional[float]:
    """Get last non-NaN value from array."""
    valid = arr[~np.isnan(arr)]
    return float(valid[-1]) if len(valid) > 0 else None
