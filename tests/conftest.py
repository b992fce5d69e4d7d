"""
Shared candle builders and clocks for the test suite.
"""

from datetime import datetime, timedelta, timezone

import pytest

from smartsignal.schemas.market import Candle

BASE_TIME = datetime(2024, 2, 5, 0, 0, tzinfo=timezone.utc)
STEP = timedelta(minutes=15)

# 14:00 UTC: London and New York both open
ACTIVE_CLOCK = datetime(2024, 2, 5, 14, 0, tzinfo=timezone.utc)
# 23:00 UTC: no major session open
INACTIVE_CLOCK = datetime(2024, 2, 5, 23, 0, tzinfo=timezone.utc)


def make_candle(index: int, o: float, h: float, l: float, c: float, v: float = 1000.0) -> Candle:
    return Candle(timestamp=BASE_TIME + STEP * index, open=o, high=h, low=l, close=c, volume=v)


def flat_candles(n: int, price: float = 1.1, volume: float = 1000.0) -> list[Candle]:
    """Constant price, zero range."""
    return [make_candle(i, price, price, price, price, volume) for i in range(n)]


def uptrend_candles(n: int = 100, start: float = 1.1, growth: float = 1.0005) -> list[Candle]:
    """Clean geometric uptrend: each candle opens at the previous close."""
    candles = []
    prev_close = start / growth
    for i in range(n):
        close = start * growth ** i
        candles.append(make_candle(i, prev_close, close + 0.0010, prev_close - 0.0010, close))
        prev_close = close
    return candles


def linear_candles(closes: list[float]) -> list[Candle]:
    """Candles whose close follows the given values, with a fixed wick."""
    candles = []
    prev = closes[0]
    for i, close in enumerate(closes):
        candles.append(
            make_candle(i, prev, max(prev, close) + 0.5, min(prev, close) - 0.5, close)
        )
        prev = close
    return candles


def trend_then_flat_candles(trend: int = 60, flat: int = 40) -> list[Candle]:
    """Clean uptrend that stalls: the price then stays at the last trend close."""
    candles = uptrend_candles(trend)
    price = candles[-1].close
    candles.extend(make_candle(i, price, price, price, price) for i in range(trend, trend + flat))
    return candles


@pytest.fixture
def active_clock():
    return ACTIVE_CLOCK


@pytest.fixture
def uptrend():
    return uptrend_candles()


@pytest.fixture
def flat():
    return flat_candles(120)
