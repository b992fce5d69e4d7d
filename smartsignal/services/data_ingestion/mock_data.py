"""
Mock Data Provider

Generates a seeded random-walk forex series for development and testing.
"""

import logging
import random
from datetime import datetime, timedelta
from typing import Callable, Optional

from smartsignal.schemas.market import Candle, CandleRequest, Timeframe
from smartsignal.services.base import DataProviderError
from smartsignal.services.data_ingestion.interface import DataProvider
from smartsignal.core.sessions import UTC, to_utc, utc_now

logger = logging.getLogger(__name__)


# Base prices for common pairs
SYMBOL_BASE_PRICES = {
    "EURUSD": 1.0850,
    "GBPUSD": 1.2650,
    "AUDUSD": 0.7450,
    "USDJPY": 148.50,
    "USDCHF": 0.8750,
    "USDCAD": 1.3450,
    "NZDUSD": 0.6150,
}

# Timeframe to milliseconds
TIMEFRAME_MS = {
    Timeframe.M1: 60_000,
    Timeframe.M5: 300_000,
    Timeframe.M15: 900_000,
    Timeframe.M30: 1_800_000,
    Timeframe.H1: 3_600_000,
    Timeframe.H4: 14_400_000,
    Timeframe.D1: 86_400_000,
}

STEP_VARIATION = 0.005  # max close-to-open move, relative to base price
WICK_VARIATION = 0.002  # max wick beyond the body, relative to base price
MAX_VOLUME = 1_000_000


def get_base_price(symbol: str) -> float:
    """Get base price for a symbol."""
    base = SYMBOL_BASE_PRICES.get(symbol)
    if base is None:
        raise DataProviderError(
            "MockDataProvider",
            f"Unknown symbol: {symbol}",
            {"supported": sorted(SYMBOL_BASE_PRICES)},
        )
    return base


def generate_mock_candles(
    symbol: str,
    timeframe: Timeframe,
    lookback: int,
    end_time: datetime,
    seed: Optional[int] = None,
) -> list[Candle]:
    """Generate a random walk of candles ending at `end_time`."""
    rng = random.Random(seed)
    base = get_base_price(symbol)
    interval = timedelta(milliseconds=TIMEFRAME_MS[timeframe])

    candles = []
    price = base
    timestamp = end_time - interval * (lookback - 1)

    for _ in range(lookback):
        # Random walk
        change = (rng.random() - 0.5) * STEP_VARIATION * base

        open_price = price
        close_price = max(open_price + change, base * 0.01)
        high_price = max(open_price, close_price) + rng.random() * WICK_VARIATION * base
        low_price = min(open_price, close_price) - rng.random() * WICK_VARIATION * base

        candles.append(
            Candle(
                timestamp=timestamp,
                open=open_price,
                high=high_price,
                low=max(low_price, base * 0.005),
                close=close_price,
                volume=rng.randint(0, MAX_VOLUME),
            )
        )

        price = close_price
        timestamp += interval

    return candles


class MockDataProvider(DataProvider):
    """
    Deterministic stand-in for a live forex feed.

    The same seed and clock always produce the same candles.
    """

    def __init__(self, seed: int = 42, clock: Callable[[], datetime] = utc_now):
        self._seed = seed
        self._clock = clock

    @property
    def name(self) -> str:
        return "MockDataProvider"

    async def get_candles(self, request: CandleRequest) -> list[Candle]:
        symbol = request.symbol.upper().strip()
        logger.debug(f"Generating {request.lookback} mock candles for {symbol}")

        # Align the last candle to the timeframe boundary
        now = to_utc(self._clock())
        interval_s = TIMEFRAME_MS[request.timeframe] // 1000
        end_time = datetime.fromtimestamp(
            int(now.timestamp()) // interval_s * interval_s, tz=UTC
        )

        return generate_mock_candles(
            symbol, request.timeframe, request.lookback, end_time, seed=self._seed
        )

    async def health_check(self) -> bool:
        return True
