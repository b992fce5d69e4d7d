"""
CONTRACT 1: Market Data

Input to the analysis pipeline: an ordered sequence of OHLCV candles.

Candles are produced upstream (data provider) and never mutated by the core.
"""

from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class Timeframe(str, Enum):
    M1 = "1m"
    M5 = "5m"
    M15 = "15m"
    M30 = "30m"
    H1 = "1h"
    H4 = "4h"
    D1 = "1d"


# =============================================================================
# CANDLES
# =============================================================================


class Candle(BaseModel):
    """Single candlestick data point."""

    timestamp: datetime
    open: float = Field(..., gt=0)
    high: float = Field(..., gt=0)
    low: float = Field(..., gt=0)
    close: float = Field(..., gt=0)
    volume: float = Field(default=0, ge=0)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "timestamp": "2024-02-05T10:30:00Z",
                "open": 1.0852,
                "high": 1.0861,
                "low": 1.0848,
                "close": 1.0857,
                "volume": 1250,
            }
        }


class CandleRequest(BaseModel):
    """
    Request for candles from a data provider.
    Sent by: Strategy Service
    Received by: DataProvider
    """

    symbol: str = Field(..., min_length=1, description="Instrument, e.g. EURUSD")
    timeframe: Timeframe = Field(default=Timeframe.M15)
    lookback: int = Field(default=200, ge=1, le=1000)
