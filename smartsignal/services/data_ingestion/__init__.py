"""
Data Ingestion

CONTRACT:
    Input:  CandleRequest
    Output: list[Candle]

Providers are injected into the strategy service; nothing here is a
process-wide singleton.
"""

from smartsignal.services.data_ingestion.interface import DataProvider
from smartsignal.services.data_ingestion.mock_data import (
    MockDataProvider,
    generate_mock_candles,
)

__all__ = [
    "DataProvider",
    "MockDataProvider",
    "generate_mock_candles",
]
