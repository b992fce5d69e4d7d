"""
Data Provider Interface

Defines the contract for the market data collaborator.
"""

from abc import ABC, abstractmethod

from smartsignal.schemas.market import Candle, CandleRequest


class DataProvider(ABC):
    """
    Market Data Provider Contract.

    INPUT: CandleRequest
        - symbol: Instrument, e.g. EURUSD
        - timeframe: Candle timeframe
        - lookback: Number of candles

    OUTPUT: list[Candle]
        - Oldest first, strictly increasing timestamps

    Raises:
        DataProviderError: The source could not deliver candles
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for logging."""
        pass

    @abstractmethod
    async def get_candles(self, request: CandleRequest) -> list[Candle]:
        """Fetch the most recent candles for a symbol."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check connectivity to the data source."""
        pass
