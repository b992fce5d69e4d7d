"""
Strategy Service Implementation

Orchestrates the signal pipeline:
    Data Provider → Indicators → Structure → Confluence → Classifier

The pipeline itself is pure; this layer owns the clock, the data provider
and the minimum-history policy.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from smartsignal.core.config import settings
from smartsignal.core.sessions import utc_now
from smartsignal.schemas.market import Candle, CandleRequest
from smartsignal.schemas.signals import AnalysisResult, StrategyConfig, StrategyPreset
from smartsignal.services.base import InsufficientDataError
from smartsignal.services.data_ingestion import DataProvider, MockDataProvider
from smartsignal.services.strategy.interface import StrategyServiceInterface, StrategyRequest
from smartsignal.services.strategy.pipeline import analyze, validate_candles

logger = logging.getLogger(__name__)


class StrategyService(StrategyServiceInterface):
    """
    Strategy Service.

    Fetches candles, enforces the minimum history and runs the pure
    analysis pipeline with an injected clock.
    """

    def __init__(
        self,
        data_provider: DataProvider,
        clock: Callable[[], datetime] = utc_now,
        min_candles: Optional[int] = None,
        default_preset: Optional[StrategyPreset] = None,
    ):
        self._data_provider = data_provider
        self._clock = clock
        self._min_candles = min_candles if min_candles is not None else settings.min_candles
        self._default_preset = default_preset or settings.default_preset

    @property
    def data_provider(self) -> DataProvider:
        return self._data_provider

    def check_candles(self, candles: list[Candle]) -> list[Candle]:
        """Check ordering and minimum history of a candle sequence."""
        validate_candles(candles)

        if len(candles) < self._min_candles:
            raise InsufficientDataError(
                self.name,
                f"Need at least {self._min_candles} candles, got {len(candles)}",
                {"required": self._min_candles, "received": len(candles)},
            )
        return candles

    async def analyze_candles(
        self,
        candles: list[Candle],
        preset: Optional[StrategyPreset] = None,
        config: Optional[StrategyConfig] = None,
    ) -> AnalysisResult:
        """Run the analysis pipeline on caller-supplied candles."""
        preset = preset or self._default_preset
        candles = self.check_candles(candles)

        result = analyze(candles, preset, config, now=self._clock())

        logger.info(
            f"{preset.value} signal {result.signal.level.value} "
            f"(confidence {result.signal.confidence:.1f}, score {result.signal.confluence_score}) "
            f"at {result.signal.price}"
        )
        return result

    async def execute(self, input_data: StrategyRequest) -> AnalysisResult:
        """Fetch candles for a symbol and analyze them."""
        symbol = input_data.symbol.upper().strip()
        lookback = input_data.lookback or max(settings.default_lookback, self._min_candles)

        logger.info(f"Starting strategy pipeline for {symbol} ({input_data.timeframe.value})")

        candles = await self._data_provider.get_candles(
            CandleRequest(symbol=symbol, timeframe=input_data.timeframe, lookback=lookback)
        )
        logger.info(f"Got {len(candles)} candles from {self._data_provider.name}")

        return await self.analyze_candles(candles, input_data.preset, input_data.config)

    async def health_check(self) -> bool:
        try:
            return await self._data_provider.health_check()
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False


_service_instance: Optional[StrategyService] = None


def get_strategy_service() -> StrategyService:
    """Get the application's strategy service (mock data provider by default)."""
    global _service_instance
    if _service_instance is None:
        _service_instance = StrategyService(MockDataProvider(seed=settings.mock_seed))
    return _service_instance
