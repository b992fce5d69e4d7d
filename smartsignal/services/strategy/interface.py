"""
Strategy Service Interface

Orchestrates market data retrieval and the analysis pipeline.
"""

from abc import abstractmethod
from dataclasses import dataclass
from typing import Optional

from smartsignal.services.base import BaseService
from smartsignal.schemas.market import Candle, Timeframe
from smartsignal.schemas.signals import AnalysisResult, StrategyConfig, StrategyPreset


@dataclass
class StrategyRequest:
    """Request for a signal on a symbol fetched from the data provider."""

    symbol: str
    timeframe: Timeframe = Timeframe.M15
    lookback: Optional[int] = None
    preset: Optional[StrategyPreset] = None
    config: Optional[StrategyConfig] = None


class StrategyServiceInterface(BaseService[StrategyRequest, AnalysisResult]):
    """
    Strategy Service Contract.

    INPUT: StrategyRequest
        - symbol: Instrument to analyze
        - timeframe: Candle timeframe
        - lookback: Number of candles (settings default when omitted)
        - preset / config: Rule table and thresholds

    OUTPUT: AnalysisResult
        - signal: Classified signal with exit levels
        - confluence, indicators, structure, context: intermediates

    PIPELINE:
        ┌─────────────────┐
        │ StrategyRequest │
        └────────┬────────┘
                 │
                 ▼
        ┌─────────────────┐
        │ Data Provider   │ → list[Candle]
        └────────┬────────┘
                 │
                 ▼
        ┌─────────────────┐
        │ Indicator Engine│ → IndicatorSeries + MarketContext
        └────────┬────────┘
                 │
                 ▼
        ┌─────────────────┐
        │ Structure       │ → StructureSnapshot
        └────────┬────────┘
                 │
                 ▼
        ┌─────────────────┐
        │ Confluence      │ → ConfluenceResult
        └────────┬────────┘
                 │
                 ▼
        ┌─────────────────┐
        │ Classifier      │ → Signal
        └─────────────────┘
    """

    @property
    def name(self) -> str:
        return "StrategyService"

    @abstractmethod
    async def execute(self, input_data: StrategyRequest) -> AnalysisResult:
        """Fetch candles and run the analysis pipeline."""
        pass

    @abstractmethod
    async def analyze_candles(
        self,
        candles: list[Candle],
        preset: Optional[StrategyPreset] = None,
        config: Optional[StrategyConfig] = None,
    ) -> AnalysisResult:
        """Run the analysis pipeline on caller-supplied candles."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check the data provider."""
        pass
