"""
SmartSignal Schema Contracts

This module defines all JSON contracts between system components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from smartsignal.schemas.market import (
    Candle,
    CandleRequest,
    Timeframe,
)
from smartsignal.schemas.indicators import (
    IndicatorPoint,
    IndicatorSeries,
    MarketContext,
    MarketRegime,
    PivotPoints,
    TradingSession,
)
from smartsignal.schemas.structure import (
    FairValueGap,
    OrderBlock,
    LiquidityZone,
    StructureSnapshot,
)
from smartsignal.schemas.signals import (
    AnalysisResult,
    ConfluenceResult,
    Signal,
    SignalLevel,
    StrategyConfig,
    StrategyPreset,
)

__all__ = [
    # Market
    "Candle",
    "CandleRequest",
    "Timeframe",
    # Indicators
    "IndicatorPoint",
    "IndicatorSeries",
    "MarketContext",
    "MarketRegime",
    "PivotPoints",
    "TradingSession",
    # Structure
    "FairValueGap",
    "OrderBlock",
    "LiquidityZone",
    "StructureSnapshot",
    # Signals
    "AnalysisResult",
    "ConfluenceResult",
    "Signal",
    "SignalLevel",
    "StrategyConfig",
    "StrategyPreset",
]
