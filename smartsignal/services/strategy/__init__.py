"""
Strategy Service

CONTRACT:
    Input:  Symbol (or candles) + preset + StrategyConfig
    Output: AnalysisResult (complete pipeline output)

RESPONSIBILITIES:
    - Fetch candles from the injected data provider
    - Enforce the minimum candle history
    - Run the pure pipeline:
        1. Indicator Engine -> IndicatorSeries + MarketContext
        2. Structure Detector -> StructureSnapshot
        3. Confluence Engine -> ConfluenceResult
        4. Signal Classifier -> Signal

This is the main entry point for generating signals.
"""

from smartsignal.services.strategy.interface import (
    StrategyServiceInterface,
    StrategyRequest,
)
from smartsignal.services.strategy.pipeline import analyze, validate_candles
from smartsignal.services.strategy.service import StrategyService, get_strategy_service

__all__ = [
    "StrategyServiceInterface",
    "StrategyRequest",
    "analyze",
    "validate_candles",
    "StrategyService",
    "get_strategy_service",
]
