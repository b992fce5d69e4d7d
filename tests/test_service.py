"""
Tests for the strategy service and the mock data provider.
"""

import asyncio

import pytest

from smartsignal.schemas.market import CandleRequest, Timeframe
from smartsignal.schemas.signals import AnalysisResult, SignalLevel, StrategyPreset
from smartsignal.services.base import DataProviderError, InsufficientDataError
from smartsignal.services.data_ingestion import MockDataProvider, generate_mock_candles
from smartsignal.services.strategy import StrategyRequest, StrategyService

from conftest import ACTIVE_CLOCK, BASE_TIME, uptrend_candles


def _fixed_clock():
    return ACTIVE_CLOCK


def _service(**kwargs) -> StrategyService:
    provider = MockDataProvider(seed=7, clock=_fixed_clock)
    return StrategyService(provider, clock=_fixed_clock, min_candles=100, **kwargs)


# =============================================================================
# MOCK DATA
# =============================================================================


def test_mock_candles_are_deterministic_for_a_seed():
    first = generate_mock_candles("EURUSD", Timeframe.H1, 150, BASE_TIME, seed=11)
    second = generate_mock_candles("EURUSD", Timeframe.H1, 150, BASE_TIME, seed=11)
    other = generate_mock_candles("EURUSD", Timeframe.H1, 150, BASE_TIME, seed=12)

    assert first == second
    assert first != other


def test_mock_candles_are_well_formed():
    candles = generate_mock_candles("GBPUSD", Timeframe.M15, 200, BASE_TIME, seed=1)

    assert len(candles) == 200
    assert candles[-1].timestamp == BASE_TIME
    for prev, curr in zip(candles, candles[1:]):
        assert curr.timestamp > prev.timestamp
    for c in candles:
        assert c.low <= min(c.open, c.close)
        assert c.high >= max(c.open, c.close)


def test_mock_provider_aligns_to_timeframe():
    provider = MockDataProvider(seed=3, clock=_fixed_clock)
    request = CandleRequest(symbol="eurusd", timeframe=Timeframe.H4, lookback=10)

    candles = asyncio.run(provider.get_candles(request))

    assert len(candles) == 10
    assert candles[-1].timestamp == ACTIVE_CLOCK.replace(hour=12)


def test_mock_provider_rejects_unknown_symbol():
    provider = MockDataProvider(clock=_fixed_clock)

    with pytest.raises(DataProviderError):
        asyncio.run(provider.get_candles(CandleRequest(symbol="XYZABC")))


# =============================================================================
# STRATEGY SERVICE
# =============================================================================


def test_execute_returns_analysis():
    service = _service()
    result = asyncio.run(
        service.execute(StrategyRequest(symbol="EURUSD", preset=StrategyPreset.ENHANCED))
    )

    assert isinstance(result, AnalysisResult)
    assert result.preset == StrategyPreset.ENHANCED
    assert result.context.session_active is True
    assert len(result.indicators.sma_50) > 0


def test_execute_is_deterministic():
    request = StrategyRequest(symbol="GBPUSD", timeframe=Timeframe.H1, lookback=150)

    first = asyncio.run(_service().execute(request))
    second = asyncio.run(_service().execute(request))

    assert first.model_dump_json() == second.model_dump_json()


def test_service_uses_default_preset():
    service = _service(default_preset=StrategyPreset.BASIC)
    result = asyncio.run(service.analyze_candles(uptrend_candles()))

    assert result.preset == StrategyPreset.BASIC
    assert result.signal.level == SignalLevel.BUY


def test_insufficient_history_is_rejected():
    service = _service()

    with pytest.raises(InsufficientDataError) as exc_info:
        asyncio.run(service.analyze_candles(uptrend_candles(50)))
    assert exc_info.value.details == {"required": 100, "received": 50}


def test_unknown_symbol_propagates_provider_error():
    with pytest.raises(DataProviderError):
        asyncio.run(_service().execute(StrategyRequest(symbol="XYZABC")))


def test_health_check():
    assert asyncio.run(_service().health_check()) is True
