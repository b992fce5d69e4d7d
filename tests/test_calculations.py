"""
Tests for the NumPy indicator library and the indicator series builder.
"""

import numpy as np
import pytest

from smartsignal.services.data_ingestion import generate_mock_candles
from smartsignal.services.indicators import compute_indicator_series
from smartsignal.services.indicators.calculations import (
    OHLCVData,
    adx,
    atr,
    bollinger_bands,
    ema,
    get_last_valid,
    macd,
    pivot_points,
    rsi,
    sma,
)
from smartsignal.schemas.market import Timeframe

from conftest import BASE_TIME, flat_candles, linear_candles, uptrend_candles


def _mock_closes(n: int = 300, seed: int = 3):
    candles = generate_mock_candles("EURUSD", Timeframe.M15, n, BASE_TIME, seed=seed)
    return OHLCVData.from_candles(candles)


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def test_sma_and_ema_of_constant_series_equal_the_constant():
    # 1.1 has no exact binary form, so a plain mean drifts in the last bit
    data = np.full(60, 1.1)

    assert np.all(sma(data, 20)[19:] == 1.1)
    assert np.all(ema(data, 12)[11:] == 1.1)
    assert np.all(ema(data, 26)[25:] == 1.1)


def test_constant_series_has_zero_width_bollinger_bands():
    upper, middle, lower = bollinger_bands(np.full(30, 1.1), 20, 2.0)

    assert np.all(upper[19:] == 1.1)
    assert np.all(middle[19:] == 1.1)
    assert np.all(lower[19:] == 1.1)


def test_macd_of_constant_series_is_exactly_zero():
    line, signal, histogram = macd(np.full(60, 1.1))

    assert np.all(line[25:] == 0)
    assert np.all(histogram[33:] == 0)


def test_short_input_yields_no_values():
    data = np.array([1.0, 2.0, 3.0])

    assert np.all(np.isnan(sma(data, 20)))
    assert np.all(np.isnan(ema(data, 12)))
    assert np.all(np.isnan(rsi(data, 14)))
    assert get_last_valid(ema(np.array([]), 12)) is None


def test_ema_seed_is_mean_of_first_period():
    data = np.arange(1.0, 21.0)
    result = ema(data, 5)

    assert np.all(np.isnan(result[:4]))
    assert result[4] == pytest.approx(3.0)
    assert result[5] == pytest.approx((6.0 - 3.0) * (2 / 6) + 3.0)


# =============================================================================
# MOMENTUM
# =============================================================================


def test_rsi_stays_within_bounds():
    data = _mock_closes()
    values = rsi(data.closes, 14)
    valid = values[~np.isnan(values)]

    assert len(valid) > 0
    assert np.all(valid >= 0)
    assert np.all(valid <= 100)


def test_rsi_gains_only_uses_rs_of_100():
    values = rsi(np.arange(1.0, 31.0), 14)

    assert values[14] == pytest.approx(100 - 100 / 101)


def test_rsi_flat_window_has_no_value():
    values = rsi(np.full(40, 1.1), 14)

    assert np.all(np.isnan(values))


def test_macd_pairs_fast_and_slow_ema_on_the_same_candle():
    closes = np.arange(1.0, 31.0)
    macd_line, signal_line, histogram = macd(closes)

    valid = ~np.isnan(macd_line)
    assert np.flatnonzero(valid).tolist() == [25, 26, 27, 28, 29]
    # EMA12 lags a unit ramp by 5.5, EMA26 by 12.5
    assert macd_line[valid] == pytest.approx(np.full(5, 7.0))
    # Fewer than 9 MACD points: no signal line yet
    assert np.all(np.isnan(signal_line))
    assert np.all(np.isnan(histogram))


def test_macd_series_timestamps_follow_the_slow_ema():
    candles = linear_candles([float(i) for i in range(1, 31)])
    series = compute_indicator_series(candles)

    assert len(series.macd.macd) == 5
    assert series.macd.macd[0].timestamp == candles[25].timestamp
    assert series.macd.macd[0].value == pytest.approx(7.0)
    assert series.macd.signal == []


# =============================================================================
# VOLATILITY
# =============================================================================


def test_bollinger_bands_are_ordered():
    data = _mock_closes()
    upper, middle, lower = bollinger_bands(data.closes, 20, 2.0)
    valid = ~np.isnan(middle)

    assert np.all(lower[valid] <= middle[valid])
    assert np.all(middle[valid] <= upper[valid])


def test_bollinger_uses_population_std():
    closes = np.array([1.0, 2.0, 3.0, 4.0])
    upper, middle, lower = bollinger_bands(closes, 4, 2.0)

    assert middle[3] == pytest.approx(2.5)
    assert upper[3] == pytest.approx(2.5 + 2 * np.sqrt(1.25))


def test_atr_first_value_at_period():
    data = OHLCVData.from_candles(uptrend_candles(40))
    values = atr(data.highs, data.lows, data.closes, 14)

    assert np.all(np.isnan(values[:14]))
    assert not np.isnan(values[14])


# =============================================================================
# TREND
# =============================================================================


def test_adx_of_clean_uptrend_is_fully_directional():
    data = OHLCVData.from_candles(uptrend_candles(60))
    adx_values, plus_di, minus_di = adx(data.highs, data.lows, data.closes, 14)

    assert np.flatnonzero(~np.isnan(adx_values))[0] == 14
    assert get_last_valid(minus_di) == 0
    assert get_last_valid(plus_di) > 0
    assert get_last_valid(adx_values) == pytest.approx(100.0)


def test_adx_of_flat_market_is_zero():
    data = OHLCVData.from_candles(flat_candles(40))
    adx_values, plus_di, minus_di = adx(data.highs, data.lows, data.closes, 14)

    assert get_last_valid(adx_values) == 0
    assert get_last_valid(plus_di) == 0


def test_adx_warm_up_switches_from_raw_dx_to_smoothed():
    # period 3: DX is reported as-is on candles 3 and 4, smoothed from candle 5
    highs = np.array([10.0, 11.0, 12.0, 11.0, 13.0, 12.0, 14.0])
    lows = highs - 1.0
    closes = highs - 0.5

    adx_values, plus_di, minus_di = adx(highs, lows, closes, 3)

    assert np.all(np.isnan(adx_values[:3]))
    assert plus_di[3] == pytest.approx(400 / 9)
    assert minus_di[3] == pytest.approx(200 / 9)

    dx = [100 / 3, 50.0, 0.0, 60.0]
    assert adx_values[3] == pytest.approx(dx[0])
    assert adx_values[4] == pytest.approx(dx[1])
    assert adx_values[5] == pytest.approx((dx[0] + dx[1] + dx[2]) / 3)
    assert adx_values[6] == pytest.approx((dx[1] + adx_values[5] + dx[3]) / 3)
    assert adx_values[6] == pytest.approx(1240 / 27)


# =============================================================================
# PIVOTS / SERIES
# =============================================================================


def test_pivot_points():
    levels = pivot_points(1.1100, 1.1000, 1.1050)

    assert levels["pivot"] == pytest.approx(1.1050)
    assert levels["r1"] == pytest.approx(1.1100)
    assert levels["s1"] == pytest.approx(1.1000)
    assert levels["r2"] == pytest.approx(1.1150)
    assert levels["s2"] == pytest.approx(1.0950)


def test_pivot_points_of_last_candle():
    levels = pivot_points(1.1050, 1.1000, 1.1030)

    assert round(levels["pivot"], 5) == 1.10267
    assert round(levels["r1"], 5) == round(2 * levels["pivot"] - 1.1000, 5)
    assert round(levels["s1"], 5) == round(2 * levels["pivot"] - 1.1050, 5)


def test_indicator_series_lengths_and_alignment():
    candles = uptrend_candles(100)
    series = compute_indicator_series(candles)

    assert len(series.sma_20) == 81
    assert len(series.sma_50) == 51
    assert len(series.ema_12) == 89
    assert len(series.ema_26) == 75
    assert len(series.rsi_14) == 86
    assert len(series.macd.macd) == 75
    assert len(series.macd.signal) == 67
    assert len(series.macd.histogram) == 67
    assert len(series.bollinger_bands.upper) == 81
    assert len(series.atr_14) == 86
    assert len(series.adx_14) == 86

    assert series.sma_20[0].timestamp == candles[19].timestamp
    assert series.rsi_14[0].timestamp == candles[14].timestamp
    assert series.macd.histogram[-1].timestamp == candles[-1].timestamp


def test_indicator_series_of_empty_input_is_empty():
    series = compute_indicator_series([])

    assert series.sma_20 == []
    assert series.macd.macd == []
