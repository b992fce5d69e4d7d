"""
Tests for fair value gaps, order blocks, liquidity zones and bias.
"""

import pytest

from smartsignal.schemas.signals import StrategyConfig
from smartsignal.schemas.structure import (
    Bias,
    FVGDirection,
    LiquiditySide,
    OrderBlockType,
    VolumeProfile,
)
from smartsignal.services.structure import detect_structure
from smartsignal.services.structure.detectors import (
    MAX_FAIR_VALUE_GAPS,
    MAX_LIQUIDITY_ZONES,
    MAX_ORDER_BLOCKS,
    classify_microstructure,
    classify_volume_profile,
    detect_fair_value_gaps,
    detect_liquidity_zones,
    detect_order_blocks,
)

from conftest import flat_candles, make_candle, uptrend_candles


# =============================================================================
# FAIR VALUE GAPS
# =============================================================================


def _gap_candles():
    return [
        make_candle(0, 1.1060, 1.1070, 1.1050, 1.1055),
        make_candle(1, 1.1050, 1.1052, 1.1020, 1.1025),
        make_candle(2, 1.1020, 1.1020, 1.1005, 1.1010),
    ]


def test_single_bullish_fvg():
    gaps = detect_fair_value_gaps(_gap_candles(), 0.0002)

    assert len(gaps) == 1
    gap = gaps[0]
    assert gap.direction == FVGDirection.BULLISH
    assert gap.upper_bound == pytest.approx(1.1050)
    assert gap.lower_bound == pytest.approx(1.1020)
    assert gap.origin_index == 1
    assert gap.strength == pytest.approx(0.0030 / 1.1055 * 10000)
    assert gap.filled is False


def test_gap_below_minimum_size_is_ignored():
    assert detect_fair_value_gaps(_gap_candles(), 0.0040) == []


def test_fvg_stays_open_until_price_revisits_the_bound():
    candles = _gap_candles() + [make_candle(3, 1.1025, 1.1035, 1.1022, 1.1030)]

    gaps = [g for g in detect_fair_value_gaps(candles) if g.origin_index == 1]
    assert gaps[0].filled is False


def test_fvg_fill_is_monotonic():
    candles = _gap_candles() + [make_candle(3, 1.1018, 1.1030, 1.1015, 1.1028)]
    filled_now = [g for g in detect_fair_value_gaps(candles) if g.origin_index == 1]
    assert filled_now[0].filled is True

    candles.append(make_candle(4, 1.1028, 1.1040, 1.1018, 1.1035))
    candles.append(make_candle(5, 1.1035, 1.1060, 1.1033, 1.1058))
    filled_later = [g for g in detect_fair_value_gaps(candles) if g.origin_index == 1]
    assert filled_later[0].filled is True


def test_fvg_list_keeps_most_recent():
    # Every step gaps down by more than the candle range
    candles = []
    price = 2.0
    for i in range(30):
        candles.append(make_candle(i, price, price + 0.001, price - 0.001, price - 0.0005))
        price -= 0.01

    gaps = detect_fair_value_gaps(candles)
    assert len(gaps) == MAX_FAIR_VALUE_GAPS
    assert [g.origin_index for g in gaps] == list(range(21, 29))


# =============================================================================
# ORDER BLOCKS
# =============================================================================


def _block_candles():
    quiet = [make_candle(i, 1.1000, 1.1005, 1.0996, 1.1001) for i in range(4)]
    impulse = [make_candle(4, 1.1000, 1.1045, 1.0998, 1.1040, v=3000.0)]
    above = [make_candle(i, 1.1050, 1.1060, 1.1048, 1.1055) for i in range(5, 10)]
    return quiet + impulse + above


def test_demand_block_detected():
    blocks = detect_order_blocks(_block_candles(), 1.2)

    assert len(blocks) == 1
    block = blocks[0]
    assert block.direction == OrderBlockType.DEMAND
    assert block.origin_index == 4
    assert block.upper_bound == pytest.approx(1.1045)
    assert block.lower_bound == pytest.approx(1.0998)
    assert block.tested is False
    # volume / (4 prior volumes / 5) * body fraction
    assert block.strength == pytest.approx(3000 / 800 * (0.0040 / 0.0047))


def test_demand_block_tested_when_price_returns():
    candles = _block_candles() + [make_candle(10, 1.1050, 1.1052, 1.1030, 1.1035)]

    blocks = detect_order_blocks(candles, 1.2)
    assert blocks[0].tested is True


def test_zero_range_candles_are_never_blocks():
    candles = flat_candles(20)
    candles[8] = make_candle(8, 1.1, 1.1, 1.1, 1.1, v=10_000.0)

    assert detect_order_blocks(candles) == []


def test_order_block_list_keeps_most_recent():
    # A bullish impulse on every fourth candle, quiet candles in between
    candles = []
    for i in range(40):
        if i % 4 == 2:
            candles.append(make_candle(i, 1.1000, 1.1011, 1.0999, 1.1010, v=3000.0))
        else:
            candles.append(make_candle(i, 1.1000, 1.1005, 1.0995, 1.1001))

    blocks = detect_order_blocks(candles, 1.2)
    assert len(blocks) == MAX_ORDER_BLOCKS
    assert [b.origin_index for b in blocks] == [14, 18, 22, 26, 30, 34]
    assert all(b.direction == OrderBlockType.DEMAND for b in blocks)


# =============================================================================
# LIQUIDITY ZONES
# =============================================================================


def _swing_candles():
    highs = [1.100, 1.101, 1.102, 1.105, 1.102, 1.101, 1.100]
    return [make_candle(i, h - 0.0015, h, h - 0.002, h - 0.0005) for i, h in enumerate(highs)]


def test_swing_high_is_sell_side_liquidity():
    zones = detect_liquidity_zones(_swing_candles())

    assert len(zones) == 1
    zone = zones[0]
    assert zone.direction == LiquiditySide.SELL_SIDE
    assert zone.price == pytest.approx(1.105)
    assert zone.origin_index == 3
    assert zone.swept is False


def test_liquidity_sweep_is_monotonic():
    candles = _swing_candles() + [make_candle(7, 1.1000, 1.1060, 1.0995, 1.1050)]
    swept = [z for z in detect_liquidity_zones(candles) if z.origin_index == 3]
    assert swept[0].swept is True

    candles.append(make_candle(8, 1.1050, 1.1052, 1.0990, 1.0995))
    still_swept = [z for z in detect_liquidity_zones(candles) if z.origin_index == 3]
    assert still_swept[0].swept is True


def test_liquidity_zone_list_keeps_most_recent():
    # Equal peaks every fourth candle over a flat floor: ten swing highs, no swing lows
    candles = [
        make_candle(i, 1.0995, 1.105 if i % 4 == 0 else 1.100, 1.099, 1.0995)
        for i in range(44)
    ]

    zones = detect_liquidity_zones(candles)
    assert len(zones) == MAX_LIQUIDITY_ZONES
    assert [z.origin_index for z in zones] == list(range(12, 41, 4))
    assert all(z.direction == LiquiditySide.SELL_SIDE for z in zones)
    assert not any(z.swept for z in zones)


# =============================================================================
# PROFILE / BIAS
# =============================================================================


def test_volume_profile():
    candles = flat_candles(10)
    assert classify_volume_profile(candles) == VolumeProfile.MEDIUM

    candles[-1] = make_candle(9, 1.1, 1.1, 1.1, 1.1, v=5000.0)
    assert classify_volume_profile(candles) == VolumeProfile.HIGH

    candles[-1] = make_candle(9, 1.1, 1.1, 1.1, 1.1, v=100.0)
    assert classify_volume_profile(candles) == VolumeProfile.LOW


def test_microstructure_of_uptrend_is_bullish():
    assert classify_microstructure(uptrend_candles(20), [], []) == Bias.BULLISH


def test_microstructure_of_flat_market_is_neutral():
    assert classify_microstructure(flat_candles(20), [], []) == Bias.NEUTRAL


def test_detect_structure_of_flat_market_is_empty():
    snapshot = detect_structure(flat_candles(120), StrategyConfig())

    assert snapshot.fair_value_gaps == []
    assert snapshot.order_blocks == []
    assert snapshot.liquidity_zones == []
    assert snapshot.microstructure == Bias.NEUTRAL
