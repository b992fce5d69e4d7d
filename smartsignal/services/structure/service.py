"""
Structure Detector Implementation

Runs every detector over one candle window and bundles the results.
"""

from typing import Sequence

from smartsignal.schemas.market import Candle
from smartsignal.schemas.signals import StrategyConfig
from smartsignal.schemas.structure import StructureSnapshot
from smartsignal.services.structure.detectors import (
    detect_fair_value_gaps,
    detect_order_blocks,
    detect_liquidity_zones,
    classify_volume_profile,
    classify_microstructure,
)


def detect_structure(candles: Sequence[Candle], config: StrategyConfig) -> StructureSnapshot:
    """Detect all smart-money structure in a candle window."""
    gaps = detect_fair_value_gaps(candles, config.fvg_min_size)
    blocks = detect_order_blocks(candles, config.order_block_min_volume)

    return StructureSnapshot(
        fair_value_gaps=gaps,
        order_blocks=blocks,
        liquidity_zones=detect_liquidity_zones(candles, config.liquidity_tolerance),
        volume_profile=classify_volume_profile(candles),
        microstructure=classify_microstructure(candles, gaps, blocks),
    )
