"""
Structure Detector

CONTRACT:
    Input:  list[Candle] + StrategyConfig thresholds
    Output: StructureSnapshot

RESPONSIBILITIES:
    - Detect fair value gaps and track whether they were filled
    - Detect order blocks and track whether they were tested
    - Detect liquidity zones and track whether they were swept
    - Classify volume profile and microstructure bias
"""

from smartsignal.services.structure.service import detect_structure

__all__ = [
    "detect_structure",
]
