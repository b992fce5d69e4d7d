"""
CONTRACT 3: Structure Detector

Input: list[Candle] + detection thresholds
Output: StructureSnapshot

Smart-money price structure: fair value gaps, order blocks and liquidity
zones. Every element is recomputed from scratch on each call; the boolean
latches (filled / tested / swept) only ever go from False to True as more
candles are observed.
"""

from enum import Enum
from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class FVGDirection(str, Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"


class OrderBlockType(str, Enum):
    DEMAND = "DEMAND"
    SUPPLY = "SUPPLY"


class LiquiditySide(str, Enum):
    BUY_SIDE = "BUY_SIDE"  # resting below a swing low
    SELL_SIDE = "SELL_SIDE"  # resting above a swing high


class VolumeProfile(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Bias(str, Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"


# =============================================================================
# STRUCTURE ELEMENTS
# =============================================================================


class FairValueGap(BaseModel):
    """Three-candle price void."""

    direction: FVGDirection
    upper_bound: float
    lower_bound: float
    origin_index: int = Field(..., ge=0, description="Index of the middle candle")
    filled: bool = False
    strength: float = Field(..., ge=0, description="Gap size in pips")


class OrderBlock(BaseModel):
    """High-volume, large-body directional candle."""

    direction: OrderBlockType
    upper_bound: float
    lower_bound: float
    volume: float = Field(..., ge=0)
    origin_index: int = Field(..., ge=0)
    tested: bool = False
    strength: float = Field(..., ge=0)


class LiquidityZone(BaseModel):
    """Swing extreme where stop orders are assumed to cluster."""

    direction: LiquiditySide
    price: float
    strength: float = Field(..., ge=0)
    origin_index: int = Field(..., ge=0)
    swept: bool = False


class StructureSnapshot(BaseModel):
    """Everything the Structure Detector found in one candle window."""

    fair_value_gaps: list[FairValueGap] = Field(default_factory=list)
    order_blocks: list[OrderBlock] = Field(default_factory=list)
    liquidity_zones: list[LiquidityZone] = Field(default_factory=list)
    volume_profile: VolumeProfile = VolumeProfile.MEDIUM
    microstructure: Bias = Bias.NEUTRAL
