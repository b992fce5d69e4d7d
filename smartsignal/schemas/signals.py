"""
CONTRACT 4: Confluence Engine + Signal Classifier

Input: IndicatorSeries + StructureSnapshot + MarketContext + StrategyConfig
Output: AnalysisResult (Signal plus every intermediate the signal was built from)

The output carries all intermediate series and structure lists so that a
presentation layer can render them without recomputation.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from smartsignal.schemas.indicators import IndicatorSeries, MarketContext
from smartsignal.schemas.structure import StructureSnapshot


# =============================================================================
# ENUMS
# =============================================================================


class SignalLevel(str, Enum):
    """7-level ordinal trading signal."""

    STRONG_SELL = "STRONG_SELL"
    SELL = "SELL"
    WEAK_SELL = "WEAK_SELL"
    HOLD = "HOLD"
    WEAK_BUY = "WEAK_BUY"
    BUY = "BUY"
    STRONG_BUY = "STRONG_BUY"

    @property
    def is_buy(self) -> bool:
        return self in (SignalLevel.WEAK_BUY, SignalLevel.BUY, SignalLevel.STRONG_BUY)

    @property
    def is_sell(self) -> bool:
        return self in (SignalLevel.WEAK_SELL, SignalLevel.SELL, SignalLevel.STRONG_SELL)

    @property
    def is_strong(self) -> bool:
        return self in (SignalLevel.STRONG_BUY, SignalLevel.STRONG_SELL)

    @property
    def rank(self) -> int:
        """Ordinal position, -3 (STRONG_SELL) .. +3 (STRONG_BUY)."""
        return list(SignalLevel).index(self) - 3


class StrategyPreset(str, Enum):
    """Rule-table presets of the Confluence Engine."""

    BASIC = "BASIC"
    ENHANCED = "ENHANCED"


# =============================================================================
# CONFIGURATION
# =============================================================================


class StrategyConfig(BaseModel):
    """
    Flat record of strategy thresholds.

    Defaults are the ENHANCED preset; use `for_preset` for the BASIC one.
    The pipeline applies a supplied config with `over_preset`, so fields a
    caller leaves unset follow the selected preset.
    """

    risk_percentage: float = Field(default=1.0, gt=0, le=100)
    stop_loss_pips: float = Field(default=50.0, gt=0, description="Fixed stop distance")
    atr_multiplier_sl: float = Field(default=1.2, gt=0)
    atr_multiplier_tp: float = Field(default=2.0, gt=0)
    take_profit_ratio: float = Field(default=2.0, gt=0)
    min_confidence: float = Field(default=65.0, ge=0, le=100)
    min_confluence: float = Field(default=4.0)
    min_adx: float = Field(default=10.0, ge=0)
    max_spread: float = Field(default=3.0, ge=0)
    use_trailing_stop: bool = True
    fvg_min_size: float = Field(default=0.0002, ge=0)
    order_block_min_volume: float = Field(default=1.2, gt=0)
    liquidity_threshold: float = Field(default=0.6, ge=0)
    liquidity_tolerance: float = Field(
        default=0.0002, ge=0, description="Touch tolerance as a fraction of price"
    )

    @classmethod
    def for_preset(cls, preset: StrategyPreset) -> "StrategyConfig":
        """Documented defaults of a preset."""
        if preset == StrategyPreset.BASIC:
            return cls(
                risk_percentage=2.0,
                stop_loss_pips=50.0,
                take_profit_ratio=2.0,
                min_confidence=70.0,
                min_confluence=0.0,
                use_trailing_stop=False,
            )
        return cls()

    def over_preset(self, preset: StrategyPreset) -> "StrategyConfig":
        """Fields set explicitly on this config, the preset's defaults for the rest."""
        return self.for_preset(preset).model_copy(update=self.model_dump(exclude_unset=True))


# =============================================================================
# OUTPUT
# =============================================================================


class ConfluenceResult(BaseModel):
    """Weighted tally of every rule that fired."""

    bullish_score: int = Field(..., ge=0)
    bearish_score: int = Field(..., ge=0)
    confidence_score: float = Field(..., ge=0, le=100)
    confluence_score: int = Field(..., description="Sum of all rule contributions")
    reasons: list[str] = Field(default_factory=list)


class Signal(BaseModel):
    """Discrete trading signal with optional exit levels."""

    level: SignalLevel
    price: float
    timestamp: datetime
    confidence: float = Field(..., ge=0, le=100)
    confluence_score: int
    reasons: list[str] = Field(default_factory=list)
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    trailing_stop: Optional[float] = None
    risk_reward_ratio: Optional[float] = None


class AnalysisResult(BaseModel):
    """
    Complete pipeline output.
    Returned by: analyze() / Strategy Service
    Consumed by: API, presentation layer
    """

    preset: StrategyPreset
    signal: Signal
    confluence: ConfluenceResult
    indicators: IndicatorSeries
    structure: StructureSnapshot
    context: MarketContext

    class Config:
        json_schema_extra = {
            "example": {
                "preset": "ENHANCED",
                "signal": {
                    "level": "BUY",
                    "price": 1.0857,
                    "timestamp": "2024-02-05T10:30:00Z",
                    "confidence": 82.5,
                    "confluence_score": 11,
                    "reasons": ["MACD bullish crossover", "Bullish EMA trend"],
                    "stop_loss": 1.0839,
                    "take_profit": 1.0893,
                    "trailing_stop": 0.0009,
                    "risk_reward_ratio": 2.0,
                },
            }
        }
