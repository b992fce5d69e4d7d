"""
Analysis Pipeline

Pure composition of the core components:
    candles → Indicator Engine → Structure Detector → Confluence Engine → Signal Classifier

Same candles, preset, config and clock always produce the same result.
"""

from datetime import datetime
from typing import Optional, Sequence

from smartsignal.schemas.market import Candle
from smartsignal.schemas.signals import (
    AnalysisResult,
    Signal,
    StrategyConfig,
    StrategyPreset,
)
from smartsignal.services.base import InvalidCandleSequenceError
from smartsignal.services.indicators import compute_indicator_series, build_market_context
from smartsignal.services.structure import detect_structure
from smartsignal.services.confluence import ConfluenceInputs, TargetMode, evaluate, get_rule_set
from smartsignal.services.signals import (
    classify,
    fixed_exits,
    structural_exits,
    risk_reward_ratio,
)

PIPELINE_NAME = "AnalysisPipeline"


def validate_candles(candles: Sequence[Candle]) -> None:
    """Reject empty sequences and non-increasing timestamps."""
    if not candles:
        raise InvalidCandleSequenceError(PIPELINE_NAME, "Candle sequence is empty")

    for i in range(1, len(candles)):
        if candles[i].timestamp <= candles[i - 1].timestamp:
            raise InvalidCandleSequenceError(
                PIPELINE_NAME,
                "Candle timestamps must be strictly increasing",
                {
                    "index": i,
                    "previous": candles[i - 1].timestamp.isoformat(),
                    "current": candles[i].timestamp.isoformat(),
                },
            )


def analyze(
    candles: Sequence[Candle],
    preset: StrategyPreset = StrategyPreset.ENHANCED,
    config: Optional[StrategyConfig] = None,
    *,
    now: datetime,
) -> AnalysisResult:
    """
    Run the full analysis on a candle window.

    Args:
        candles: Ordered candles, oldest first
        preset: Rule table to score with
        config: Thresholds; fields left unset take the preset's defaults
        now: Clock reading for the session filter

    Returns:
        AnalysisResult with the signal and every intermediate

    Raises:
        InvalidCandleSequenceError: Empty or out-of-order candles
    """
    validate_candles(candles)
    if config is None:
        config = StrategyConfig.for_preset(preset)
    else:
        config = config.over_preset(preset)

    rule_set = get_rule_set(preset)
    last = candles[-1]
    price = last.close

    indicators = compute_indicator_series(candles)
    context = build_market_context(candles, indicators, now)
    structure = detect_structure(candles, config)

    confluence = evaluate(
        ConfluenceInputs.from_analysis(price, indicators, structure, context, last.timestamp),
        rule_set,
    )
    level = classify(confluence, rule_set, config)

    if rule_set.target_mode == TargetMode.STRUCTURAL:
        exits = structural_exits(
            level,
            price,
            context.latest_atr,
            structure.fair_value_gaps,
            structure.order_blocks,
            structure.liquidity_zones,
            config,
        )
    else:
        exits = fixed_exits(level, price, config)

    signal = Signal(
        level=level,
        price=price,
        timestamp=last.timestamp,
        confidence=confluence.confidence_score,
        confluence_score=confluence.confluence_score,
        reasons=list(confluence.reasons),
        stop_loss=exits.stop_loss,
        take_profit=exits.take_profit,
        trailing_stop=exits.trailing_stop,
        risk_reward_ratio=risk_reward_ratio(price, exits.stop_loss, exits.take_profit),
    )

    return AnalysisResult(
        preset=preset,
        signal=signal,
        confluence=confluence,
        indicators=indicators,
        structure=structure,
        context=context,
    )
