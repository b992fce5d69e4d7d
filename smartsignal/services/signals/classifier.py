"""
Signal Classifier

Maps a ConfluenceResult onto the 7-level SignalLevel scale.
"""

from smartsignal.schemas.signals import ConfluenceResult, SignalLevel, StrategyConfig
from smartsignal.services.confluence.presets import RuleSet


def classify(
    confluence: ConfluenceResult, rule_set: RuleSet, config: StrategyConfig
) -> SignalLevel:
    """
    Classify a confluence tally.

    HOLD when confidence or confluence is below the configured minimum,
    or when both sides score equally. Otherwise the strongest tier whose
    thresholds are all met, falling back to the preset's base tier.
    """
    if confluence.confidence_score < config.min_confidence:
        return SignalLevel.HOLD

    if confluence.confluence_score < config.min_confluence:
        return SignalLevel.HOLD

    bullish = confluence.bullish_score
    bearish = confluence.bearish_score
    if bullish == bearish:
        return SignalLevel.HOLD

    is_buy = bullish > bearish
    diff = abs(bullish - bearish)

    for tier in rule_set.tiers:
        if (
            confluence.confluence_score >= tier.min_score
            and diff >= tier.min_diff
            and confluence.confidence_score >= tier.min_confidence
        ):
            return tier.buy if is_buy else tier.sell

    return rule_set.base_buy if is_buy else rule_set.base_sell
