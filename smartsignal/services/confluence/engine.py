"""
Confluence Engine

Evaluates a preset's rule table against one ConfluenceInputs snapshot and
reduces the fired rules to a ConfluenceResult.
"""

from smartsignal.schemas.signals import ConfluenceResult
from smartsignal.schemas.structure import Bias
from smartsignal.services.confluence.presets import BoostBase, ConfidenceModel, RuleSet
from smartsignal.services.confluence.rules import ConfluenceInputs


def score_confidence(
    model: ConfidenceModel,
    bullish: int,
    bearish: int,
    confluence_score: int,
    reason_count: int,
) -> float:
    """Directional agreement plus a bounded boost, clamped into [0, 100]."""
    total = bullish + bearish
    if total > 0:
        confidence = max(bullish, bearish) / total * 100
    else:
        confidence = model.neutral_confidence

    base = confluence_score if model.boost_base == BoostBase.CONFLUENCE_SCORE else reason_count
    boost = min(base * model.boost_factor, model.boost_cap)
    confidence = min(confidence + boost, model.ceiling)

    if model.floor is not None and confluence_score >= model.floor_threshold:
        confidence = max(confidence, model.floor)

    return min(max(confidence, 0.0), 100.0)


def evaluate(inputs: ConfluenceInputs, rule_set: RuleSet) -> ConfluenceResult:
    """Run every rule once, in table order."""
    bullish = 0
    bearish = 0
    confluence_score = 0
    reasons: list[str] = []

    for rule in rule_set.rules:
        outcome = rule(inputs)
        if outcome is None:
            continue

        if outcome.side == Bias.BULLISH:
            bullish += outcome.points
        elif outcome.side == Bias.BEARISH:
            bearish += outcome.points
        confluence_score += outcome.points
        reasons.append(outcome.reason)

    return ConfluenceResult(
        bullish_score=bullish,
        bearish_score=bearish,
        confidence_score=score_confidence(
            rule_set.confidence, bullish, bearish, confluence_score, len(reasons)
        ),
        confluence_score=confluence_score,
        reasons=reasons,
    )
