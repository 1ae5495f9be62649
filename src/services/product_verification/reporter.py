from __future__ import annotations

from typing import Iterable, Optional

from services.product_verification.models import Classification, ItemOutcome, Outcome, VerificationSummary
from services.product_verification.policy import VerificationPolicy


def summarize(outcomes: Iterable[ItemOutcome], policy: Optional[VerificationPolicy] = None) -> VerificationSummary:
    policy = policy or VerificationPolicy.default()
    outcomes = list(outcomes)
    counts = {o: 0 for o in Outcome}
    for result in outcomes:
        counts[result.outcome] += 1

    analyzed = [o for o in outcomes if o.outcome is not Outcome.EXCLUDED]
    high_confidence = sum(1 for o in analyzed if _is_high_confidence(o, policy))

    return VerificationSummary(
        total_products=len(outcomes),
        excluded_count=counts[Outcome.EXCLUDED],
        analyzed_count=len(analyzed),
        reclassified_count=counts[Outcome.RECLASSIFIED],
        confirmed_own_count=counts[Outcome.CONFIRMED_OWN],
        classified_own_count=counts[Outcome.CLASSIFIED_OWN],
        confirmed_competitor_count=counts[Outcome.CONFIRMED_COMPETITOR],
        potential_misclassification_count=counts[Outcome.POTENTIAL_MISCLASSIFICATION],
        unresolved_count=counts[Outcome.UNRESOLVED],
        high_confidence_matches=high_confidence,
        own_brand_total=_total(analyzed, Classification.OWN_BRAND),
        competitor_total=_total(analyzed, Classification.COMPETITOR),
        excluded_total=sum(o.amount for o in outcomes if o.outcome is Outcome.EXCLUDED),
        threshold=policy.match_threshold,
        high_confidence_threshold=policy.high_confidence_threshold,
        estimated_accuracy=_rate(high_confidence, len(analyzed)),
    )


def _is_high_confidence(outcome: ItemOutcome, policy: VerificationPolicy) -> bool:
    verification = outcome.item.verification
    return bool(verification and verification.matched and verification.score >= policy.high_confidence_threshold)


def _total(outcomes: list[ItemOutcome], classification: Classification) -> float:
    return sum(o.amount for o in outcomes if o.item.classification is classification)


def _rate(numerator: int, denominator: int) -> float:
    if denominator <= 0:
        return 0.0
    return float(numerator) / float(denominator)
