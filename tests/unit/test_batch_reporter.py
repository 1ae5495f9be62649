from services.product_verification import (
    Guess,
    ItemOutcome,
    LineItem,
    Outcome,
    VerificationPolicy,
    summarize,
)


def test_empty_batch_summary_is_all_zero():
    summary = summarize([])
    assert summary.total_products == 0
    assert summary.analyzed_count == 0
    assert summary.high_confidence_matches == 0
    assert summary.estimated_accuracy == 0.0
    assert summary.estimated_accuracy_percent == 0
    assert summary.own_brand_total == 0
    assert summary.competitor_total == 0
    assert summary.threshold == 65


def test_summary_counts_and_totals(verifier):
    items = [
        LineItem("ELASTOPHENE FLAM 25 AR", 500.0, Guess.COMPETITOR),
        LineItem("ALSAN 770 TX - 15 kg", 300.0, Guess.OWN),
        LineItem("Membrane IKO Premium", 400.0, Guess.COMPETITOR),
        LineItem("Produit inconnu XQZ", 50.0, Guess.OWN),
        LineItem("Frais de transport", 250.0),
    ]
    outcomes = [verifier.verify_item(i, item)[0] for i, item in enumerate(items)]
    summary = summarize(outcomes, verifier.policy)

    assert summary.total_products == 5
    assert summary.excluded_count == 1
    assert summary.analyzed_count == 4
    assert summary.reclassified_count == 1
    assert summary.confirmed_own_count == 1
    assert summary.confirmed_competitor_count == 1
    assert summary.potential_misclassification_count == 1
    assert summary.review_count == 1
    assert summary.own_brand_total == 850.0
    assert summary.competitor_total == 400.0
    assert summary.excluded_total == 250.0


def test_high_confidence_uses_separate_threshold(verifier):
    outcome, _ = verifier.verify_item(0, LineItem("ALSAN 770 TX - 15 kg", 300.0, Guess.OWN))
    miss, _ = verifier.verify_item(1, LineItem("Membrane IKO Premium", 400.0, Guess.COMPETITOR))

    summary = summarize([outcome, miss], VerificationPolicy())
    assert summary.high_confidence_matches == 1
    assert summary.estimated_accuracy == 0.5
    assert summary.estimated_accuracy_percent == 50

    lenient = summarize([outcome, miss], VerificationPolicy(high_confidence_threshold=100))
    assert lenient.high_confidence_matches == 1


def test_only_excluded_items():
    outcomes = [
        ItemOutcome(0, LineItem("TVA", 20.0), Outcome.EXCLUDED),
        ItemOutcome(1, LineItem("Livraison", 30.0), Outcome.EXCLUDED),
    ]
    summary = summarize(outcomes)
    assert summary.total_products == 2
    assert summary.analyzed_count == 0
    assert summary.excluded_total == 50.0
    assert summary.estimated_accuracy == 0.0
