import pytest

from services.product_verification import (
    CatalogUnavailableError,
    Classification,
    Guess,
    LineItem,
    MatchMethod,
    Outcome,
    ProductVerifier,
    VerificationDeadlineExceeded,
    VerificationPolicy,
)


def test_exact_match_scores_100(verifier):
    match = verifier.find_best_match("elastophene flam 25 ar / gris / 10 m x 1 m")
    assert match.matched
    assert match.score == 100
    assert match.method is MatchMethod.EXACT
    assert match.matched_name == "ELASTOPHENE FLAM 25 AR - GRIS - 10 m x 1 m"


def test_fuzzy_match_for_truncated_designation(verifier):
    match = verifier.find_best_match("ELASTOPHENE FLAM 25 AR")
    assert match.matched
    assert match.score >= 90
    assert match.method is MatchMethod.FUZZY
    assert match.matched_name == "ELASTOPHENE FLAM 25 AR - GRIS - 10 m x 1 m"
    assert "threshold 65%" in match.details


def test_top_candidates_are_ranked(verifier):
    match = verifier.find_best_match("ELASTOPHENE FLAM 25 AR")
    scores = [c.score for c in match.top_candidates]
    assert 1 <= len(scores) <= 5
    assert scores == sorted(scores, reverse=True)
    assert match.top_candidates[0].entry == match.matched_entry


def test_flagship_keyword_uses_priority_path(verifier):
    match = verifier.find_best_match("Soprema Mammouth Neodyl")
    assert match.method is MatchMethod.KEYWORD_PRIORITY
    assert match.matched_name == "SOPREMA MAMMOUTH NEODYL - 10 m x 1 m"
    assert match.score == 100


def test_flagship_keyword_alone_reaches_floor(verifier):
    match = verifier.find_best_match("SOPREMA produit divers")
    assert match.method is MatchMethod.KEYWORD_PRIORITY
    assert match.matched
    assert match.score >= 80


def test_unrelated_designation_does_not_match(verifier):
    match = verifier.find_best_match("Membrane IKO Premium")
    assert not match.matched
    assert match.score < 65


def test_below_noise_floor_is_no_match(verifier):
    match = verifier.find_best_match("XQZ 9")
    assert match.method is MatchMethod.NONE
    assert match.score == 0
    assert match.matched_entry is None
    assert match.top_candidates == ()


def test_empty_normalized_text_is_no_match(verifier):
    match = verifier.find_best_match("- / -")
    assert match.method is MatchMethod.NONE
    assert not match.matched


@pytest.mark.parametrize(
    "designation,guess,outcome,classification",
    [
        ("ELASTOPHENE FLAM 25 AR", Guess.OWN, Outcome.CONFIRMED_OWN, Classification.OWN_BRAND),
        ("ELASTOPHENE FLAM 25 AR", Guess.COMPETITOR, Outcome.RECLASSIFIED, Classification.OWN_BRAND),
        ("ELASTOPHENE FLAM 25 AR", Guess.UNKNOWN, Outcome.CLASSIFIED_OWN, Classification.OWN_BRAND),
        ("Membrane IKO Premium", Guess.COMPETITOR, Outcome.CONFIRMED_COMPETITOR, Classification.COMPETITOR),
        ("Membrane IKO Premium", Guess.OWN, Outcome.POTENTIAL_MISCLASSIFICATION, Classification.OWN_BRAND),
        ("Membrane IKO Premium", Guess.UNKNOWN, Outcome.UNRESOLVED, Classification.COMPETITOR),
    ],
)
def test_reconciliation_with_guess(verifier, designation, guess, outcome, classification):
    result, _ = verifier.verify_item(0, LineItem(designation, 100.0, guess))
    assert result.outcome is outcome
    assert result.item.classification is classification
    assert result.item.reclassified is (outcome is Outcome.RECLASSIFIED)
    assert result.item.verification.original_guess is guess


def test_own_brand_guess_is_never_flipped_to_competitor(verifier):
    result, events = verifier.verify_item(0, LineItem("Membrane IKO Premium", 100.0, Guess.OWN))
    assert result.item.classification is Classification.OWN_BRAND
    assert events[-1].kind == "potential_misclassification"


def test_verify_item_does_not_mutate_input(verifier):
    item = LineItem("ELASTOPHENE FLAM 25 AR", 500.0, Guess.COMPETITOR, {"ref": "L1"})
    result, _ = verifier.verify_item(0, item)
    assert item.verification is None
    assert result.item.verification is not None
    assert result.item.extra == {"ref": "L1"}


def test_excluded_item_keeps_no_verification(verifier):
    result, events = verifier.verify_item(3, LineItem("Frais de transport", 250.0, Guess.COMPETITOR))
    assert result.outcome is Outcome.EXCLUDED
    assert result.item.verification is None
    assert result.exclusion.category == "transport"
    assert events[0].kind == "excluded"
    assert events[0].index == 3


def test_invalid_item_is_excluded_with_diagnostic(verifier):
    result, events = verifier.verify_item(1, LineItem(None, 10.0))
    assert result.outcome is Outcome.EXCLUDED
    assert events[0].kind == "invalid"
    assert "line item 1" in events[0].detail


def test_scoring_failure_is_absorbed(verifier, monkeypatch):
    def boom(designation, deadline=None):
        raise ValueError("bad row")

    monkeypatch.setattr(verifier, "find_best_match", boom)
    result, events = verifier.verify_item(0, LineItem("ALSAN 770 TX", 10.0, Guess.COMPETITOR))

    assert result.outcome is Outcome.CONFIRMED_COMPETITOR
    assert result.match.score == 0
    assert result.match.method is MatchMethod.NONE
    assert [e.kind for e in events] == ["error", "confirmed"]


def test_missing_catalog_fails_fast():
    verifier = ProductVerifier(None)
    assert not verifier.is_ready
    with pytest.raises(CatalogUnavailableError, match="catalog unavailable"):
        verifier.verify_batch([LineItem("ALSAN 770 TX", 10.0)])
    with pytest.raises(CatalogUnavailableError):
        verifier.find_best_match("ALSAN 770 TX")


def test_missing_catalog_fails_even_for_empty_batch():
    with pytest.raises(CatalogUnavailableError):
        ProductVerifier(None).verify_batch([])


def test_expired_deadline_aborts_batch(verifier):
    with pytest.raises(VerificationDeadlineExceeded):
        verifier.verify_batch([LineItem("ALSAN 770 TX", 10.0)], deadline_seconds=0)


def test_verify_batch_emits_events_in_order(verifier):
    items = [
        LineItem("ELASTOPHENE FLAM 25 AR", 500.0, Guess.COMPETITOR),
        LineItem("TVA", 100.0),
        LineItem("ALSAN 770 TX - 15 kg", 300.0, Guess.OWN),
    ]
    received = []
    result = verifier.verify_batch(items, on_event=received.append)

    assert list(result.events) == received
    assert [(e.index, e.kind) for e in received] == [
        (0, "fuzzy"),
        (0, "reclassified"),
        (1, "excluded"),
        (2, "exact"),
        (2, "confirmed"),
    ]


def test_verify_batch_drops_excluded_items_and_keeps_order(verifier):
    items = [
        LineItem("ALSAN 770 TX - 15 kg", 300.0, Guess.OWN),
        LineItem("Livraison", 40.0),
        LineItem("Membrane IKO Premium", 400.0, Guess.COMPETITOR),
    ]
    result = verifier.verify_batch(items)

    assert [i.designation for i in result.items] == ["ALSAN 770 TX - 15 kg", "Membrane IKO Premium"]
    assert len(result.outcomes) == 3
    assert [o.index for o in result.excluded()] == [1]


def test_verification_is_idempotent(verifier):
    items = [
        LineItem("ELASTOPHENE FLAM 25 AR", 500.0, Guess.COMPETITOR),
        LineItem("Membrane IKO Premium", 400.0, Guess.COMPETITOR),
        LineItem("Frais de port", 30.0),
    ]
    first = verifier.verify_batch(items)
    second = verifier.verify_batch(items)
    assert first.outcomes == second.outcomes
    assert first.summary == second.summary


@pytest.mark.parametrize(
    "designation",
    [
        "ELASTOPHENE FLAM 25 AR",
        "ELASTOPHENE 180 noir",
        "Alsan 500 résine",
        "Sopralene flam 180",
        "Membrane IKO Premium",
        "PAVATHERM 60",
        "Flagon EP PV gris",
        "Soprema Mammouth Neodyl",
        "SOPREMA produit divers",
    ],
)
def test_pruning_does_not_change_decisions(catalog, designation):
    pruned = ProductVerifier(catalog, VerificationPolicy(min_pruned_candidates=1, priority_scan_limit=1))
    full = ProductVerifier(catalog, VerificationPolicy(enable_candidate_pruning=False, priority_scan_limit=1))
    item = LineItem(designation, 10.0, Guess.COMPETITOR)

    pruned_result, _ = pruned.verify_item(0, item)
    full_result, _ = full.verify_item(0, item)

    assert pruned_result.outcome is full_result.outcome
    assert pruned_result.item.verification.matched == full_result.item.verification.matched
    assert pruned_result.item.verification.score == full_result.item.verification.score
    assert pruned_result.item.verification.matched_name == full_result.item.verification.matched_name
    assert pruned.verify_batch([item]).summary == full.verify_batch([item]).summary


def test_threshold_comes_from_policy(catalog):
    strict = ProductVerifier(catalog, VerificationPolicy(match_threshold=99))
    result, _ = strict.verify_item(0, LineItem("ELASTOPHENE FLAM 25 AR", 500.0, Guess.COMPETITOR))
    assert result.outcome is Outcome.CONFIRMED_COMPETITOR
    assert result.item.verification.threshold == 99


def test_from_settings_loads_catalog(catalog_file):
    from config import Settings

    verifier = ProductVerifier.from_settings(Settings(catalog_path=str(catalog_file), match_threshold=70))
    assert verifier.is_ready
    assert verifier.policy.match_threshold == 70


def test_from_settings_with_missing_catalog(tmp_path):
    from config import Settings
    from services.product_verification import CatalogLoadError

    with pytest.raises(CatalogLoadError):
        ProductVerifier.from_settings(Settings(catalog_path=str(tmp_path / "none.json")))
