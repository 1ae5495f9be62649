import pytest

from services.product_verification.text_utils import (
    fold_accents,
    fold_for_phrases,
    normalize_product_text,
    significant_tokens,
    tokenize,
)


def test_normalize_uppercases_and_strips_punctuation():
    assert normalize_product_text("Elastophene flam-25/AR") == "ELASTOPHENE FLAM 25 AR"


def test_normalize_folds_accents():
    assert normalize_product_text("Élastophène FLAM-40") == normalize_product_text("elastophene flam 40")
    assert normalize_product_text("Élastophène FLAM-40") == "ELASTOPHENE FLAM 40"


def test_normalize_expands_ligatures():
    assert normalize_product_text("main d'œuvre") == "MAIN D OEUVRE"


def test_normalize_drops_standalone_units():
    assert normalize_product_text("ELASTOPHENE FLAM 25 AR - GRIS - 10 m x 1 m") == "ELASTOPHENE FLAM 25 AR GRIS 10 X 1"
    assert normalize_product_text("Alsan 500 - 25 kg") == "ALSAN 500 25"
    assert normalize_product_text("Membrane 10 m²") == "MEMBRANE 10"


def test_normalize_keeps_units_glued_to_numbers():
    assert normalize_product_text("SOPRAXPS 120mm") == "SOPRAXPS 120MM"


def test_normalize_collapses_whitespace():
    assert normalize_product_text("  ALSAN    770\t TX \n") == "ALSAN 770 TX"


@pytest.mark.parametrize("value", [None, "", "   ", "- / -", 42, ["ALSAN"]])
def test_normalize_empty_or_invalid_input(value):
    assert normalize_product_text(value) == ""


@pytest.mark.parametrize(
    "value",
    [
        "ELASTOPHENE FLAM 25 AR - GRIS - 10 m x 1 m",
        "Sopravap'R - 40 m x 1 m",
        "Bande d'étanchéité autocollante 0,33 m",
        "m m m",
        "ÆRO 12 KG",
    ],
)
def test_normalize_is_idempotent(value):
    once = normalize_product_text(value)
    assert normalize_product_text(once) == once


def test_fold_accents():
    assert fold_accents("Étanchéité façade") == "Etancheite facade"
    assert fold_accents("") == ""


def test_tokenize_filters_short_tokens():
    assert tokenize("ALSAN 500 X 1 TX") == ["ALSAN", "500", "TX"]
    assert tokenize("ALSAN 500 X 1 TX", min_length=3) == ["ALSAN", "500"]
    assert tokenize("") == []


def test_significant_tokens_skip_stopwords_and_duplicates():
    tokens = significant_tokens("Pour la membrane ALSAN avec 25 kg, membrane")
    assert tokens == ["MEMBRANE", "ALSAN"]


def test_fold_for_phrases():
    assert fold_for_phrases("Main-d'Œuvre / POSE") == "main d oeuvre pose"
    assert fold_for_phrases(None) == ""
