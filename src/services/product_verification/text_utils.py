"""
Text normalization for product designations.

Designations coming out of OCR and LLM extraction differ from catalog names in
case, accents, punctuation and packaging units. Everything that compares two
designations goes through ``normalize_product_text`` first.
"""

import unicodedata

from constants.text_patterns import (
    MIN_SET_TOKEN_LENGTH,
    MIN_SIGNIFICANT_TOKEN_LENGTH,
    NON_ALPHANUMERIC,
    STOPWORDS,
    UNIT_TOKENS,
    WHITESPACE,
)

_LIGATURES = {"Œ": "OE", "œ": "oe", "Æ": "AE", "æ": "ae", "ß": "ss"}


def fold_accents(text: str) -> str:
    """Strip diacritics and expand ligatures (``Élastophène`` -> ``Elastophene``)."""
    if not text:
        return ""
    for ligature, expansion in _LIGATURES.items():
        text = text.replace(ligature, expansion)
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_product_text(text) -> str:
    """Canonical comparable form of a designation.

    Accent-folded, uppercased, punctuation replaced by spaces, standalone unit
    tokens (MM, CM, M, KG, G, L, M2, M3) dropped, whitespace collapsed.
    Idempotent: normalizing an already normalized string returns it unchanged.
    """
    if not text or not isinstance(text, str):
        return ""
    upper = fold_accents(text).upper()
    spaced = NON_ALPHANUMERIC.sub(" ", upper)
    tokens = [t for t in spaced.split() if t not in UNIT_TOKENS]
    return WHITESPACE.sub(" ", " ".join(tokens)).strip()


def tokenize(normalized: str, min_length: int = MIN_SET_TOKEN_LENGTH) -> list[str]:
    return [t for t in (normalized or "").split(" ") if len(t) >= min_length]


def significant_tokens(text: str) -> list[str]:
    """Tokens long enough and specific enough to index the catalog by."""
    normalized = normalize_product_text(text)
    seen: dict[str, None] = {}
    for token in tokenize(normalized, MIN_SIGNIFICANT_TOKEN_LENGTH):
        if token not in STOPWORDS:
            seen.setdefault(token, None)
    return list(seen)


def fold_for_phrases(text: str) -> str:
    """Lowercase, accent-free, punctuation-as-space form used for phrase lookups."""
    upper = fold_accents(text or "").upper()
    return " ".join(NON_ALPHANUMERIC.sub(" ", upper).split()).lower()
