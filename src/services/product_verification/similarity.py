"""
Independent similarity measures over normalized designations.

Each measure takes two already normalized strings and returns a score in
[0, 100]. They are blended into a single confidence by ``scoring``.
"""

from typing import Optional

from rapidfuzz.distance import LCSseq, Levenshtein

from constants.text_patterns import MIN_SET_TOKEN_LENGTH


def edit_distance(a: str, b: str, max_distance: Optional[int] = None) -> int:
    """Levenshtein distance; ``max_distance + 1`` as soon as the bound is exceeded."""
    if max_distance is not None and abs(len(a) - len(b)) > max_distance:
        return max_distance + 1
    return Levenshtein.distance(a, b, score_cutoff=max_distance)


def edit_distance_score(a: str, b: str, max_distance: Optional[int] = None) -> float:
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 100.0
    distance = edit_distance(a, b, max_distance)
    return max(0.0, (1 - distance / max_len) * 100)


def token_set_similarity(a: str, b: str) -> float:
    """Jaccard overlap of the token sets (tokens of two characters or more)."""
    tokens_a = _token_set(a)
    tokens_b = _token_set(b)
    if not tokens_a and not tokens_b:
        return 100.0
    if not tokens_a or not tokens_b:
        return 0.0
    return len(tokens_a & tokens_b) / len(tokens_a | tokens_b) * 100


def ngram_similarity(a: str, b: str, n: int = 3) -> float:
    """Jaccard overlap of character n-grams, token overlap for inputs shorter than n."""
    if len(a) < n or len(b) < n:
        return token_set_similarity(a, b)
    grams_a = _ngrams(a, n)
    grams_b = _ngrams(b, n)
    return len(grams_a & grams_b) / len(grams_a | grams_b) * 100


def lcs_ratio(a: str, b: str) -> float:
    """Longest common subsequence length over the longer string's length."""
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 0.0
    return LCSseq.similarity(a, b) / max_len * 100


def _token_set(text: str) -> set[str]:
    return {t for t in (text or "").split(" ") if len(t) >= MIN_SET_TOKEN_LENGTH}


def _ngrams(text: str, n: int) -> set[str]:
    return {text[i:i + n] for i in range(len(text) - n + 1)}
