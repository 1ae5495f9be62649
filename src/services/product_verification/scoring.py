"""
Composite scorer: blends the similarity measures into one 0-100 confidence.

Order of application:
1. identical normalized strings score 100;
2. length-bucketed weighted blend of edit distance, token set, n-gram and LCS;
3. inclusion bonus when one string contains the other;
4. secondary brand-family keyword bonus (capped) for keywords in both strings;
5. shared long token bonus;
6. flagship brand keyword rule (floor or additive, see ``FlagshipPolicy``);
7. clamp to [0, 100] and round half up.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from services.product_verification.policy import CompositePolicy, FlagshipPolicy
from services.product_verification.similarity import (
    edit_distance_score,
    lcs_ratio,
    ngram_similarity,
    token_set_similarity,
)


@dataclass(frozen=True)
class ScoreBreakdown:
    edit_distance: float = 0.0
    token_set: float = 0.0
    ngram: float = 0.0
    lcs: float = 0.0
    blend: float = 0.0
    inclusion_bonus: int = 0
    keyword_bonus: int = 0
    shared_token_bonus: int = 0
    flagship_applied: bool = False
    total: int = 0

    def describe(self) -> str:
        parts = [
            f"edit={self.edit_distance:.0f}",
            f"tokens={self.token_set:.0f}",
            f"ngram={self.ngram:.0f}",
            f"lcs={self.lcs:.0f}",
        ]
        if self.inclusion_bonus:
            parts.append(f"inclusion+{self.inclusion_bonus}")
        if self.keyword_bonus:
            parts.append(f"keywords+{self.keyword_bonus}")
        if self.shared_token_bonus:
            parts.append(f"shared+{self.shared_token_bonus}")
        if self.flagship_applied:
            parts.append("flagship")
        return ", ".join(parts)


def composite_breakdown(text: str, candidate: str, policy: CompositePolicy) -> ScoreBreakdown:
    if text == candidate:
        return ScoreBreakdown(100.0, 100.0, 100.0, 100.0, 100.0, total=100)

    weights = policy.weights_for(max(len(text), len(candidate)))
    edit = edit_distance_score(text, candidate)
    tokens = token_set_similarity(text, candidate)
    ngram = ngram_similarity(text, candidate, policy.ngram_size)
    lcs = lcs_ratio(text, candidate)
    blend = weights.blend(edit, tokens, ngram, lcs)

    inclusion = _inclusion_bonus(text, candidate, policy)
    keywords = _keyword_bonus(text, candidate, policy)
    shared = _shared_token_bonus(text, candidate, policy)
    raw = blend + inclusion + keywords + shared

    flagship = has_flagship_keyword(text, policy)
    if flagship:
        raw = _apply_flagship(raw, policy)

    return ScoreBreakdown(edit, tokens, ngram, lcs, blend, inclusion, keywords, shared, flagship, _clamp(raw))


def composite_score(text: str, candidate: str, policy: CompositePolicy) -> int:
    return composite_breakdown(text, candidate, policy).total


def has_flagship_keyword(normalized: str, policy: CompositePolicy) -> bool:
    keyword = policy.flagship_keyword
    return bool(keyword) and keyword in (normalized or "")


def _inclusion_bonus(text: str, candidate: str, policy: CompositePolicy) -> int:
    if not text or not candidate:
        return 0
    return policy.inclusion_bonus if text in candidate or candidate in text else 0


def _keyword_bonus(text: str, candidate: str, policy: CompositePolicy) -> int:
    shared = [k for k in policy.secondary_keywords if k in text and k in candidate]
    return min(len(shared) * policy.secondary_keyword_bonus, policy.secondary_keyword_bonus_cap)


def _shared_token_bonus(text: str, candidate: str, policy: CompositePolicy) -> int:
    min_length = policy.shared_long_token_min_length
    left = {t for t in text.split(" ") if len(t) >= min_length}
    right = {t for t in candidate.split(" ") if len(t) >= min_length}
    if len(left & right) >= policy.shared_long_token_min_count:
        return policy.shared_long_token_bonus
    return 0


def _apply_flagship(raw: float, policy: CompositePolicy) -> float:
    if policy.flagship_policy is FlagshipPolicy.ADDITIVE:
        return raw + policy.flagship_additive_bonus
    return max(float(policy.flagship_floor_score), raw)


def _clamp(value: float) -> int:
    return int(min(100, max(0, math.floor(value + 0.5))))
