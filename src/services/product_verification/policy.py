from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields, replace
from typing import Any

from constants.brand_keywords import FLAGSHIP_BRAND_KEYWORD, SECONDARY_BRAND_KEYWORDS


class FlagshipPolicy(str, enum.Enum):
    FLOOR = "floor"
    ADDITIVE = "additive"


@dataclass(frozen=True)
class ScoringWeights:
    edit_distance: float
    token_set: float
    ngram: float
    lcs: float

    def blend(self, edit_distance: float, token_set: float, ngram: float, lcs: float) -> float:
        return (
            edit_distance * self.edit_distance
            + token_set * self.token_set
            + ngram * self.ngram
            + lcs * self.lcs
        )


@dataclass(frozen=True)
class CompositePolicy:
    short_weights: ScoringWeights = ScoringWeights(0.6, 0.4, 0.0, 0.0)
    medium_weights: ScoringWeights = ScoringWeights(0.3, 0.3, 0.2, 0.2)
    long_weights: ScoringWeights = ScoringWeights(0.2, 0.4, 0.3, 0.1)
    short_max_length: int = 15
    medium_max_length: int = 30
    ngram_size: int = 3
    inclusion_bonus: int = 20
    flagship_keyword: str = FLAGSHIP_BRAND_KEYWORD
    flagship_policy: FlagshipPolicy = FlagshipPolicy.FLOOR
    flagship_floor_score: int = 80
    flagship_additive_bonus: int = 40
    secondary_keywords: tuple[str, ...] = SECONDARY_BRAND_KEYWORDS
    secondary_keyword_bonus: int = 10
    secondary_keyword_bonus_cap: int = 30
    shared_long_token_bonus: int = 10
    shared_long_token_min_length: int = 5
    shared_long_token_min_count: int = 2

    def weights_for(self, max_length: int) -> ScoringWeights:
        if max_length <= self.short_max_length:
            return self.short_weights
        if max_length <= self.medium_max_length:
            return self.medium_weights
        return self.long_weights


@dataclass(frozen=True)
class VerificationPolicy:
    match_threshold: int = 65
    high_confidence_threshold: int = 95
    noise_floor: int = 60
    enable_candidate_pruning: bool = True
    min_pruned_candidates: int = 10
    priority_scan_limit: int = 1000
    top_candidates: int = 5
    composite: CompositePolicy = field(default_factory=CompositePolicy)

    def __post_init__(self) -> None:
        for name in ("match_threshold", "high_confidence_threshold", "noise_floor"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must be within [0, 100], got {value}")

    @classmethod
    def default(cls) -> "VerificationPolicy":
        return cls()

    @classmethod
    def from_settings(cls, settings: Any) -> "VerificationPolicy":
        composite = CompositePolicy(
            inclusion_bonus=settings.inclusion_bonus,
            flagship_keyword=settings.flagship_brand_keyword.upper(),
            flagship_policy=FlagshipPolicy(str(settings.flagship_policy).lower()),
            flagship_floor_score=settings.flagship_floor_score,
            flagship_additive_bonus=settings.flagship_additive_bonus,
            secondary_keyword_bonus=settings.secondary_keyword_bonus,
            secondary_keyword_bonus_cap=settings.secondary_keyword_bonus_cap,
        )
        return cls(
            match_threshold=settings.match_threshold,
            high_confidence_threshold=settings.high_confidence_threshold,
            noise_floor=settings.noise_floor,
            enable_candidate_pruning=settings.enable_candidate_pruning,
            min_pruned_candidates=settings.min_pruned_candidates,
            priority_scan_limit=settings.priority_scan_limit,
            composite=composite,
        )


def merge_policy(base: VerificationPolicy, overrides: dict[str, Any] | None) -> VerificationPolicy:
    """Apply non-None overrides to a policy; composite keys are routed to the nested policy."""
    values = {k: v for k, v in (overrides or {}).items() if v is not None}
    own = {f.name for f in fields(VerificationPolicy)} - {"composite"}
    nested = {f.name for f in fields(CompositePolicy)}
    unknown = set(values) - own - nested
    if unknown:
        raise ValueError(f"Unknown policy keys: {sorted(unknown)}")
    composite = replace(base.composite, **_composite_values(values, nested))
    return replace(base, composite=composite, **{k: v for k, v in values.items() if k in own})


def _composite_values(values: dict[str, Any], nested: set[str]) -> dict[str, Any]:
    result = {k: v for k, v in values.items() if k in nested}
    if "flagship_policy" in result:
        result["flagship_policy"] = FlagshipPolicy(str(result["flagship_policy"]).lower())
    return result
