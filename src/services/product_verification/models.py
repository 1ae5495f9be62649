"""
Data models for product verification.

This module contains the core data structures shared by the catalog index,
the scorers, the verifier and the batch reporter.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


class Guess(str, enum.Enum):
    OWN = "own"
    COMPETITOR = "competitor"
    UNKNOWN = "unknown"


class Classification(str, enum.Enum):
    OWN_BRAND = "own_brand"
    COMPETITOR = "competitor"


class MatchMethod(str, enum.Enum):
    EXACT = "exact"
    KEYWORD_PRIORITY = "keyword-priority"
    FUZZY = "fuzzy"
    NONE = "none"


class Outcome(str, enum.Enum):
    EXCLUDED = "excluded"
    CONFIRMED_OWN = "confirmed_own"
    RECLASSIFIED = "reclassified"
    CLASSIFIED_OWN = "classified_own"
    CONFIRMED_COMPETITOR = "confirmed_competitor"
    POTENTIAL_MISCLASSIFICATION = "potential_misclassification"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class CatalogEntry:
    """One reference product from the vendor catalog."""
    display_name: str
    normalized_name: str
    position: int
    category: Optional[str] = None
    brand_family: Optional[str] = None


@dataclass(frozen=True)
class ScoredCandidate:
    entry: CatalogEntry
    score: int


@dataclass(frozen=True)
class MatchResult:
    """Outcome of scoring one line item against the catalog."""
    matched: bool
    score: int
    matched_entry: Optional[CatalogEntry]
    method: MatchMethod
    details: str
    top_candidates: Tuple[ScoredCandidate, ...] = ()

    @property
    def matched_name(self) -> Optional[str]:
        return self.matched_entry.display_name if self.matched_entry else None

    @classmethod
    def no_match(cls, details: str) -> "MatchResult":
        return cls(False, 0, None, MatchMethod.NONE, details)


@dataclass(frozen=True)
class ExclusionCheck:
    excluded: bool
    category: str = "product"
    reason: str = ""
    matched: Optional[str] = None


@dataclass(frozen=True)
class Verification:
    """Verification record attached to a classified line item."""
    classification: Classification
    outcome: Outcome
    score: int
    matched: bool
    matched_name: Optional[str]
    method: MatchMethod
    threshold: int
    details: str
    reclassified: bool = False
    original_guess: Guess = Guess.UNKNOWN


@dataclass(frozen=True)
class LineItem:
    """One invoice row as received from the extraction pipeline."""
    designation: Any
    total_price: float = 0.0
    guess: Guess = Guess.UNKNOWN
    extra: Dict[str, Any] = field(default_factory=dict)
    verification: Optional[Verification] = None

    @property
    def classification(self) -> Optional[Classification]:
        return self.verification.classification if self.verification else None

    @property
    def reclassified(self) -> bool:
        return bool(self.verification and self.verification.reclassified)


@dataclass(frozen=True)
class ItemOutcome:
    index: int
    item: LineItem
    outcome: Outcome
    match: Optional[MatchResult] = None
    exclusion: Optional[ExclusionCheck] = None

    @property
    def amount(self) -> float:
        return self.item.total_price


@dataclass(frozen=True)
class VerificationEvent:
    kind: str
    index: int
    designation: str
    score: int = 0
    method: str = MatchMethod.NONE.value
    detail: str = ""


@dataclass(frozen=True)
class VerificationSummary:
    total_products: int
    excluded_count: int
    analyzed_count: int
    reclassified_count: int
    confirmed_own_count: int
    classified_own_count: int
    confirmed_competitor_count: int
    potential_misclassification_count: int
    unresolved_count: int
    high_confidence_matches: int
    own_brand_total: float
    competitor_total: float
    excluded_total: float
    threshold: int
    high_confidence_threshold: int
    estimated_accuracy: float

    @property
    def estimated_accuracy_percent(self) -> int:
        return int(round(self.estimated_accuracy * 100))

    @property
    def review_count(self) -> int:
        return self.potential_misclassification_count + self.unresolved_count


@dataclass(frozen=True)
class BatchResult:
    items: Tuple[LineItem, ...]
    outcomes: Tuple[ItemOutcome, ...]
    summary: VerificationSummary
    events: Tuple[VerificationEvent, ...] = ()

    def excluded(self) -> Tuple[ItemOutcome, ...]:
        return tuple(o for o in self.outcomes if o.outcome is Outcome.EXCLUDED)
