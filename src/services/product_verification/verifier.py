"""
Classifier / verifier for invoice line items.

Per item: Received -> Excluded | ExactMatched | BrandPrioritized | FuzzyScored
(-> NoMatch below the noise floor). The match decision is then reconciled with
the upstream own-brand/competitor guess. Reclassification only ever moves an
item towards own-brand: the catalog lists the vendor's products only, so the
absence of a match is not evidence of a competitor product.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Callable, Iterable, Optional, Sequence

from services.product_verification.catalog import CatalogIndex, load_catalog
from services.product_verification.deadline import Deadline
from services.product_verification.errors import (
    CatalogUnavailableError,
    InvalidLineItem,
    VerificationError,
)
from services.product_verification.exclusion import DEFAULT_FILTER, ExclusionFilter
from services.product_verification.models import (
    BatchResult,
    CatalogEntry,
    Classification,
    Guess,
    ItemOutcome,
    LineItem,
    MatchMethod,
    MatchResult,
    Outcome,
    ScoredCandidate,
    Verification,
    VerificationEvent,
)
from services.product_verification.policy import VerificationPolicy
from services.product_verification.reporter import summarize
from services.product_verification.scoring import composite_breakdown, has_flagship_keyword
from services.product_verification.text_utils import normalize_product_text

logger = logging.getLogger(__name__)

EventCallback = Callable[[VerificationEvent], None]

DEADLINE_CHECK_INTERVAL = 256
MAX_SCORE = 100


class ProductVerifier:
    def __init__(
        self,
        catalog: Optional[CatalogIndex],
        policy: Optional[VerificationPolicy] = None,
        exclusion: Optional[ExclusionFilter] = None,
        deadline_seconds: Optional[float] = None,
    ):
        self._catalog = catalog
        self.policy = policy or VerificationPolicy.default()
        self.exclusion = exclusion or DEFAULT_FILTER
        self.deadline_seconds = deadline_seconds

    @classmethod
    def from_settings(cls, settings=None) -> "ProductVerifier":
        if settings is None:
            from config import settings
        catalog = load_catalog(settings.catalog_path)
        return cls(
            catalog,
            VerificationPolicy.from_settings(settings),
            deadline_seconds=settings.verification_deadline_seconds,
        )

    @property
    def catalog(self) -> CatalogIndex:
        return self.require_catalog()

    @property
    def is_ready(self) -> bool:
        return self._catalog is not None

    def find_best_match(self, designation: str, deadline: Optional[Deadline] = None) -> MatchResult:
        catalog = self.catalog
        deadline = deadline or Deadline.none()
        normalized = normalize_product_text(designation)
        if not normalized:
            return MatchResult.no_match("Designation has no comparable text")

        exact = catalog.lookup_exact(normalized)
        if exact:
            return MatchResult(True, 100, exact[0], MatchMethod.EXACT, "Exact match in catalog index")

        if has_flagship_keyword(normalized, self.policy.composite):
            return self._keyword_priority_match(designation, normalized, deadline)
        return self._fuzzy_match(designation, normalized, deadline)

    def verify_item(
        self, index: int, item: LineItem, deadline: Optional[Deadline] = None
    ) -> tuple[ItemOutcome, list[VerificationEvent]]:
        """Classify one line item; item-scoped failures never escape."""
        deadline = deadline or Deadline.none()
        deadline.check("verification")
        exclusion = self.exclusion.check_line_item(item)
        label = item.designation if isinstance(item.designation, str) else repr(item.designation)
        if exclusion.excluded:
            return self._excluded(index, item, exclusion, label)

        try:
            match = self.find_best_match(item.designation, deadline)
            events = [_match_event(index, label, match)]
        except VerificationError:
            raise
        except Exception as e:
            logger.warning(f"[Verification] Scoring failed for item {index} ('{label}'): {e}")
            match = MatchResult.no_match(f"Scoring failed: {e}")
            events = [VerificationEvent("error", index, label, detail=str(e))]

        outcome, verification = self.reconcile(item, match)
        events.append(_decision_event(index, label, outcome, match))
        logger.debug(f"[Verification] {outcome.value}: '{label}' score={match.score} method={match.method.value}")
        verified = dataclasses.replace(item, verification=verification)
        return ItemOutcome(index, verified, outcome, match=match), events

    def reconcile(self, item: LineItem, match: MatchResult) -> tuple[Outcome, Verification]:
        threshold = self.policy.match_threshold
        matched = match.score >= threshold and match.matched_entry is not None
        outcome, classification = _decide(item.guess, matched)
        verification = Verification(
            classification=classification,
            outcome=outcome,
            score=match.score,
            matched=matched,
            matched_name=match.matched_name,
            method=match.method,
            threshold=threshold,
            details=match.details,
            reclassified=outcome is Outcome.RECLASSIFIED,
            original_guess=item.guess,
        )
        return outcome, verification

    def verify_batch(
        self,
        items: Iterable[LineItem],
        deadline_seconds: Optional[float] = None,
        on_event: Optional[EventCallback] = None,
    ) -> BatchResult:
        self.require_catalog()
        items = list(items)
        deadline = Deadline(deadline_seconds if deadline_seconds is not None else self.deadline_seconds)
        logger.info(f"[Verification] Verifying {len(items)} line items (threshold {self.policy.match_threshold})")
        results = [self.verify_item(i, item, deadline) for i, item in enumerate(items)]
        return self.assemble(results, on_event)

    def assemble(
        self,
        results: Sequence[tuple[ItemOutcome, list[VerificationEvent]]],
        on_event: Optional[EventCallback] = None,
    ) -> BatchResult:
        outcomes = tuple(outcome for outcome, _ in results)
        events = tuple(event for _, item_events in results for event in item_events)
        if on_event:
            for event in events:
                on_event(event)
        summary = summarize(outcomes, self.policy)
        logger.info(
            f"[Verification] {summary.analyzed_count} analyzed, {summary.excluded_count} excluded, "
            f"{summary.reclassified_count} reclassified, {summary.review_count} for review, "
            f"accuracy estimate {summary.estimated_accuracy_percent}%"
        )
        kept = tuple(o.item for o in outcomes if o.outcome is not Outcome.EXCLUDED)
        return BatchResult(kept, outcomes, summary, events)

    def require_catalog(self) -> CatalogIndex:
        if self._catalog is None:
            raise CatalogUnavailableError()
        return self._catalog

    def _excluded(self, index, item, exclusion, label) -> tuple[ItemOutcome, list[VerificationEvent]]:
        if exclusion.category == "invalid":
            diagnostic = InvalidLineItem(index, exclusion.reason)
            logger.warning(f"[Verification] {diagnostic}")
            event = VerificationEvent("invalid", index, label, detail=str(diagnostic))
        else:
            logger.debug(f"[Exclusion] '{label}' excluded: {exclusion.reason}")
            event = VerificationEvent("excluded", index, label, detail=f"{exclusion.category}: {exclusion.reason}")
        return ItemOutcome(index, item, Outcome.EXCLUDED, exclusion=exclusion), [event]

    def _keyword_priority_match(self, designation: str, normalized: str, deadline: Deadline) -> MatchResult:
        ranked = self._rank(designation, normalized, deadline, limit=self.policy.priority_scan_limit)
        return self._result_from_ranking(
            normalized, ranked, MatchMethod.KEYWORD_PRIORITY, "Explicit flagship brand product"
        )

    def _fuzzy_match(self, designation: str, normalized: str, deadline: Deadline) -> MatchResult:
        ranked = self._rank(designation, normalized, deadline)
        return self._result_from_ranking(normalized, ranked, MatchMethod.FUZZY, "Fuzzy match")

    def _rank(
        self, designation: str, normalized: str, deadline: Deadline, limit: Optional[int] = None
    ) -> list[ScoredCandidate]:
        """Rank catalog entries; the best entry and score always equal those of a full scan."""
        entries = self._candidate_entries(designation)
        if limit is not None and self.policy.enable_candidate_pruning:
            entries = entries[: max(1, limit)]
        ranked = self._scan(normalized, entries, deadline)
        if len(entries) == len(self.catalog):
            return ranked
        return self._complete_ranking(designation, normalized, entries, ranked, deadline)

    def _complete_ranking(
        self,
        designation: str,
        normalized: str,
        scanned: Sequence[CatalogEntry],
        ranked: list[ScoredCandidate],
        deadline: Deadline,
    ) -> list[ScoredCandidate]:
        if not ranked or ranked[0].score < MAX_SCORE:
            logger.debug(f"[Verification] Pruned scan inconclusive for '{designation}', rescanning full catalog")
            return self._scan(normalized, self.catalog.entries, deadline)
        # A perfect score can only be tied by an unscanned entry that comes earlier in the catalog.
        best = ranked[0]
        seen = {entry.position for entry in scanned}
        earlier = [e for e in self.catalog.entries if e.position < best.entry.position and e.position not in seen]
        if not earlier:
            return ranked
        merged = ranked + self._scan(normalized, earlier, deadline)
        return sorted(merged, key=lambda c: (-c.score, c.entry.position))

    def _candidate_entries(self, designation: str) -> list[CatalogEntry]:
        if not self.policy.enable_candidate_pruning:
            return list(self.catalog.entries)
        return self.catalog.candidates(designation, self.policy.min_pruned_candidates)

    def _scan(self, normalized: str, entries: Sequence[CatalogEntry], deadline: Deadline) -> list[ScoredCandidate]:
        composite = self.policy.composite
        floor = self.policy.noise_floor
        scored: list[ScoredCandidate] = []
        for i, entry in enumerate(entries):
            if i % DEADLINE_CHECK_INTERVAL == 0:
                deadline.check("catalog scan")
            score = composite_breakdown(normalized, entry.normalized_name, composite).total
            if score >= floor:
                scored.append(ScoredCandidate(entry, score))
        return sorted(scored, key=lambda c: (-c.score, c.entry.position))

    def _result_from_ranking(
        self, normalized: str, ranked: list[ScoredCandidate], method: MatchMethod, label: str
    ) -> MatchResult:
        if not ranked:
            return MatchResult.no_match(f"No catalog entry reached the noise floor ({self.policy.noise_floor}%)")
        best = ranked[0]
        threshold = self.policy.match_threshold
        breakdown = composite_breakdown(normalized, best.entry.normalized_name, self.policy.composite)
        details = f"{label}: score {best.score}% (threshold {threshold}%) [{breakdown.describe()}]"
        top = tuple(ranked[: self.policy.top_candidates])
        return MatchResult(best.score >= threshold, best.score, best.entry, method, details, top)


def _decide(guess: Guess, matched: bool) -> tuple[Outcome, Classification]:
    if matched:
        if guess is Guess.OWN:
            return Outcome.CONFIRMED_OWN, Classification.OWN_BRAND
        if guess is Guess.COMPETITOR:
            return Outcome.RECLASSIFIED, Classification.OWN_BRAND
        return Outcome.CLASSIFIED_OWN, Classification.OWN_BRAND
    if guess is Guess.COMPETITOR:
        return Outcome.CONFIRMED_COMPETITOR, Classification.COMPETITOR
    if guess is Guess.OWN:
        return Outcome.POTENTIAL_MISCLASSIFICATION, Classification.OWN_BRAND
    return Outcome.UNRESOLVED, Classification.COMPETITOR


def _match_event(index: int, label: str, match: MatchResult) -> VerificationEvent:
    kind = {
        MatchMethod.EXACT: "exact",
        MatchMethod.KEYWORD_PRIORITY: "keyword_priority",
        MatchMethod.FUZZY: "fuzzy",
    }.get(match.method, "no_match")
    return VerificationEvent(kind, index, label, match.score, match.method.value, match.matched_name or "")


def _decision_event(index: int, label: str, outcome: Outcome, match: MatchResult) -> VerificationEvent:
    kind = {
        Outcome.RECLASSIFIED: "reclassified",
        Outcome.POTENTIAL_MISCLASSIFICATION: "potential_misclassification",
        Outcome.UNRESOLVED: "unresolved",
    }.get(outcome, "confirmed")
    return VerificationEvent(kind, index, label, match.score, match.method.value, outcome.value)
