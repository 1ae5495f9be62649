"""
Exclusion filter for invoice lines that are not products.

Freight, taxes, fees, services, packaging, insurance, discounts, returns and
down-payments are removed before any scoring. Phrases match anywhere in the
accent-folded designation. A short list of genuine products whose names look
like fees (reinforcement fabrics, self-adhesive membranes, decennial warranty)
is checked first and always kept.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Sequence

from constants.exclusion_patterns import (
    CREDIT_PATTERN,
    NON_PRODUCT_PHRASES,
    PERCENT_TAX_DISCOUNT_PATTERN,
    PRODUCT_EXCEPTIONS,
)
from services.product_verification.models import ExclusionCheck, LineItem
from services.product_verification.text_utils import fold_accents, fold_for_phrases

logger = logging.getLogger(__name__)

KEEP = ExclusionCheck(excluded=False)


class ExclusionFilter:
    def __init__(
        self,
        phrases: Mapping[str, Sequence[str]] = NON_PRODUCT_PHRASES,
        exceptions: Sequence[str] = PRODUCT_EXCEPTIONS,
    ):
        self._phrases = [
            (category, phrase, fold_for_phrases(phrase))
            for category, items in phrases.items()
            for phrase in items
        ]
        self._exceptions = [(e, fold_for_phrases(e)) for e in exceptions]

    def check(self, designation) -> ExclusionCheck:
        if not isinstance(designation, str):
            return ExclusionCheck(True, "invalid", "Designation is missing or not text")
        if not designation.strip():
            return ExclusionCheck(True, "invalid", "Empty designation")

        words = fold_for_phrases(designation)
        for exception, folded in self._exceptions:
            if folded in words:
                return ExclusionCheck(False, "product_exception", f"Known product: {exception}", exception)

        for category, phrase, folded in self._phrases:
            if folded in words:
                return ExclusionCheck(True, category, f"Contains non-product phrase '{phrase}'", phrase)

        raw = fold_accents(designation).lower()
        match = PERCENT_TAX_DISCOUNT_PATTERN.search(raw)
        if match:
            return ExclusionCheck(True, "pattern", "Percentage, VAT or discount line", match.group(0).strip())
        match = CREDIT_PATTERN.search(raw)
        if match:
            return ExclusionCheck(True, "credit", "Negative amount or credit line", match.group(0).strip())
        return KEEP

    def is_excluded(self, designation) -> bool:
        return self.check(designation).excluded

    def check_line_item(self, item: LineItem) -> ExclusionCheck:
        result = self.check(item.designation)
        if result.excluded:
            return result
        if item.total_price < 0:
            return ExclusionCheck(True, "credit", "Negative amount - probably a credit or discount")
        return result


DEFAULT_FILTER = ExclusionFilter()


def is_excluded(designation) -> bool:
    return DEFAULT_FILTER.is_excluded(designation)


def check_designation(designation) -> ExclusionCheck:
    return DEFAULT_FILTER.check(designation)


def filter_line_items(items: Iterable[LineItem], exclusion: ExclusionFilter = DEFAULT_FILTER) -> dict:
    """Split items into products and non-products with per-category counts and totals."""
    products: list[LineItem] = []
    removed: list[tuple[LineItem, ExclusionCheck]] = []
    categories: dict[str, int] = {}
    for item in items:
        check = exclusion.check_line_item(item)
        if check.excluded:
            removed.append((item, check))
            categories[check.category] = categories.get(check.category, 0) + 1
        else:
            products.append(item)
    if removed:
        logger.info(f"[Exclusion] {len(removed)} non-product lines removed: {categories}")
    return {
        "products": products,
        "non_products": removed,
        "categories": categories,
        "product_total": sum(i.total_price for i in products),
        "non_product_total": sum(i.total_price for i, _ in removed),
    }
