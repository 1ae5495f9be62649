"""
Product verification engine.

Classifies invoice line items as own-brand or competitor by matching their
designations against the vendor's reference catalog.
"""

from services.product_verification.catalog import (
    CatalogIndex,
    load_catalog,
    load_catalog_cached,
    load_catalog_from_session,
)
from services.product_verification.deadline import Deadline
from services.product_verification.errors import (
    CatalogLoadError,
    CatalogUnavailableError,
    InvalidLineItem,
    VerificationDeadlineExceeded,
    VerificationError,
)
from services.product_verification.exclusion import (
    ExclusionFilter,
    check_designation,
    filter_line_items,
    is_excluded,
)
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
    Verification,
    VerificationEvent,
    VerificationSummary,
)
from services.product_verification.policy import (
    CompositePolicy,
    FlagshipPolicy,
    VerificationPolicy,
    merge_policy,
)
from services.product_verification.reporter import summarize
from services.product_verification.scoring import composite_breakdown, composite_score
from services.product_verification.text_utils import normalize_product_text
from services.product_verification.verifier import ProductVerifier

__all__ = [
    "BatchResult",
    "CatalogEntry",
    "CatalogIndex",
    "CatalogLoadError",
    "CatalogUnavailableError",
    "Classification",
    "CompositePolicy",
    "Deadline",
    "ExclusionFilter",
    "FlagshipPolicy",
    "Guess",
    "InvalidLineItem",
    "ItemOutcome",
    "LineItem",
    "MatchMethod",
    "MatchResult",
    "Outcome",
    "ProductVerifier",
    "Verification",
    "VerificationDeadlineExceeded",
    "VerificationError",
    "VerificationEvent",
    "VerificationPolicy",
    "VerificationSummary",
    "check_designation",
    "composite_breakdown",
    "composite_score",
    "filter_line_items",
    "is_excluded",
    "load_catalog",
    "load_catalog_cached",
    "load_catalog_from_session",
    "merge_policy",
    "normalize_product_text",
    "summarize",
]
