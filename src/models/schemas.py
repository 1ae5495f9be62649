import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from services.product_verification.models import (
    Classification,
    Guess,
    LineItem,
    Verification,
    VerificationSummary,
)

logger = logging.getLogger(__name__)

OWN_BRAND_TYPES = {"own", "own_brand", "own-brand", "soprema"}
COMPETITOR_TYPES = {"competitor", "concurrent"}


class LineItemPayload(BaseModel):
    """Line item as emitted by the upstream invoice extraction."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    designation: Any = None
    name: Any = None
    total_price: float = Field(default=0.0, alias="totalPrice")
    is_competitor: Optional[bool] = Field(default=None, alias="isCompetitor")
    type: Optional[str] = None

    @field_validator("total_price", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> float:
        if value is None or value == "":
            return 0.0
        if isinstance(value, str):
            value = value.replace("\u00a0", "").replace(" ", "").replace("€", "").replace(",", ".")
        try:
            return float(value)
        except (TypeError, ValueError):
            logger.warning(f"[Payload] Unparseable amount {value!r}, using 0")
            return 0.0

    @field_validator("is_competitor", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> Optional[bool]:
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in {"true", "1", "yes", "oui"}:
                return True
            if lowered in {"false", "0", "no", "non"}:
                return False
            return None
        if value is None or isinstance(value, bool):
            return value
        return None

    def guess(self) -> Guess:
        kind = (self.type or "").strip().lower()
        if self.is_competitor is True or kind in COMPETITOR_TYPES:
            return Guess.COMPETITOR
        if self.is_competitor is False or kind in OWN_BRAND_TYPES:
            return Guess.OWN
        return Guess.UNKNOWN

    def to_line_item(self) -> LineItem:
        extra: Dict[str, Any] = dict(self.model_extra or {})
        if self.name is not None:
            extra["name"] = self.name
        if self.type is not None:
            extra["type"] = self.type
        designation = self.designation if self.designation is not None else self.name
        return LineItem(designation, self.total_price, self.guess(), extra)


class VerificationPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    score: int
    matched: bool
    matched_product: Optional[str] = Field(default=None, alias="matchedProduct")
    method: str
    threshold: int
    details: str
    outcome: str
    reclassified: bool = False
    original_classification: str = Field(alias="originalClassification")

    @classmethod
    def from_verification(cls, verification: Verification) -> "VerificationPayload":
        return cls(
            score=verification.score,
            matched=verification.matched,
            matched_product=verification.matched_name,
            method=verification.method.value,
            threshold=verification.threshold,
            details=verification.details,
            outcome=verification.outcome.value,
            reclassified=verification.reclassified,
            original_classification=verification.original_guess.value,
        )


class VerificationSummaryPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_products: int = Field(alias="totalProducts")
    excluded_count: int = Field(alias="excludedCount")
    analyzed_products: int = Field(alias="analyzedProducts")
    reclassified_count: int = Field(alias="reclassifiedCount")
    review_count: int = Field(alias="reviewCount")
    high_confidence_matches: int = Field(alias="highConfidenceMatches")
    own_brand_total: float = Field(alias="ownBrandTotal")
    competitor_total: float = Field(alias="competitorTotal")
    excluded_total: float = Field(alias="excludedTotal")
    threshold: int
    estimated_accuracy: int = Field(alias="estimatedAccuracy")
    outcomes: Dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_summary(cls, summary: VerificationSummary) -> "VerificationSummaryPayload":
        return cls(
            total_products=summary.total_products,
            excluded_count=summary.excluded_count,
            analyzed_products=summary.analyzed_count,
            reclassified_count=summary.reclassified_count,
            review_count=summary.review_count,
            high_confidence_matches=summary.high_confidence_matches,
            own_brand_total=summary.own_brand_total,
            competitor_total=summary.competitor_total,
            excluded_total=summary.excluded_total,
            threshold=summary.threshold,
            estimated_accuracy=summary.estimated_accuracy_percent,
            outcomes={
                "confirmed_own": summary.confirmed_own_count,
                "classified_own": summary.classified_own_count,
                "reclassified": summary.reclassified_count,
                "confirmed_competitor": summary.confirmed_competitor_count,
                "potential_misclassification": summary.potential_misclassification_count,
                "unresolved": summary.unresolved_count,
                "excluded": summary.excluded_count,
            },
        )


def line_item_to_dict(item: LineItem) -> Dict[str, Any]:
    """Serialize a verified line item back to the upstream camelCase shape, extras included."""
    data: Dict[str, Any] = dict(item.extra)
    data["designation"] = item.designation
    data["totalPrice"] = item.total_price
    if item.verification is None:
        return data
    own = item.classification is Classification.OWN_BRAND
    data["isCompetitor"] = not own
    data["type"] = "own_brand" if own else "competitor"
    data["reclassified"] = item.reclassified
    data["verification"] = VerificationPayload.from_verification(item.verification).model_dump(by_alias=True)
    return data
