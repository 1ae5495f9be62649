"""
Dict-in / dict-out entry point used by the surrounding invoice pipeline.

Upstream line items arrive as loosely typed JSON objects. They are parsed with
the boundary schemas, verified, and serialised back in the same camelCase
shape with the verification block attached.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from models.schemas import LineItemPayload, VerificationSummaryPayload, line_item_to_dict
from services.product_verification import (
    BatchResult,
    LineItem,
    ProductVerifier,
    VerificationPolicy,
    load_catalog_cached,
)

logger = logging.getLogger(__name__)


def parse_line_items(products: List[Any]) -> List[LineItem]:
    """Parse upstream line items; malformed rows become invalid items that the verifier excludes."""
    items: List[LineItem] = []
    for index, raw in enumerate(products or []):
        if not isinstance(raw, dict):
            logger.warning(f"[Payload] Line {index} is not an object: {type(raw).__name__}")
            items.append(LineItem(designation=None))
            continue
        try:
            items.append(LineItemPayload.model_validate(raw).to_line_item())
        except ValidationError as e:
            logger.warning(f"[Payload] Line {index} rejected: {e.error_count()} validation errors")
            items.append(LineItem(designation=None, extra=dict(raw)))
    return items


def serialize_batch(result: BatchResult) -> Dict[str, Any]:
    return {
        "products": [line_item_to_dict(item) for item in result.items],
        "summary": VerificationSummaryPayload.from_summary(result.summary).model_dump(by_alias=True),
        "excludedLines": [
            {
                "index": o.index,
                "designation": o.item.designation,
                "totalPrice": o.amount,
                "category": o.exclusion.category if o.exclusion else "invalid",
                "reason": o.exclusion.reason if o.exclusion else "",
            }
            for o in result.excluded()
        ],
    }


def verify_payload(
    verifier: ProductVerifier,
    products: List[Any],
    deadline_seconds: Optional[float] = None,
) -> Dict[str, Any]:
    items = parse_line_items(products)
    result = verifier.verify_batch(items, deadline_seconds=deadline_seconds)
    return serialize_batch(result)


class VerificationService:
    """Holds one verifier for the process; the catalog is loaded on ``start``."""

    def __init__(self, settings=None):
        if settings is None:
            from config import settings
        self.settings = settings
        self._verifier: Optional[ProductVerifier] = None

    @property
    def verifier(self) -> ProductVerifier:
        if self._verifier is None:
            return ProductVerifier(None)
        return self._verifier

    def start(self) -> ProductVerifier:
        if self._verifier is None:
            catalog = load_catalog_cached(self.settings.catalog_path)
            self._verifier = ProductVerifier(
                catalog,
                VerificationPolicy.from_settings(self.settings),
                deadline_seconds=self.settings.verification_deadline_seconds,
            )
            logger.info(f"[Verification] {self.settings.app_name} ready with {len(catalog)} catalog products")
        return self._verifier

    def verify(self, products: List[Any], deadline_seconds: Optional[float] = None) -> Dict[str, Any]:
        return verify_payload(self.verifier, products, deadline_seconds)
