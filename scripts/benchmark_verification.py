#!/usr/bin/env python3
"""Benchmark batch verification with and without candidate pruning."""

import argparse
import json
import logging
import sys
import time
from dataclasses import replace
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from config import settings
from services.product_verification import (
    Guess,
    LineItem,
    ProductVerifier,
    VerificationPolicy,
    load_catalog,
)

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


def load_items(path: str) -> list[LineItem]:
    with open(path, encoding="utf-8") as handle:
        data = json.load(handle)
    rows = data.get("products", []) if isinstance(data, dict) else data
    return [
        LineItem(
            designation=row.get("designation") or row.get("name"),
            total_price=float(row.get("totalPrice") or 0),
            guess=Guess.COMPETITOR if row.get("isCompetitor") else Guess.OWN,
        )
        for row in rows
    ]


def sample_items(catalog, count: int) -> list[LineItem]:
    """Catalog names truncated to their first three words, guessed competitor."""
    entries = list(catalog)[:count]
    return [
        LineItem(" ".join(e.display_name.split()[:3]), 100.0, Guess.COMPETITOR)
        for e in entries
    ]


def run(verifier: ProductVerifier, items: list[LineItem]):
    start = time.perf_counter()
    result = verifier.verify_batch(items)
    return result, time.perf_counter() - start


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--catalog", default=settings.catalog_path)
    parser.add_argument("--items", help="JSON file of line items (defaults to a sample drawn from the catalog)")
    parser.add_argument("--sample-size", type=int, default=50)
    args = parser.parse_args()

    catalog = load_catalog(args.catalog)
    items = load_items(args.items) if args.items else sample_items(catalog, args.sample_size)
    base = VerificationPolicy.from_settings(settings)

    timings = {}
    decisions = {}
    for label, pruning in (("pruned", True), ("full_scan", False)):
        verifier = ProductVerifier(catalog, replace(base, enable_candidate_pruning=pruning))
        result, elapsed = run(verifier, items)
        timings[label] = elapsed
        decisions[label] = [(o.outcome, o.item.classification) for o in result.outcomes]
        logger.info(f"{label:10s}: {elapsed:6.2f}s, {result.summary.reclassified_count} reclassified")

    agree = decisions["pruned"] == decisions["full_scan"]
    logger.info("=" * 50)
    logger.info(f"{len(items)} items against {len(catalog)} catalog products")
    if timings["pruned"] > 0:
        logger.info(f"Speedup: {timings['full_scan'] / timings['pruned']:.1f}x")
    logger.info(f"Decisions agree: {agree}")
    if not agree:
        sys.exit(1)


if __name__ == "__main__":
    main()
