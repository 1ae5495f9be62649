"""
Reference catalog of the vendor's own products.

The catalog is loaded once, explicitly, and is read-only afterwards. It can be
shared between concurrent batches without locking.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from services.product_verification.errors import CatalogLoadError
from services.product_verification.models import CatalogEntry
from services.product_verification.text_utils import normalize_product_text, significant_tokens

logger = logging.getLogger(__name__)

NAME_KEYS = ("nom_complet", "nom", "name", "display_name")
CATEGORY_KEYS = ("category", "categorie", "gamme")
BRAND_FAMILY_KEYS = ("brand_family", "famille")
WRAPPER_KEYS = ("produits", "products")

CatalogSource = Union[str, Path, Mapping, Iterable]


class CatalogIndex:
    """Ordered catalog entries plus exact-name and token lookups."""

    def __init__(self, entries: Sequence[CatalogEntry]):
        self._entries: tuple[CatalogEntry, ...] = tuple(entries)
        self._exact: dict[str, tuple[CatalogEntry, ...]] = _group_by_normalized_name(self._entries)
        self._tokens: dict[str, tuple[CatalogEntry, ...]] = _group_by_token(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    @property
    def entries(self) -> tuple[CatalogEntry, ...]:
        return self._entries

    @property
    def token_count(self) -> int:
        return len(self._tokens)

    def lookup_exact(self, normalized_text: str) -> list[CatalogEntry]:
        return list(self._exact.get(normalized_text or "", ()))

    def entries_for_token(self, token: str) -> tuple[CatalogEntry, ...]:
        return self._tokens.get(token, ())

    def candidates(self, raw_text: str, min_candidates: int = 10) -> list[CatalogEntry]:
        """Entries sharing a significant token with the text, or the whole catalog when too few."""
        positions: set[int] = set()
        for token in significant_tokens(raw_text):
            positions.update(e.position for e in self._tokens.get(token, ()))
        if len(positions) < min_candidates:
            return list(self._entries)
        return [self._entries[p] for p in sorted(positions)]


def load_catalog(source: CatalogSource) -> CatalogIndex:
    """Build the catalog index from a JSON file path, a wrapper mapping or an iterable of records."""
    records = _records_from_source(source)
    entries = _entries_from_records(records)
    if not entries:
        raise CatalogLoadError(f"Catalog source contains no usable product names: {_describe(source)}")
    index = CatalogIndex(entries)
    logger.info(f"[Catalog] Loaded {len(index)} products ({index.token_count} indexed tokens)")
    return index


@lru_cache(maxsize=4)
def load_catalog_cached(path: str) -> CatalogIndex:
    return load_catalog(Path(path))


def load_catalog_from_session(session) -> CatalogIndex:
    """Build the catalog index from the ``catalog_products`` table."""
    from models.domain import CatalogProduct

    rows = session.query(CatalogProduct).order_by(CatalogProduct.id).all()
    records = [
        {"name": r.display_name, "category": r.category, "brand_family": r.brand_family}
        for r in rows
    ]
    if not records:
        raise CatalogLoadError("Catalog table catalog_products is empty")
    return load_catalog(records)


def _records_from_source(source: CatalogSource) -> list[Any]:
    if source is None:
        raise CatalogLoadError("No catalog source given")
    if isinstance(source, (str, Path)):
        return _unwrap(_read_json(Path(source)))
    if isinstance(source, Mapping):
        return _unwrap(source)
    if isinstance(source, Iterable):
        return list(source)
    raise CatalogLoadError(f"Unsupported catalog source type: {type(source).__name__}")


def _read_json(path: Path) -> Any:
    try:
        with path.open(encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError as exc:
        raise CatalogLoadError(f"Catalog file not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise CatalogLoadError(f"Catalog file unreadable: {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogLoadError(f"Catalog file is not valid JSON: {path}: {exc}") from exc


def _unwrap(data: Any) -> list[Any]:
    if isinstance(data, Mapping):
        for key in WRAPPER_KEYS:
            if isinstance(data.get(key), list):
                return data[key]
        raise CatalogLoadError(f"Catalog object has none of the expected keys {WRAPPER_KEYS}")
    if isinstance(data, list):
        return data
    raise CatalogLoadError(f"Catalog must be a list or an object, got {type(data).__name__}")


def _entries_from_records(records: Iterable[Any]) -> list[CatalogEntry]:
    entries: list[CatalogEntry] = []
    skipped = 0
    for record in records:
        entry = _entry_from_record(record, len(entries))
        if entry is None:
            skipped += 1
            continue
        entries.append(entry)
    if skipped:
        logger.debug(f"[Catalog] Skipped {skipped} records without a usable name")
    return entries


def _entry_from_record(record: Any, position: int) -> Optional[CatalogEntry]:
    if isinstance(record, str):
        name, category, family = record, None, None
    elif isinstance(record, Mapping):
        name = _first_value(record, NAME_KEYS)
        category = _first_value(record, CATEGORY_KEYS)
        family = _first_value(record, BRAND_FAMILY_KEYS)
    else:
        return None
    name = (name or "").strip()
    normalized = normalize_product_text(name)
    if not normalized:
        return None
    return CatalogEntry(name, normalized, position, category, family)


def _first_value(record: Mapping, keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        value = record.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _group_by_normalized_name(entries: Sequence[CatalogEntry]) -> dict[str, tuple[CatalogEntry, ...]]:
    grouped: dict[str, list[CatalogEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.normalized_name, []).append(entry)
    return {k: tuple(v) for k, v in grouped.items()}


def _group_by_token(entries: Sequence[CatalogEntry]) -> dict[str, tuple[CatalogEntry, ...]]:
    grouped: dict[str, list[CatalogEntry]] = {}
    for entry in entries:
        for token in significant_tokens(entry.normalized_name):
            grouped.setdefault(token, []).append(entry)
    return {k: tuple(v) for k, v in grouped.items()}


def _describe(source: CatalogSource) -> str:
    if isinstance(source, (str, Path)):
        return str(source)
    return type(source).__name__
