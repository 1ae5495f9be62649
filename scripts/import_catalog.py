"""Import a JSON product catalog into the catalog_products table."""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from config import settings
from models import CatalogProduct, SessionLocal, init_db
from services.product_verification import load_catalog

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


def import_catalog(path: str, replace: bool = False) -> int:
    catalog = load_catalog(path)
    init_db()
    session = SessionLocal()
    try:
        if replace:
            deleted = session.query(CatalogProduct).delete()
            logger.info(f"Removed {deleted} existing catalog products")
        for entry in catalog:
            session.add(
                CatalogProduct(
                    display_name=entry.display_name,
                    category=entry.category,
                    brand_family=entry.brand_family,
                )
            )
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
    logger.info(f"Imported {len(catalog)} catalog products from {path}")
    return len(catalog)


def main() -> None:
    parser = argparse.ArgumentParser(description="Import a JSON catalog into the database")
    parser.add_argument("path", nargs="?", default=settings.catalog_path, help="Catalog JSON file")
    parser.add_argument("--replace", action="store_true", help="Delete existing catalog rows first")
    args = parser.parse_args()
    import_catalog(args.path, replace=args.replace)


if __name__ == "__main__":
    main()
