"""Create the catalog_products table used as the SQL catalog source."""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import inspect

from config import settings
from models import Base
from models import database

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


def create_tables(engine=None, reset: bool = False) -> list[str]:
    engine = engine or database.engine
    if reset:
        logger.info("Dropping existing tables")
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    tables = sorted(inspect(engine).get_table_names())
    logger.info(f"Database ready at {engine.url}: {', '.join(tables)}")
    if "catalog_products" in tables:
        logger.info("Load products with scripts/import_catalog.py to use the catalog_products table as catalog source")
    return tables


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the product catalog tables")
    parser.add_argument("--reset", action="store_true", help="Drop existing tables first")
    args = parser.parse_args()
    create_tables(reset=args.reset)


if __name__ == "__main__":
    main()
