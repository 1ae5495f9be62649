from models.database import Base, SessionLocal, init_db
from models.domain import CatalogProduct

__all__ = [
    "Base",
    "SessionLocal",
    "init_db",
    "CatalogProduct",
]
