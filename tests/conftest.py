"""Shared test fixtures."""

import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool


def ensure_src_on_path() -> None:
    root = Path(__file__).resolve().parent.parent
    src_path = root / "src"
    if str(src_path) not in sys.path:
        sys.path.append(str(src_path))


ensure_src_on_path()

from models import Base

CATALOG_NAMES = [
    "ELASTOPHENE FLAM 25 AR - GRIS - 10 m x 1 m",
    "ELASTOPHENE FLAM 180 AR - NOIR - 8 m x 1 m",
    "SOPRALENE FLAM 180 AR - ARDOISE GRISE - 5 m x 1 m",
    "SOPRAFIX HP - 8 m x 1 m",
    "SOPRAXPS SL - 120 mm - 1250 x 600",
    "ALSAN 500 RESINE POLYURETHANE - GRIS - 25 kg",
    "ALSAN 770 TX - 15 kg",
    "AQUADERE - 20 L",
    "SOPREMA MAMMOUTH NEODYL - 10 m x 1 m",
    "PAVATEX PAVATHERM 60 mm",
    "COLPHENE BSW H - 20 m x 1 m",
    "FLAGON EP/PV 1.5 mm - GRIS CLAIR - 20 m x 2.10 m",
]


@pytest.fixture(scope="function")
def db_engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    connection = db_engine.connect()
    transaction = connection.begin()
    session = Session(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def catalog_names():
    return list(CATALOG_NAMES)


@pytest.fixture
def catalog(catalog_names):
    from services.product_verification import load_catalog

    return load_catalog(catalog_names)


@pytest.fixture
def verifier(catalog):
    from services.product_verification import ProductVerifier

    return ProductVerifier(catalog)


@pytest.fixture
def catalog_file(tmp_path, catalog_names):
    import json

    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps({"produits": [{"nom_complet": n} for n in catalog_names]}),
        encoding="utf-8",
    )
    return path
