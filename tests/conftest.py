# tests/conftest.py
from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from infra.db.base import Base
import infra.db.models  # noqa: F401
from infra.services import build_service_graph


TODAY = date(2025, 6, 2)


@pytest.fixture
def session():
    # separate in-memory DB for tests
    engine = create_engine("sqlite:///:memory:", future=True)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def services(session, monkeypatch):
    monkeypatch.delenv("SP_SCHEDULE_CYCLE_POLICY", raising=False)
    monkeypatch.delenv("SP_ROLLUP_MAX_DEPTH", raising=False)
    return build_service_graph(session, today=TODAY).as_dict()
