# infra/db/base.py
from __future__ import annotations
import logging
import os
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from infra.path import default_db_path

logger = logging.getLogger(__name__)

Base = declarative_base()


def default_db_url() -> str:
    override = (os.getenv("SP_DB_URL") or "").strip()
    if override:
        return override
    db_path: Path = default_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{db_path.as_posix()}"


db_url = default_db_url()
logger.info("Using database at: %s", db_url)

engine = create_engine(
    db_url,
    echo=False,
    future=True,
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def init_db() -> None:
    # imported for its side effect of registering the ORM tables
    import infra.db.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
