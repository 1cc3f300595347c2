from __future__ import annotations
import contextlib
from typing import Iterator

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from core.config import settings
from core.errors import StoreError
from db.base import Base

_engine: Engine | None = None
SessionLocal: sessionmaker | None = None


def configure_engine(database_url: str | None = None) -> Engine:
    """(Re)create the engine and session factory for ``database_url``."""
    global _engine, SessionLocal

    url = database_url or settings.database_url
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    if _engine is not None:
        _engine.dispose()
    _engine = create_engine(url, future=True, pool_pre_ping=True, connect_args=connect_args)
    SessionLocal = sessionmaker(bind=_engine, autoflush=False, expire_on_commit=False, future=True)
    return _engine


def get_sessionmaker() -> sessionmaker:
    if SessionLocal is None:
        configure_engine()
    return SessionLocal


def init_db() -> None:
    """Create the reminder table if it does not exist yet."""
    from db.models import reminder as _reminder  # noqa: F401

    engine = configure_engine() if _engine is None else _engine
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as ex:
        raise StoreError(f"Database initialisation failed: {ex}") from ex
    logger.info("Database initialised: {}", engine.url.render_as_string(hide_password=True))


@contextlib.contextmanager
def get_session() -> Iterator[Session]:
    """Session scope: commit on success, roll back on error.

    Any SQLAlchemy failure is re-raised as ``StoreError``.
    """
    session = get_sessionmaker()()
    try:
        yield session
        session.commit()
    except SQLAlchemyError as ex:
        session.rollback()
        raise StoreError(str(ex)) from ex
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
