import pytest
from sqlalchemy import text

import db.session as db_session
from core.errors import StoreError


def test_get_session_configures_engine_on_first_use(tmp_path, monkeypatch):
    monkeypatch.setattr(db_session.settings, "database_url", f"sqlite+pysqlite:///{tmp_path / 'lazy.db'}")
    monkeypatch.setattr(db_session, "_engine", None)
    monkeypatch.setattr(db_session, "SessionLocal", None)

    with db_session.get_session() as session:
        assert session.execute(text("select 1")).scalar() == 1

    assert db_session.SessionLocal is not None
    assert str(db_session._engine.url).endswith("lazy.db")
    db_session._engine.dispose()


def test_database_errors_surface_as_store_error():
    with pytest.raises(StoreError):
        with db_session.get_session() as session:
            session.execute(text("select * from no_such_table"))
