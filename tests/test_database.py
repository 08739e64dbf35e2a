import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

import database


class _RecordingSession:
    def __init__(self) -> None:
        self.rolled_back = False
        self.closed = False

    def rollback(self) -> None:
        self.rolled_back = True

    def close(self) -> None:
        self.closed = True


def test_get_db_rolls_back_and_closes_on_storage_error(monkeypatch) -> None:
    session = _RecordingSession()
    monkeypatch.setattr(database, "SessionLocal", lambda: session)

    dependency = database.get_db()
    assert next(dependency) is session
    with pytest.raises(OperationalError):
        dependency.throw(OperationalError("INSERT", {}, Exception("disk full")))

    assert session.rolled_back
    assert session.closed


def test_get_db_closes_without_rollback_on_success(monkeypatch) -> None:
    session = _RecordingSession()
    monkeypatch.setattr(database, "SessionLocal", lambda: session)

    dependency = database.get_db()
    next(dependency)
    with pytest.raises(StopIteration):
        next(dependency)

    assert not session.rolled_back
    assert session.closed


def test_sqlite_engine_uses_wal_journal(tmp_path) -> None:
    eng = database._create_engine(f"sqlite:///{tmp_path / 'finance.db'}")
    try:
        with eng.connect() as conn:
            mode = conn.execute(text("PRAGMA journal_mode")).scalar_one()
    finally:
        eng.dispose()
    assert mode == "wal"
