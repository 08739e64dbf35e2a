import logging
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from config import get_settings

logger = logging.getLogger(__name__)


def _create_engine(database_url: str) -> Engine:
    connect_args: dict[str, object] = {}
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        connect_args["check_same_thread"] = False

    eng = create_engine(database_url, connect_args=connect_args)
    if is_sqlite:
        event.listen(eng, "connect", _enable_sqlite_pragmas)
    logger.info(f"database_engine: url={eng.url.render_as_string(hide_password=True)}")
    return eng


def _enable_sqlite_pragmas(dbapi_conn, _record):
    # the schema has no foreign keys, so WAL is the only pragma
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL;")
    cursor.close()


engine = _create_engine(get_settings().database_url)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


def get_db() -> Iterator[Session]:
    """Request-scoped session; a failed write is rolled back before the session closes."""
    db = SessionLocal()
    try:
        yield db
    except SQLAlchemyError:
        db.rollback()
        raise
    finally:
        db.close()
