from contextlib import contextmanager
from pathlib import Path
from typing import Callable, ContextManager
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..models import Base


SessionScope = Callable[[], ContextManager[Session]]


def create_db_engine(database_url: str) -> Engine:
    """Build an engine; sqlite files get their parent directory created."""
    if database_url.startswith("sqlite"):
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection so every session sees the same in-memory db
            engine = create_engine(
                database_url,
                future=True,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        else:
            db_path = database_url.split("sqlite:///")[-1]
            Path(db_path).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)
            engine = create_engine(
                database_url,
                future=True,
                connect_args={"check_same_thread": False, "timeout": 30},
            )
            event.listen(engine, "connect", _take_over_sqlite_transactions)
            event.listen(engine, "begin", _begin_immediate)
        return engine
    return create_engine(database_url, future=True, pool_pre_ping=True)


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _take_over_sqlite_transactions(dbapi_connection, record) -> None:
    # pysqlite's implicit BEGIN is switched off; _begin_immediate emits our own
    dbapi_connection.isolation_level = None
    _enable_sqlite_foreign_keys(dbapi_connection, record)


def _begin_immediate(conn) -> None:
    # take the write lock up front: two deferred readers upgrading at once deadlock
    conn.exec_driver_sql("BEGIN IMMEDIATE")


def make_session_scope(engine: Engine) -> SessionScope:
    """Return a context manager factory bound to engine: commit on success, rollback on error."""
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)

    @contextmanager
    def session_scope():
        session = factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return session_scope


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(engine)
