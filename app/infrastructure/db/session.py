"""
Database session management (SQLAlchemy)

PostgreSQL (psycopg 3) in production; SQLite is accepted for local runs and tests,
with foreign keys switched on so ON DELETE CASCADE behaves the same.
"""
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session

from app.config import get_settings


class Base(DeclarativeBase):
    """Declarative base: users, transactions, budgets, category_budgets"""
    pass


_engine: Engine | None = None
_SessionLocal = None


def enable_sqlite_foreign_keys(engine: Engine) -> Engine:
    """SQLite ignores FOREIGN KEY clauses unless the pragma is set per connection."""

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def build_engine(url: str, **kwargs) -> Engine:
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True, **kwargs)
    connect_args = kwargs.pop("connect_args", {})
    connect_args.setdefault("check_same_thread", False)
    return enable_sqlite_foreign_keys(create_engine(url, connect_args=connect_args, **kwargs))


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = build_engine(get_settings().get_sqlalchemy_url())
    return _engine


def get_session_factory():
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(bind=get_engine(), autoflush=False, autocommit=False)
    return _SessionLocal


def get_db() -> Session:
    """
    Dependency для FastAPI: одна сессия на запрос, незакоммиченное откатывается

    Usage:
        @router.get("/api/transactions")
        def list_(db: Session = Depends(get_db)):
            ...
    """
    db = get_session_factory()()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def check_db_connection() -> None:
    """
    Readiness probe for /ready

    Raises:
        sqlalchemy.exc.OperationalError: database unreachable
    """
    with get_engine().connect() as conn:
        conn.execute(text("SELECT 1"))
