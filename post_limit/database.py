"""
Database connection for the host's form and post tables.

Defaults to a SQLite database at ~/.post-limit/site.db; point
POST_LIMIT_DATABASE_URL (or database_url in config.json) at the host's
database in production. The time limit check only ever reads there;
tables are created only in the default local file.
"""
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from post_limit.config import get_data_dir, load_config
from post_limit.models import Base

_engine = None
_SessionLocal = None


def _default_db_url() -> str:
    data_dir = get_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{data_dir / 'site.db'}"


def get_engine(db_url: Optional[str] = None):
    """Get SQLAlchemy engine. Accepts optional URL override for testing."""
    global _engine

    if _engine is not None:
        return _engine

    if db_url is None:
        db_url = load_config().database_url or _default_db_url()

    if db_url.startswith("sqlite"):
        _engine = create_engine(
            db_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False,
        )
    else:
        _engine = create_engine(db_url, pool_pre_ping=True, echo=False)

    return _engine


def get_session_factory():
    """Get session factory."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, bind=get_engine()
        )
    return _SessionLocal


def get_session() -> Session:
    """Get a new database session."""
    return get_session_factory()()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Transactional scope: commits on success, rolls back on exception."""
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine=None):
    """Create all tables. Safe to call multiple times."""
    eng = engine or get_engine()
    Base.metadata.create_all(bind=eng)


def ensure_local_db(config=None):
    """
    Create tables in the default local SQLite file only.

    A configured database_url points at the host's own schema, which is
    never altered.
    """
    config = config or load_config()
    if config.database_url:
        return
    init_db()


def reset_engine():
    """Reset engine and session factory (for testing)."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
        _engine = None
    _SessionLocal = None
