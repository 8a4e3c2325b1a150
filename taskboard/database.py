from sqlmodel import SQLModel, create_engine
from sqlalchemy import event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from contextlib import contextmanager

from .config import DATABASE_URL

# Import all models to ensure they are registered with SQLModel metadata
from .models import Project, Tag, Task, TaskTagLink, User, Workspace  # noqa: F401

FOREIGN_KEY_VIOLATION = "23503"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url: str, **kwargs):
    """Build an engine for ``url``.

    SQLite connections get foreign key enforcement switched on, since
    referential errors are how missing projects are detected.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = create_engine(url, echo=False, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    # Postgres: disable pooling for serverless and enable pre-ping
    kwargs.setdefault("poolclass", NullPool)
    return create_engine(url, echo=False, pool_pre_ping=True, **kwargs)


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    if getattr(orig, "sqlstate", None) == FOREIGN_KEY_VIOLATION:
        return True
    if getattr(orig, "pgcode", None) == FOREIGN_KEY_VIOLATION:
        return True
    return "foreign key" in str(orig or exc).lower()


engine = create_db_engine(DATABASE_URL)

SessionLocal = sessionmaker(autoflush=False, bind=engine)

def get_db():
    """Dependency to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@contextmanager
def get_session():
    """Get a database session (context manager style).

    This is a convenience function for use outside of FastAPI dependencies.
    Usage:
        with get_session() as session:
            # do something with session
    """
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

def create_tables(bind=None):
    """Create all database tables."""
    SQLModel.metadata.create_all(bind=bind or engine)
