from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
import importlib.util
from flightledger.core.config import settings


def normalize_database_url(url: str) -> str:
    """Pick the psycopg (v3) driver for bare postgres URLs when psycopg2 is absent.

    SQLAlchemy loads psycopg2 for a plain 'postgresql://' (or legacy 'postgres://')
    URL; only 'psycopg' v3 is a declared dependency.
    """
    if not url.startswith(("postgres://", "postgresql://")) or "+psycopg" in url:
        return url
    if importlib.util.find_spec("psycopg2") is not None:
        return url
    # Normalize legacy prefix 'postgres://' -> 'postgresql://'
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url.replace("postgresql://", "postgresql+psycopg://", 1)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE / SET NULL unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, **kwargs) -> Engine:
    url = normalize_database_url(url)
    if url.startswith("sqlite"):
        # The API serves requests from a thread pool
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        sqlite_engine = create_engine(url, **kwargs)
        event.listen(sqlite_engine, "connect", _enable_sqlite_foreign_keys)
        return sqlite_engine
    return create_engine(url, pool_pre_ping=True, pool_timeout=settings.db_pool_timeout, **kwargs)


SQLALCHEMY_DATABASE_URL = normalize_database_url(settings.database_url)
engine = build_engine(SQLALCHEMY_DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
