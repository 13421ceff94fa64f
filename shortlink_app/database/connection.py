"""
Database engine and session management.

The engine and session factory are created once per process here (the
composition root). Request handlers get a fresh Session through ``get_db``
and hand it to a repository, so nothing below this module owns a connection.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from shortlink_app.config import settings

connect_args = {}
if settings.database_url.startswith("sqlite"):
    # SQLite connections are shared across FastAPI's threadpool
    connect_args = {"check_same_thread": False}

engine = create_engine(settings.database_url, connect_args=connect_args)
# Inserted mappings stay loaded after commit; increment_clicks re-reads explicitly
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
Base = declarative_base()


def get_db():
    """Yield a database session and always close it afterwards"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """
    Create the ``urls`` table (with its unique index on short_code) if missing.

    Args:
        bind: Engine to create tables on (defaults to the app engine)
    """
    # Import models so they're registered with Base before create_all
    from shortlink_app.models import Mapping  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
