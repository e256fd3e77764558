"""
Database engine and session factory.
"""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from gamefinder.db.base import Base


def make_engine(database_url: str) -> Engine:
    """Engine for DATABASE_URL. SQLite needs check_same_thread off for FastAPI's threadpool."""
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(
        database_url,
        pool_size=8,
        max_overflow=10,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_timeout=30,
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create missing tables. Alembic owns the schema in production; this covers local SQLite."""
    # Registers the models on Base.metadata.
    from gamefinder import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
