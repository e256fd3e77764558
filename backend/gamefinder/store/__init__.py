"""Chat stores: pick a backend from settings with build_store()."""
import logging

from gamefinder.config import Settings
from gamefinder.store.base import ChatStore
from gamefinder.store.memory import MemoryStore
from gamefinder.store.sql import SqlStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> ChatStore:
    """Memory store by default; STORE_BACKEND=sql uses DATABASE_URL and creates missing tables."""
    if settings.store_backend == "sql":
        from gamefinder.db import init_db, make_engine, make_session_factory

        engine = make_engine(settings.database_url)
        init_db(engine)
        logger.info("Using SQL chat store (%s)", engine.url.render_as_string(hide_password=True))
        return SqlStore(make_session_factory(engine))
    logger.info("Using in-memory chat store")
    return MemoryStore()


__all__ = ["ChatStore", "MemoryStore", "SqlStore", "build_store"]
