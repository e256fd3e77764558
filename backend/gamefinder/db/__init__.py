from gamefinder.db.base import Base
from gamefinder.db.session import init_db, make_engine, make_session_factory
from gamefinder.db.tables import ALL_TABLE_NAMES

__all__ = ["Base", "init_db", "make_engine", "make_session_factory", "ALL_TABLE_NAMES"]
