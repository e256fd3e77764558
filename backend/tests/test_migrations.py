from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from gamefinder.db.tables import ALL_TABLE_NAMES

BACKEND_DIR = Path(__file__).resolve().parents[1]


def _config(url: str) -> Config:
    # No ini file: keeps alembic from reconfiguring test logging.
    cfg = Config()
    cfg.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    cfg.set_main_option("sqlalchemy.url", url)
    return cfg


def test_upgrade_creates_chat_tables_and_downgrade_drops_them(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    cfg = _config(url)

    command.upgrade(cfg, "head")
    tables = set(inspect(create_engine(url)).get_table_names())
    assert set(ALL_TABLE_NAMES) <= tables

    columns = {c["name"] for c in inspect(create_engine(url)).get_columns("chat_messages")}
    assert {"id", "session_id", "role", "content", "metadata", "created_at"} <= columns

    command.downgrade(cfg, "base")
    assert not set(ALL_TABLE_NAMES) & set(inspect(create_engine(url)).get_table_names())
