import pytest
from pydantic import ValidationError

from gamefinder.config import Settings
from gamefinder.store import MemoryStore, SqlStore, build_store


def test_defaults(monkeypatch):
    monkeypatch.delenv("STORE_BACKEND", raising=False)
    monkeypatch.delenv("CONTEXT_WINDOW", raising=False)
    s = Settings(_env_file=None)
    assert s.store_backend == "memory"
    assert s.context_window == 10
    assert s.api_prefix == "/api"


def test_backend_is_normalized_and_checked():
    assert Settings(_env_file=None, store_backend=" SQL ").store_backend == "sql"
    with pytest.raises(ValidationError):
        Settings(_env_file=None, store_backend="redis")


def test_build_store_picks_backend(tmp_path):
    assert isinstance(build_store(Settings(_env_file=None, store_backend="memory")), MemoryStore)

    store = build_store(
        Settings(_env_file=None, store_backend="sql", database_url=f"sqlite:///{tmp_path / 'app.db'}")
    )
    assert isinstance(store, SqlStore)
    session = store.create_session("persisted")
    assert store.get_session(session.id).title == "persisted"
