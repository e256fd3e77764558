"""
Application settings (Pydantic Settings).
"""
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

from gamefinder.core.constants import DEFAULT_CONTEXT_WINDOW

# .env next to backend/ (parent of gamefinder/)
_env_path = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    # "memory" keeps everything for the process lifetime; "sql" uses DATABASE_URL
    store_backend: str = "memory"
    database_url: str = "sqlite:///./gamefinder.db"
    google_api_key: str = ""  # GOOGLE_API_KEY in .env
    openai_api_key: str = ""  # OPENAI_API_KEY in .env
    ai_model: str = "google:gemini-2.5-flash"
    title_model: str = ""  # falls back to ai_model
    context_window: int = DEFAULT_CONTEXT_WINDOW
    api_prefix: str = "/api"
    cors_origins: str = ""  # comma-separated, added to the local dev origins
    log_level: str = "INFO"

    class Config:
        env_file = _env_path
        extra = "ignore"

    @field_validator("store_backend", mode="after")
    @classmethod
    def normalize_backend(cls, v: str) -> str:
        v = (v or "memory").strip().lower()
        if v not in ("memory", "sql"):
            raise ValueError(f"STORE_BACKEND must be 'memory' or 'sql', got {v!r}")
        return v

    @field_validator("google_api_key", "openai_api_key", mode="after")
    @classmethod
    def strip_keys(cls, v: str) -> str:
        return (v or "").strip()


settings = Settings()
