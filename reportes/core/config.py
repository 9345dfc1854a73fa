"""
Centralised application settings loaded from environment / .env file.
"""
from __future__ import annotations

from pathlib import Path
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load .env from project root (two levels up from this file)
_ENV_PATH = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="REPORTES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── History API ──────────────────────────────────────
    api_base_url: str = "http://localhost:5001"
    history_path: str = "/api/registros"
    history_limit: int = 100
    request_timeout: float = 10.0

    # ── Persisted credentials ────────────────────────────
    storage_path: Path = Path.home() / ".reportes" / "local_storage.json"
    token_key: str = "token"

    # ── Presentation ─────────────────────────────────────
    landmark_tag: str = "unesco"
    locale: str = "es_ES"
    display_timezone: str = "UTC"
    dashboard_url: str = "/dashboard"

    # ── App ──────────────────────────────────────────────
    export_dir: Path = Path(".")
    log_level: str = "INFO"
    log_stream: str = "stderr"  # stderr | stdout

    @property
    def history_url(self) -> str:
        return f"{self.api_base_url.rstrip('/')}{self.history_path}"


@lru_cache
def get_settings() -> Settings:
    return Settings()
