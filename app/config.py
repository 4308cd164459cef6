"""Pydantic Settings loaded from environment."""
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SEED_PATH = Path(__file__).parent / "data" / "sightings.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    cors_origins: str = "http://localhost:3000,http://localhost:5173"
    seed_on_startup: bool = True
    seed_data_path: str = str(DEFAULT_SEED_PATH)
    store_snapshot_path: str = ""  # JSON snapshot written after every store write; empty = memory only
    default_page_size: int = 20
    max_page_size: int = 500
    enable_internal_routes: bool = True
    audit_log_size: int = 10_000

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
