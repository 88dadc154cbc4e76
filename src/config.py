from __future__ import annotations

from functools import cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ARTIFACTS_DIR = PROJECT_ROOT / "artifacts"
DB_FILE = ARTIFACTS_DIR / "prices.db"
SEED_CSV = PROJECT_ROOT / "data" / "prices.csv"


class AppSettings(BaseSettings):
    db_file: Path = DB_FILE
    sql_echo: bool = False
    push_down_selection: bool = True
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="PRICES_", env_file=".env", env_file_encoding="utf-8", extra="ignore")


@cache
def config() -> AppSettings:
    return AppSettings()
