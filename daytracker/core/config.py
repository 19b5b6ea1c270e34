"""Human-friendly configuration loader.

The ``AppSettings`` class centralises every environment variable we rely on.

*What:* Which settings exist and what do they control?
*When:* They are read once, the first time ``get_settings`` is called.
*Why:* Centralising configuration prevents magic strings scattered all over the
codebase.
*How:* ``pydantic-settings`` reads the process environment and ``.env`` files,
falling back to defaults that let the app boot in development.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"


class AppSettings(BaseSettings):
    """Environment-driven application configuration."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "DayTracker"
    APP_ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    TZ: str = "UTC"

    DATA_DIR: Path = Field(default=_DEFAULT_DATA_DIR)
    DB_URL: str = Field(
        default=f"sqlite:///{_DEFAULT_DATA_DIR / 'daytracker.db'}",
        validation_alias=AliasChoices("DB_URL", "DATABASE_URL"),
    )

    # ---- Session cookie
    SESSION_COOKIE_NAME: str = "session_id"
    SESSION_TTL_DAYS: int = 7
    # Turn on once the app is always reached over HTTPS at the edge.
    COOKIE_SECURE: bool = False

    # bcrypt work factor; 10 keeps a hash in the tens of milliseconds.
    BCRYPT_ROUNDS: int = Field(default=10, ge=4, le=31)

    # Comma separated list of origins allowed to call the API with cookies.
    ALLOWED_ORIGINS: str = ""

    HOST: str = "0.0.0.0"
    PORT: int = 8089

    @property
    def session_max_age(self) -> int:
        return self.SESSION_TTL_DAYS * 24 * 60 * 60

    @property
    def is_sqlite(self) -> bool:
        return self.DB_URL.startswith("sqlite")

    @property
    def allowed_origins(self) -> list[str]:
        return [item.strip() for item in self.ALLOWED_ORIGINS.split(",") if item.strip()]


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    settings = AppSettings()
    if settings.DB_URL.startswith("sqlite:///") and str(settings.DATA_DIR) in settings.DB_URL:
        settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    return settings
