"""
Centralised settings loader.

Values come from the environment (or a local `.env`); anything the
intelligence engine reads is mapped onto `IntelligenceConfig` once via
`core.intelligence_config.config_from_settings`.
"""

from __future__ import annotations
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime / DB / auth ────────────────────────────────────────
    env_name: str = "local"
    database_url: str = "sqlite+aiosqlite:///./nutrition.db"
    jwt_secret: str = "changeme"
    jwt_ttl_minutes: int = 60
    log_level: str = "INFO"

    # ─── intelligence knobs (rest lives in IntelligenceConfig) ──────
    intent_ttl_minutes: int = Field(10, gt=0)
    default_max_options: int = Field(2, ge=2, le=3)
    breakfast_until_hour: int = Field(10, ge=0, le=24)
    lunch_until_hour: int = Field(14, ge=0, le=24)
    snack_until_hour: int = Field(17, ge=0, le=24)

    # allow other teammates’ env-vars without crashing
    model_config = SettingsConfigDict(extra="ignore", env_file=".env", env_file_encoding="utf-8")


# ------------------------------------------------------------------ #
#  Cached singleton accessor
# ------------------------------------------------------------------ #
@lru_cache
def _cached() -> _Settings:  # pragma: no cover
    return _Settings()  # type: ignore[call-arg]


settings: _Settings = _cached()
