# Settings for the DHIS2 connector, read from DHIS2CONNECT_* env vars or .env.
# Created: 2026-10-19

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Connector configuration.

    Defaults point at the public DHIS2 demo server with its demo account.
    """

    model_config = SettingsConfigDict(
        env_prefix="DHIS2CONNECT_",
        env_file=".env",
        extra="ignore",
    )

    base_url: str = Field(default="https://play.dhis2.org/2.37.3")
    username: str = Field(default="admin")
    password: SecretStr = Field(default=SecretStr("district"))

    # OAuth client this application registers itself as
    client_id: str = Field(default="oAuthCid")
    client_name: str = Field(default="Metadata link script")

    request_timeout: float = Field(default=15.0, gt=0)
    log_level: str = Field(default="INFO")

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings. Call ``get_settings.cache_clear()`` to reload."""
    return Settings()
