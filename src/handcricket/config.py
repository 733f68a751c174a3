"""Application settings via pydantic-settings. Loads from environment and .env file."""

from __future__ import annotations

import secrets

from pydantic import model_validator
from pydantic_settings import BaseSettings

# Temporary-storage lifetime of a session: 518_400 ledgers at ~5s each.
DEFAULT_GAME_TTL_SECONDS = 518_400 * 5

_DEFAULT_PURGE_CRON = "*/15 * * * *"


class Settings(BaseSettings):
    """Hand cricket service configuration.

    All values can be overridden via environment variables or .env file.
    """

    # Database
    database_url: str = "sqlite+aiosqlite:///handcricket.db"

    # Environment
    handcricket_env: str = "development"

    # Engine identity and instance configuration
    handcricket_contract_id: str = "hand-cricket"
    handcricket_admin_id: str = "admin"
    handcricket_hub_id: str = "game-hub"

    # Session lifetime
    handcricket_game_ttl_seconds: int = DEFAULT_GAME_TTL_SECONDS
    handcricket_purge_cron: str = _DEFAULT_PURGE_CRON
    handcricket_purge_enabled: bool = True

    # Authorization grants
    grant_secret_key: str = ""
    grant_max_age_seconds: int = 24 * 60 * 60

    # Logging
    handcricket_log_level: str = "INFO"

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}

    @model_validator(mode="after")
    def _ensure_grant_secret(self) -> Settings:
        """Auto-generate grant secret in dev; reject missing secret in production."""
        if not self.grant_secret_key:
            if self.handcricket_env == "production":
                msg = (
                    "GRANT_SECRET_KEY must be set in production. "
                    "Generate one with: python -c "
                    '"import secrets; print(secrets.token_urlsafe(32))"'
                )
                raise ValueError(msg)
            self.grant_secret_key = secrets.token_urlsafe(32)
        return self

    @model_validator(mode="after")
    def _check_ttl(self) -> Settings:
        if self.handcricket_game_ttl_seconds <= 0:
            raise ValueError("HANDCRICKET_GAME_TTL_SECONDS must be positive")
        return self
