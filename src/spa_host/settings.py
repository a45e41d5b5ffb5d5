"""
spa_host.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide env-driven settings for the server, the API layer and asset serving.
- Resolve the deployment mode once so no other module reads the environment.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

import enum
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PORT = 5000


class DeploymentMode(str, enum.Enum):
    PRODUCTION = "production"
    DEVELOPMENT = "development"


class Settings(BaseSettings):
    """
    Field names double as environment variable names (`NODE_ENV`, `PORT`, ...),
    matched case-insensitively.
    """

    model_config = SettingsConfigDict(case_sensitive=False)

    # "production" selects static asset serving; anything else selects the dev bridge.
    node_env: str = "development"
    service_name: str = "spa-host"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT

    # Requests under this prefix are API calls (access-logged, never proxied).
    api_prefix: str = "/api"
    body_limit_bytes: int = 100 * 1024

    # Production: pre-built client bundle. Development: frontend dev server.
    static_dir: Path = Path("client/dist")
    dev_server_url: str = "http://localhost:5173"

    @field_validator("port", mode="before")
    @classmethod
    def _fallback_port(cls, value: Any) -> int:
        # Absent, non-numeric or out-of-range values fall back to the default port.
        # Numeric strings such as "8080.0" or "1e3" are accepted when integral.
        try:
            number = float(value)
        except (TypeError, ValueError):
            return DEFAULT_PORT
        if not number.is_integer() or not 0 < number < 65536:
            return DEFAULT_PORT
        return int(number)

    @property
    def mode(self) -> DeploymentMode:
        if self.node_env == DeploymentMode.PRODUCTION.value:
            return DeploymentMode.PRODUCTION
        return DeploymentMode.DEVELOPMENT


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# The deployment mode is derived here and passed along inside Settings; the
# bootstrap sequencer branches on `settings.mode` exactly once.
