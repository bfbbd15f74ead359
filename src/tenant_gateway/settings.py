"""
tenant_gateway.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., session signing secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tenant_gateway import __version__


class Settings(BaseSettings):
    """
    Enterprise pattern:
    - Strict env-driven configuration
    - Defaults safe for local dev
    - Single settings object injected across layers
    """

    model_config = SettingsConfigDict(env_prefix="TGW_", case_sensitive=False)

    # "prod" disables the single-site fallback and the explain cookie.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "tenant-gateway"
    log_level: str = "INFO"
    version: str = __version__

    api_host: str = "0.0.0.0"
    api_port: int = 8081

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./tenant_gateway.db"

    # Sites are reachable at their cname or at "<code>.<domain>".
    domain: str = "localhost"

    # Paths
    status_path: str = "/status"
    signin_path: str = "/user/new"
    site_exempt_paths: tuple[str, ...] = ("/healthz", "/readyz", "/docs", "/openapi.json")

    # Cookies
    flash_cookie: str = "flash"
    explain_cookie: str = "debug-explain"
    session_cookie: str = "key"

    # Session tokens
    session_alg: str = "HS256"
    session_issuer: str = "tenant-gateway"
    session_secret: str = Field(default="dev-secret-change-me", repr=False)
    session_ttl_minutes: int = 60 * 24 * 30

    # Request deadlines, in seconds.
    timeout_admin_s: float = 120.0
    timeout_root_s: float = 11.0
    timeout_default_s: float = 3.0

    # Background persistence cycle.
    persist_interval_s: float = 10.0

    @property
    def prod(self) -> bool:
        return self.env == "prod"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Tests construct `Settings(...)` directly and hand it to `create_app`; only the
# uvicorn entrypoint relies on the cached instance.
