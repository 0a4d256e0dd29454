"""
Global configuration for banks-closed.

All values are read from environment variables (prefixed BANKS_) once at
startup. Defaults are safe for local development; override in production via
.env or the deploy environment.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BANKS_", env_file=".env", extra="ignore")

    environment: str = "development"     # "development" | "production"

    # ── HTTP server ───────────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 3000

    # ── Geolocation provider ──────────────────────────────────────────────
    geoip_base_url: str = "https://geoip.maxmind.com"
    geoip_account_id: str = ""
    geoip_license_key: str = ""
    geoip_timeout_sec: float = 1.0       # connect + read timeout per lookup

    # ── Analytics ─────────────────────────────────────────────────────────
    analytics_backend: str = "memory"    # "memory" | "redis" | "null"
    redis_url: str = "redis://localhost:6379/0"

    # ── Error tracking ────────────────────────────────────────────────────
    error_tracker: str = "log"           # "log" | "slack"
    slack_webhook_url: str = ""


settings = Settings()
