"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. CONSOLE_API_BASE_URL is required and validated at
load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "console-access"
    app_version: str = "1.0.0"
    debug: bool = False

    # Console API (menu catalog, grant store, account directory)
    console_api_base_url: str = ""
    # Service token used for callers without an Authorization header, only
    # when ALLOW_SERVICE_TOKEN_FALLBACK is set (local development).
    console_api_token: SecretStr | None = None
    allow_service_token_fallback: bool = False
    console_api_timeout_seconds: float = 30.0
    # Path segment of PUT /user-permissions/{id}; routing only, the store ignores it.
    bulk_upsert_route_id: str = "1"
    grant_fetch_concurrency: int = 8

    # Open screens untouched for this long are evicted (0 disables eviction).
    screen_idle_ttl_seconds: int = 3600

    # CORS
    allowed_origins: str = "http://localhost:5173,http://localhost:3000"

    # Request / middleware
    request_timeout_seconds: int = 60
    request_id_header: str = "X-Request-ID"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_console_api(self) -> "Settings":
        """Validate console API settings.

        - CONSOLE_API_BASE_URL must be an http(s) URL.
        - GRANT_FETCH_CONCURRENCY must be at least 1.
        - The service-token fallback needs a configured CONSOLE_API_TOKEN.
        """
        url = self.console_api_base_url.strip()
        if not url:
            raise ValueError(
                "CONSOLE_API_BASE_URL is required (e.g. https://admin.example.com/api). "
                "Set in environment or .env file."
            )
        if not url.startswith(("http://", "https://")):
            raise ValueError(
                f"CONSOLE_API_BASE_URL must start with http:// or https://, got: {url!r}"
            )
        self.console_api_base_url = url.rstrip("/")
        if self.grant_fetch_concurrency < 1:
            raise ValueError("GRANT_FETCH_CONCURRENCY must be at least 1")
        if self.console_api_timeout_seconds <= 0:
            raise ValueError("CONSOLE_API_TIMEOUT_SECONDS must be positive")
        if self.screen_idle_ttl_seconds < 0:
            raise ValueError("SCREEN_IDLE_TTL_SECONDS must not be negative")
        if self.allow_service_token_fallback and self.console_api_token is None:
            raise ValueError("ALLOW_SERVICE_TOKEN_FALLBACK requires CONSOLE_API_TOKEN")
        return self

    @property
    def origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
