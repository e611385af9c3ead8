"""Application configuration via pydantic-settings.

Loads all settings from environment variables with sensible defaults.
A global `settings` singleton is available for import throughout the app.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Supabase (candidate record store)
    SUPABASE_URL: str
    SUPABASE_KEY: str

    # Redis (metrics cache)
    REDIS_URL: str = "redis://localhost:6379/0"
    METRICS_CACHE_TTL_SECONDS: int = 600

    # AWS SQS (recalculation queue)
    AWS_REGION: str = "us-east-1"
    AWS_ACCESS_KEY_ID: str = "test"
    AWS_SECRET_ACCESS_KEY: str = "test"
    SQS_ENDPOINT_URL: str | None = None
    SQS_QUEUE_NAME: str = "candidate-metrics-recalculate"
    QUEUE_WORKERS: int = 4

    # Scheduler
    QUEUE_POLL_INTERVAL_SECONDS: int = 30

    # HTTP Basic auth
    BASIC_AUTH_USERNAME: str = "admin"
    BASIC_AUTH_PASSWORD: str = "admin"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # Logging
    LOG_LEVEL: str = "INFO"


settings = Settings()  # type: ignore[call-arg]
