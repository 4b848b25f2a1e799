from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_env: str = "dev"
    log_level: str = "INFO"

    # Infra
    database_url: str = "postgresql://app:app@db:5432/app"
    redis_url: str = "redis://redis:6379/0"
    smtp_base_url: str = ""

    # AI response cache
    cache_max_size: int = 1000
    cache_default_ttl_ms: int = 24 * 60 * 60 * 1000

    # Passcodes / password reset
    bcrypt_rounds: int = 12
    passcode_backend: str = "memory"
    otp_length: int = 6
    otp_ttl_minutes: int = 10
    otp_max_attempts: int = 5
    reset_token_ttl_seconds: int = 15 * 60

    # Maintenance
    janitor_interval_seconds: float = 300.0
    admin_token: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
