"""
Fake Stack Overflow – Application configuration.
Reads environment variables from a .env file via pydantic-settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── App ──
    APP_NAME: str = "Fake Stack Overflow"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ── Database ──
    DATABASE_URL: str = "sqlite+aiosqlite:///./fakeso.db"

    # ── JWT ──
    SECRET_KEY: str = "change-me-to-a-random-secret"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60


settings = Settings()
