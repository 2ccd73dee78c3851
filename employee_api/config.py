"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    DATABASE_URL: str = "sqlite:///./employees.db"
    APP_VERSION: str = "1.0.0"
    CORS_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    # Bearer tokens
    JWT_SECRET_KEY: str = "dev-only-secret-key-change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60

    # Employee rules
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100
    MAX_PAGE_NUMBER: int = 2**31 - 1
    PASSWORD_MIN_LENGTH: int = 8
    PASSWORD_HASH_ITERATIONS: int = 120000

    SEED_FIXTURES: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
