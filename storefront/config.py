"""Storefront Backend: Configuration via pydantic-settings."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./storefront.db"

    # Security
    SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_MINUTES: int = 60 * 24 * 30

    # Password reset
    RESET_CODE_TTL_MINUTES: int = 10

    # Default super-admin created on startup
    DEFAULT_ADMIN_EMAIL: str = "admin@storefront.local"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"

    # Timezone
    TIMEZONE: str = "Africa/Douala"

    # Product images
    UPLOAD_DIR: str = "./data/uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_IMAGE_SIZE_BYTES: int = 5 * 1024 * 1024
    MAX_IMAGES_PER_UPLOAD: int = 5

    # HTTP
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:8080"]

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
