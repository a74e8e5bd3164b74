"""
Application Configuration
Central place for settings, loaded from the environment or .env
"""
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Storage
    storage_backend: str = "mongo"  # "mongo" or "memory"
    mongo_url: str = "mongodb://localhost:27017"
    db_name: str = "fridge_compliance"

    # JWT issued by the account service
    jwt_secret: str = "your-super-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expiration_days: int = 30

    # Scheduling
    preview_days: int = 30  # look-ahead for schedule previews
    upcoming_days: int = 1  # look-ahead for "due soon" instances
    max_window_days: int = 731  # widest from/to window a request may generate

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    allowed_origins: str = "*"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
