"""
Application configuration using pydantic-settings.
Loads from environment variables / .env file.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )
    
    # Application
    app_name: str = "idempotent-payments"
    app_env: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    
    # API Server
    host: str = "0.0.0.0"
    port: int = 3000
    
    # Durable store (sqlite+aiosqlite or postgresql+asyncpg)
    database_url: str = "sqlite+aiosqlite:///./payments.db"
    database_echo: bool = False
    
    # Volatile cache bound (None = unbounded)
    cache_max_entries: Optional[int] = None
    
    @property
    def is_development(self) -> bool:
        return self.app_env == "development"
    
    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
