from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings."""

    # Application
    ENVIRONMENT: Literal["local", "development", "production", "test"] = "local"
    LOG_LEVEL: str = "INFO"
    ADMIN_EMAIL: str = "admin@admin.com"
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5000"]

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    # Identity provider (Supabase-compatible HS256 tokens)
    # Default placeholder keeps local/test runs from failing without credentials.
    SUPABASE_URL: str = "http://localhost"
    SUPABASE_JWT_SECRET: str = "test-jwt-secret"

    # Admin routes accept any authenticated session when disabled
    ENFORCE_ADMIN_ROLE: bool = True

    # Bank account verification
    BANK_VERIFICATION_PROVIDER: Literal["simulated", "http"] = "simulated"
    BANK_VERIFICATION_DELAY_SECONDS: float = 2.0
    BANK_VERIFICATION_URL: str = "http://localhost:9000"
    BANK_VERIFICATION_API_KEY: Optional[str] = None
    BANK_VERIFICATION_TIMEOUT: float = 15.0

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str]) -> str:
        if isinstance(v, str):
            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+psycopg://", 1)
            if v.startswith("postgres://"):
                return v.replace("postgres://", "postgresql+psycopg://", 1)
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """
    Return the global settings instance, cached.
    """
    return Settings()
