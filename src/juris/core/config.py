from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Juris Tenancy Core"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"  # disable, prefer, require, verify-ca, verify-full
    database_statement_cache_size: int = 100
    # Upper bound for a single tenant-scoped round trip
    database_statement_timeout_seconds: float = 15.0

    # Auth (tokens are issued elsewhere, only verified here)
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    admin_roles: list[str] = ["admin", "super_admin", "superadmin"]

    # Tenant defaults
    default_plan_type: str = "basic"
    default_max_users: int = 5
    default_max_storage_bytes: int = 1_073_741_824  # 1GB

    # Provisioned-namespace cache, 0 disables it
    provisioned_cache_ttl_seconds: int = 60

    # Redis (optional - app works without it)
    redis_url: str | None = None
    redis_pool_size: int = 10

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if v == "change-this-to-a-secure-random-string":
            raise ValueError(
                "JWT_SECRET_KEY must be changed from default value. "
                "Generate a secure secret with: openssl rand -hex 32"
            )
        if len(v) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters")
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Run every PostgreSQL URL through the asyncpg driver."""
        scheme, separator, rest = v.partition("://")
        if not separator:
            raise ValueError("DATABASE_URL must be a URL, e.g. postgresql+asyncpg://host/db")
        if scheme.split("+")[0] not in ("postgres", "postgresql"):
            raise ValueError("DATABASE_URL must point to PostgreSQL")
        return f"postgresql+asyncpg://{rest}"

    @field_validator("database_statement_timeout_seconds")
    @classmethod
    def validate_statement_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("DATABASE_STATEMENT_TIMEOUT_SECONDS must be positive")
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Reject wildcards when credentials are used."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
