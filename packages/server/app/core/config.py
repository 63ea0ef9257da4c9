"""
Application configuration loaded from environment variables.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Org Todo server configuration."""

    model_config = SettingsConfigDict(env_prefix="ORGTODO_", env_file=".env", extra="ignore")

    # Database
    database_url: str = "sqlite+aiosqlite:///./orgtodo.db"
    create_tables_on_startup: bool = True

    # Identity (bearer JWTs issued by the identity provider)
    secret_key: str = "CHANGE_ME_IN_PRODUCTION"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60

    # Invitations
    invitation_ttl_days: int = 7

    # Server
    debug: bool = False

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
