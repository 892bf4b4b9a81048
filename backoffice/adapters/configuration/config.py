# backoffice/adapters/configuration/config.py

from typing import Any, Dict, List, Optional, Union
from logging import getLevelName
from pydantic import PostgresDsn, field_validator, ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"

    # Environment
    ENVIRONMENT: str = "development"  # "development", "production", "testing"

    # Database
    DB_DRIVER: str = "psycopg2"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "backoffice"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    TEST_MODE: bool = False
    TEST_POSTGRES_DB: str = ""
    DATABASE_URL: Optional[str] = None
    SEED_ON_STARTUP: bool = False
    DEFAULT_ADMIN_USERNAME: str = "admin"

    DEBUG: bool = False

    # Auth
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Menu fallback when the permission store cannot be read ("empty" | "static")
    MENU_FALLBACK_POLICY: str = "empty"
    MENU_FALLBACK_TREE: List[Dict[str, Any]] = []

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:8000", "http://127.0.0.1:8000"]

    @field_validator("DATABASE_URL", mode="before")
    def assemble_db_url(cls, value, info):
        if value:
            return value

        data = info.data
        db_name = data.get("TEST_POSTGRES_DB") if data.get("TEST_MODE") else data.get("POSTGRES_DB")
        return str(PostgresDsn.build(
            scheme=f"postgresql+{data.get('DB_DRIVER', 'psycopg2')}",
            username=data["POSTGRES_USER"],
            password=data["POSTGRES_PASSWORD"],
            host=data["POSTGRES_HOST"],
            port=data["POSTGRES_PORT"],
            path=db_name,
        ))

    @field_validator("CORS_ORIGINS", mode="before")
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """
        A CSV string ('a,b,c') becomes a list.
        Lists (or JSON decoded by pydantic-settings) are returned as-is.
        """
        if isinstance(v, str) and not v.startswith("["):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        if isinstance(v, list):
            return v
        raise ValueError(f"Invalid CORS_ORIGINS: {v!r}")

    @field_validator("LOG_LEVEL", mode="before")
    def validate_log_level(cls, v: str) -> str:
        """Make sure the value is a valid logging level."""
        lvl = v.upper()
        getLevelName(lvl)
        return lvl

    @field_validator("MENU_FALLBACK_POLICY", mode="before")
    def validate_menu_fallback(cls, v: str) -> str:
        policy = v.lower().strip()
        if policy not in ("empty", "static"):
            raise ValueError(f"Invalid MENU_FALLBACK_POLICY: {v!r}")
        return policy

    model_config = ConfigDict(env_file=".env", extra="ignore")


settings = Settings()
