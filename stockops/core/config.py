# stockops/core/config.py

import os
import re
from functools import lru_cache
from typing import List, Optional, Annotated
from pydantic import ConfigDict, BeforeValidator, field_validator
from pydantic_settings import BaseSettings, NoDecode

PROCEDURE_NAME_RE = re.compile(r"^[a-z_][a-z0-9_]*$")


def _parse_header_list(value):
    if value in (None, "", []):
        return []
    if isinstance(value, str):
        return [header.strip().lower() for header in value.split(",") if header.strip()]
    if isinstance(value, (list, tuple, set)):
        return [str(header).strip().lower() for header in value if str(header).strip()]
    return []


class Settings(BaseSettings):
    """
    Application settings.
    Loads values from environment variables (.env file)

    Built once in create_app() and handed to every component that needs it.
    """
    # Elevated store credential (service role login)
    DATABASE_URL: str

    # Identity service (user-scoped verification only)
    SUPABASE_URL: str
    SUPABASE_ANON_KEY: str
    AUTH_TIMEOUT_SECONDS: float = 10.0

    # Opening stock snapshot
    SNAPSHOT_PROCEDURE: str = "snapshot_opening_at_1am_ist"

    # Salary gate
    SALARY_ACCESS_PASSWORD: Optional[str] = None
    SALARY_PASSWORD_MAX_LENGTH: int = 100

    # CORS
    CORS_ALLOW_ORIGIN: str = "*"
    CORS_ALLOW_HEADERS: Annotated[List[str], NoDecode, BeforeValidator(lambda v: _parse_header_list(v))] = [
        "authorization",
        "x-client-info",
        "apikey",
        "content-type",
    ]

    # Logging
    LOG_LEVEL: str = "INFO"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    model_config = ConfigDict(
        env_file=os.environ.get('ENV_FILE', '.env') if os.path.exists('.env') else None,
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("SNAPSHOT_PROCEDURE")
    @classmethod
    def _check_procedure_name(cls, value: str) -> str:
        if not PROCEDURE_NAME_RE.match(value):
            raise ValueError(f"Invalid procedure name: {value!r}")
        return value

    @field_validator("SUPABASE_URL")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def async_database_url(self) -> str:
        """DATABASE_URL with the asyncpg driver selected"""
        if self.DATABASE_URL.startswith('postgresql://'):
            return self.DATABASE_URL.replace('postgresql://', 'postgresql+asyncpg://', 1)
        return self.DATABASE_URL

    @property
    def cors_headers(self) -> dict:
        return {
            "Access-Control-Allow-Origin": self.CORS_ALLOW_ORIGIN,
            "Access-Control-Allow-Headers": ", ".join(self.CORS_ALLOW_HEADERS),
        }


@lru_cache()
def get_settings():
    """Cached settings to avoid loading .env file for every request"""
    return Settings()


def clear_settings_cache():
    """Clear the settings cache - useful when switching between environments"""
    get_settings.cache_clear()
