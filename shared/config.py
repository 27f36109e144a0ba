# shared/config.py
import os
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _as_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    """Runtime settings, read from the environment (and `.env`) unless passed explicitly."""

    def __init__(
        self,
        database_url: Optional[str] = None,
        secret_key: Optional[str] = None,
        access_token_expire_minutes: Optional[int] = None,
        environment: Optional[str] = None,
        log_level: Optional[str] = None,
        cors_origins: Optional[List[str]] = None,
        scope_section_reads: Optional[bool] = None,
        require_auth_for_unique_sections: Optional[bool] = None,
    ):
        self.database_url = database_url or os.getenv(
            "DATABASE_URL", "sqlite+aiosqlite:///./academic_portal.db"
        )
        self.secret_key = secret_key or os.getenv("SECRET_KEY", "your-secret-key")
        self.access_token_expire_minutes = access_token_expire_minutes or int(
            os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60")
        )
        self.environment = environment or os.getenv("ENVIRONMENT", "development")
        self.log_level = log_level or os.getenv("LOG_LEVEL", "INFO")
        self.cors_origins = (
            cors_origins if cors_origins is not None
            else _as_list(os.getenv("CORS_ORIGINS", "http://localhost:3000"))
        )
        # Department scoping on get-by-id and list-by-teacher; off keeps the
        # historical unscoped reads.
        self.scope_section_reads = (
            scope_section_reads if scope_section_reads is not None
            else _as_bool(os.getenv("SCOPE_SECTION_READS"))
        )
        self.require_auth_for_unique_sections = (
            require_auth_for_unique_sections if require_auth_for_unique_sections is not None
            else _as_bool(os.getenv("REQUIRE_AUTH_FOR_UNIQUE_SECTIONS"))
        )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


settings = Settings()
