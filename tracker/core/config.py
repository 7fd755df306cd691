"""
Application settings and configuration management.
"""
import tempfile
from typing import List, Union
from pydantic import AnyHttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""
    # Base
    PROJECT_NAME: str = "Contact Tracker"
    PROJECT_DESCRIPTION: str = "Contact, outreach and job requirement tracking API"
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api"
    DEBUG: bool = False

    # CORS
    BACKEND_CORS_ORIGINS: List[Union[str, AnyHttpUrl]] = ["http://localhost:3000"]

    @field_validator("BACKEND_CORS_ORIGINS", mode='before')
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        """Parse CORS origins from string or list."""
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # Authentication
    SECRET_KEY: str = "CHANGEME_IN_PRODUCTION"
    REFRESH_SECRET_KEY: str = "CHANGEME_REFRESH_IN_PRODUCTION"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    REFRESH_COOKIE_NAME: str = "jid"
    COOKIE_SECURE: bool = False

    # Azure AD
    AZURE_AUTH_ENABLED: bool = False
    AZURE_TENANT_ID: str = "common"
    AZURE_CLIENT_ID: str = ""  # Empty disables audience validation
    AZURE_JWKS_CACHE_SECONDS: int = 600

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./tracker.db"

    # Spreadsheet import
    IMPORT_LOOKUP_BATCH_SIZE: int = 400  # Stays under SQLite's 999 bound parameters
    IMPORT_HEADER_SCAN_ROWS: int = 10
    IMPORT_CONTENT_SCAN_ROWS: int = 5
    IMPORT_MAX_FILE_SIZE: int = 20 * 1024 * 1024  # 20MB
    IMPORT_TEMP_DIR: str = tempfile.gettempdir()
    IMPORT_TEMP_CLEANUP_DELAY: float = 0.1  # seconds

    # Seeding
    SUPERADMIN_EMAIL: str = "admin@example.com"
    SUPERADMIN_PASSWORD: str = "admin123"

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", extra="ignore")


# Create singleton settings instance
settings = Settings()
