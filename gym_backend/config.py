"""
Application configuration
"""
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def env_bool(var_name: str, default: bool = False) -> bool:
    value = os.getenv(var_name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


MAX_PAGE_SIZE = 500
DEFAULT_PAGE_SIZE = 100


class Settings:
    """Application settings"""

    DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL", "")
    SUPABASE_SSLMODE: Optional[str] = os.getenv("SUPABASE_SSLMODE")
    # Create tables on startup (local SQLite runs, tests)
    DB_AUTO_CREATE: bool = env_bool("DB_AUTO_CREATE", default=False)

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Backup trigger
    BACKUP_TOKEN: str = os.getenv("BACKUP_TOKEN", "")
    BACKUP_SCRIPT_PATH: str = os.getenv("BACKUP_SCRIPT_PATH", "scripts/backup_to_neon.ps1")
    BACKUP_INTERPRETER: str = os.getenv("BACKUP_INTERPRETER", "")
    BACKUP_TIMEOUT_SECONDS: float = float(os.getenv("BACKUP_TIMEOUT_SECONDS", "600"))

    # CORS settings
    CORS_ORIGINS: list = ["*"]  # Allow all origins for the gym dashboard
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list = ["*"]
    CORS_ALLOW_HEADERS: list = ["*"]


settings = Settings()
