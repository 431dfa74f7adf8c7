"""
Settings for the delivery ledger service.

Values come from the process environment, after a .env file in
the working directory (if any) has been loaded into it.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Environment-driven settings; read once per process."""

    APP_NAME: str = "Delivery Receipt Ledger"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Tests point this at SQLite
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql://localhost:5432/delivery_ledger"
    )

    # Largest spreadsheet accepted by /receipts/import-file
    IMPORT_MAX_BYTES: int = int(os.getenv("IMPORT_MAX_BYTES", str(5 * 1024 * 1024)))


@lru_cache()
def get_settings() -> Settings:
    return Settings()
