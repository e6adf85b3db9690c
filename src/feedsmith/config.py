"""Configuration management for FeedSmith."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _parse_cors_origins() -> list[str]:
    """Parse CORS origins from environment variable."""
    cors_env = os.getenv("CORS_ALLOW_ORIGINS")
    if cors_env:
        return cors_env.split(",")
    return ["*"]


class Settings(BaseModel):
    """Application settings."""

    # History - number of undo snapshots kept before the oldest is evicted
    history_limit: int = int(os.getenv("HISTORY_LIMIT", "50"))

    # Grid defaults for new sheets and for padding new rows
    default_row_count: int = int(os.getenv("DEFAULT_ROW_COUNT", "20"))
    default_column_count: int = int(os.getenv("DEFAULT_COLUMN_COUNT", "10"))

    # Flash fill
    flash_fill_min_length: int = int(os.getenv("FLASH_FILL_MIN_LENGTH", "2"))
    flash_fill_scan_max_columns: int = int(os.getenv("FLASH_FILL_SCAN_MAX_COLUMNS", "20"))

    # Database path for snapshots and published records
    database_path: Path = Path(os.getenv("DATABASE_PATH", "data/feedsmith.db"))
    autosave_snapshot_name: str = os.getenv("AUTOSAVE_SNAPSHOT_NAME", "autosave")

    # Server settings
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "8000"))
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"

    # CORS settings (comma-separated list of allowed origins, or * for all)
    cors_allow_origins: list[str] = _parse_cors_origins()


settings = Settings()
