# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./inventory.db"
    SQL_ECHO: bool = False
    LOG_LEVEL: str = "INFO"

    # Directory with the web UI, mounted at "/" when it exists
    STATIC_DIR: str = "public"
    FRONTEND_URL: Optional[str] = None

    # Google Sheets source for the bulk importer
    SHEET_SPREADSHEET_ID: Optional[str] = None
    SHEET_NAME: str = "inventory"
    GOOGLE_SHEETS_API_KEY: Optional[str] = None
    SHEET_TIMEOUT_SECONDS: float = 20.0

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()
