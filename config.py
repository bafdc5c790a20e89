"""
Application configuration
All values come from environment variables so the same code runs locally and on Render
"""
import os
from pathlib import Path

APP_DIR = Path(__file__).parent
DB_PATH = APP_DIR / "expenses.db"


def get_database_url():
    """Database URL - PostgreSQL for production, SQLite for local"""
    url = os.environ.get("DATABASE_URL")
    if not url:
        return f"sqlite:///{DB_PATH}"
    # Render and Heroku still hand out the old scheme, SQLAlchemy only accepts postgresql://
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url


class Config:
    DATABASE_URL = get_database_url()

    # Google service account used for every Sheets call
    GOOGLE_SERVICE_ACCOUNT_EMAIL = os.environ.get("GOOGLE_SERVICE_ACCOUNT_EMAIL", "")
    GOOGLE_PRIVATE_KEY = os.environ.get("GOOGLE_PRIVATE_KEY", "")

    # Seconds before a Sheets request is abandoned
    SHEETS_TIMEOUT = float(os.environ.get("SHEETS_TIMEOUT", "30"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_FILE = os.environ.get("LOG_FILE")
