"""
Durable key/value settings
Backed by the `settings` table - PostgreSQL in production, SQLite locally
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from logging_config import get_logger
from models import Base, Setting

logger = get_logger(__name__)

# Key under which the connected spreadsheet id is remembered across restarts
SPREADSHEET_ID_KEY = "google_sheets_spreadsheet_id"


class SettingsStore:
    def __init__(self, engine):
        self.engine = engine
        self.Session = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, database_url: str) -> "SettingsStore":
        connect_args = {}
        if database_url.startswith("sqlite"):
            # Flask may serve requests from several threads
            connect_args["check_same_thread"] = False
        engine = create_engine(database_url, connect_args=connect_args, pool_pre_ping=True)
        return cls(engine)

    def init_db(self):
        Base.metadata.create_all(self.engine)
        logger.info("Settings table ready (%s)", self.engine.url.get_backend_name())

    def get(self, key: str) -> Optional[str]:
        with self.Session() as session:
            setting = session.execute(
                select(Setting).where(Setting.key == key)
            ).scalar_one_or_none()
            return setting.value if setting else None

    def set(self, key: str, value: Optional[str]) -> None:
        """Insert or update the value stored under key"""
        with self.Session.begin() as session:
            setting = session.execute(
                select(Setting).where(Setting.key == key)
            ).scalar_one_or_none()
            if setting:
                setting.value = value
                setting.updated_at = datetime.utcnow()
                logger.debug("Updated setting %s", key)
            else:
                session.add(Setting(key=key, value=value, updated_at=datetime.utcnow()))
                logger.debug("Saved setting %s", key)
