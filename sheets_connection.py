"""
Google Sheets connection state
One ConnectionManager is created per app and owns the "which spreadsheet are we
writing to, and does it still work" state. Only the spreadsheet id is persisted;
connected / error_message are always recomputed.
"""
import threading
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from errors import NotConnectedError
from logging_config import get_logger
from settings_store import SPREADSHEET_ID_KEY
from sheets_client import SheetsError

logger = get_logger(__name__)


@dataclass(frozen=True)
class ConnectionState:
    connected: bool = False
    spreadsheet_id: Optional[str] = None
    error_message: Optional[str] = None

    def to_dict(self):
        data = {"connected": self.connected, "spreadsheetId": self.spreadsheet_id}
        if self.error_message is not None:
            data["errorMessage"] = self.error_message
        return data


def _disconnected(error):
    return ConnectionState(connected=False, spreadsheet_id=None, error_message=str(error) or type(error).__name__)


class ConnectionManager:
    def __init__(self, sheets_client, settings_store):
        self.sheets_client = sheets_client
        self.settings_store = settings_store
        self._state = ConnectionState()
        self._lock = threading.Lock()

    @property
    def state(self) -> ConnectionState:
        return self._state

    def connect(self, spreadsheet_id) -> ConnectionState:
        """Open spreadsheet_id and make it the sync target. Never raises."""
        try:
            document = self.sheets_client.open_document(spreadsheet_id)
        except SheetsError as e:
            logger.error("Error connecting to Google Sheet %s: %s", spreadsheet_id, e)
            with self._lock:
                self._state = _disconnected(e)
                return self._state

        with self._lock:
            self._state = ConnectionState(connected=True, spreadsheet_id=spreadsheet_id)
            state = self._state
        self._save_spreadsheet_id(spreadsheet_id)
        logger.info("Successfully connected to spreadsheet: %s", document.title)
        return state

    def verify(self) -> ConnectionState:
        """Re-open the connected spreadsheet; on failure forget it as a failed connect would"""
        state = self._state
        if not state.connected or not state.spreadsheet_id:
            return state

        try:
            self.sheets_client.open_document(state.spreadsheet_id)
        except SheetsError as e:
            logger.error("Error verifying Google Sheets connection: %s", e)
            with self._lock:
                # A concurrent connect() may have replaced the target meanwhile
                if self._state.spreadsheet_id == state.spreadsheet_id:
                    self._state = _disconnected(e)
                return self._state

        logger.debug("Google Sheets connection verified")
        return self._state

    def restore_from_durable_store(self) -> bool:
        """Called at startup: reconnect to the spreadsheet saved by the last successful connect"""
        saved_id = self._load_spreadsheet_id()
        if saved_id:
            logger.info("Attempting to reconnect with saved spreadsheet ID")
            try:
                self.sheets_client.open_document(saved_id)
            except SheetsError as e:
                logger.error("Failed to reconnect with saved spreadsheet ID: %s", e)
            else:
                with self._lock:
                    self._state = ConnectionState(connected=True, spreadsheet_id=saved_id)
                logger.info("Successfully reconnected with saved spreadsheet ID")
                return True

        state = self.verify()
        logger.info("Initialized connection check: %s", "Connected" if state.connected else "Not connected")
        return state.connected

    def open_document(self):
        """Open the connected spreadsheet for writing.

        Raises NotConnectedError when no target is set and SheetsError when the
        remote call fails.
        """
        state = self._state
        if not state.connected or not state.spreadsheet_id:
            raise NotConnectedError(message="Google Sheets is not connected.")
        return self.sheets_client.open_document(state.spreadsheet_id)

    def _save_spreadsheet_id(self, spreadsheet_id):
        try:
            self.settings_store.set(SPREADSHEET_ID_KEY, spreadsheet_id)
            logger.info("Saved spreadsheet ID to database")
        except SQLAlchemyError as e:
            logger.error("Error saving spreadsheet ID to database: %s", e)

    def _load_spreadsheet_id(self):
        try:
            saved_id = self.settings_store.get(SPREADSHEET_ID_KEY)
        except SQLAlchemyError as e:
            logger.error("Error loading spreadsheet ID from database: %s", e)
            return None
        if saved_id:
            logger.info("Found spreadsheet ID in database")
        return saved_id
