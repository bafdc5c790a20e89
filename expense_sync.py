"""
Creating expenses and mirroring them to Google Sheets

An expense is only accepted while a spreadsheet is connected. It is stored
locally first, then appended to its month's worksheet; the sync flag is set
once the append succeeds. A failed append leaves the local record in place
(unsynced) and reports the failure to the caller; sync_pending() retries such
records.
"""
from dataclasses import dataclass

from errors import NotConnectedError, SyncError, SyncTimeoutError
from forms import validate_expense
from logging_config import get_logger
from sheets_client import SheetsTimeoutError

logger = get_logger(__name__)


def format_amount(amount):
    """250.0 -> "250", 250.5 -> "250.5" """
    if float(amount).is_integer():
        return str(int(amount))
    return repr(float(amount))


def format_type(expense_type):
    # Only the first letter; "eating out" -> "Eating out"
    return expense_type[:1].upper() + expense_type[1:]


def build_row(expense):
    """Sheet row for an expense. Date is the creation day, not the expense's month/year."""
    return [
        expense.date.strftime("%Y-%m-%d"),
        format_amount(expense.amount),
        format_type(expense.type),
        expense.remarks or "",
    ]


@dataclass
class SweepResult:
    synced: int = 0
    failed: int = 0
    pending: int = 0

    def to_dict(self):
        return {"synced": self.synced, "failed": self.failed, "pending": self.pending}


class ExpenseSyncService:
    def __init__(self, store, connection, resolver):
        self.store = store
        self.connection = connection
        self.resolver = resolver

    def create_expense(self, payload):
        """Validate, store and sync one expense; returns the synced Expense.

        Raises:
            ValidationError: payload rejected, nothing stored
            NotConnectedError: no spreadsheet connected, nothing stored
            SyncError: stored locally but the sheet append failed
            SyncTimeoutError: as SyncError, Google Sheets did not answer in time
        """
        data = validate_expense(payload)
        month, year = data["month"], data["year"]

        state = self.connection.verify()
        if not state.connected:
            logger.warning("Rejected expense for %s/%s: Google Sheets not connected", month, year)
            raise NotConnectedError(month, year)

        expense = self.store.create(**data)
        logger.info("Stored expense %s for %s/%s", expense.id, month, year)

        self._append(expense)

        synced = self.store.set_sync_flag(expense.id, True)
        logger.info("Expense %s synced to Google Sheets", expense.id)
        return synced

    def _append(self, expense):
        try:
            document = self.connection.open_document()
            worksheet = self.resolver.resolve(document, expense.month, expense.year)
            document.append_row(worksheet, build_row(expense))
        except SheetsTimeoutError as e:
            logger.error("Timed out syncing expense %s for %s/%s: %s", expense.id, expense.month, expense.year, e)
            raise SyncTimeoutError(expense.month, expense.year) from e
        except Exception as e:
            logger.exception(
                "Failed to add expense %s to Google Sheets for %s/%s", expense.id, expense.month, expense.year
            )
            raise SyncError(expense.month, expense.year) from e

    def sync_pending(self):
        """Retry the append for every stored expense whose sync flag is still false"""
        state = self.connection.verify()
        if not state.connected:
            raise NotConnectedError(message="Please connect to Google Sheets first to sync pending expenses.")

        result = SweepResult()
        for expense in self.store.list_unsynced():
            try:
                self._append(expense)
            except SyncError:
                result.failed += 1
                continue
            self.store.set_sync_flag(expense.id, True)
            result.synced += 1

        result.pending = len(self.store.list_unsynced())
        logger.info("Pending sync sweep: %s synced, %s failed", result.synced, result.failed)
        return result
