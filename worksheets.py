"""
One worksheet per month, named like "June 2024"
"""
import threading
from collections import defaultdict

from logging_config import get_logger

logger = get_logger(__name__)

HEADERS = ["Date", "Amount", "Type", "Remarks"]

# Fixed English names; calendar.month_name follows the process locale
MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def month_name(month):
    return MONTH_NAMES[month - 1]


def worksheet_title(month, year):
    return f"{month_name(month)} {year:04d}"


class WorksheetResolver:
    def __init__(self):
        # Two requests for a brand-new month must not both create its sheet
        self._locks = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()

    def _lock_for(self, title):
        with self._locks_guard:
            return self._locks[title]

    def resolve(self, document, month, year):
        """Find the period's worksheet in document, creating it with the header row if absent"""
        title = worksheet_title(month, year)
        with self._lock_for(title):
            sheet = document.find_sheet_by_title(title)
            if sheet is None:
                sheet = document.create_sheet(title, list(HEADERS))
                logger.info("Created new worksheet: %s", title)
            return sheet
