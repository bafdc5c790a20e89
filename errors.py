"""
Error types returned to API callers
Every error carries the HTTP status and the single message shown to the user
"""


class ExpenseTrackerError(Exception):
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {"message": self.message}


class ValidationError(ExpenseTrackerError):
    """Bad input shape or range"""


class NotConnectedError(ExpenseTrackerError):
    """No working Google Sheets target"""

    def __init__(self, month=None, year=None, message=None):
        if message is None:
            message = f"Please connect to Google Sheets first for month {month}/{year} expenses."
        super().__init__(message)
        self.month = month
        self.year = year


class SyncError(ExpenseTrackerError):
    """Worksheet lookup or row append failed after the expense was stored locally"""

    def __init__(self, month, year, message=None):
        if message is None:
            message = f"Failed to add expense to Google Sheets for month {month}/{year}. Please try again."
        super().__init__(message)
        self.month = month
        self.year = year


class SyncTimeoutError(SyncError):
    status_code = 504

    def __init__(self, month, year):
        super().__init__(
            month, year,
            f"Google Sheets did not respond in time for month {month}/{year}. Please try again."
        )
