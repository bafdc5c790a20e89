"""
In-memory expense storage
Records live only as long as the process; ids are never reused within it
"""
import threading
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Expense:
    id: int
    amount: float
    type: str
    remarks: Optional[str]
    date: datetime
    month: int
    year: int
    google_sheets_sync: bool = False

    def to_dict(self):
        return {
            "id": self.id,
            "amount": self.amount,
            "type": self.type,
            "remarks": self.remarks,
            "date": self.date.isoformat(),
            "month": self.month,
            "year": self.year,
            "googleSheetsSync": self.google_sheets_sync,
        }


def _newest_first(expenses):
    return sorted(expenses, key=lambda e: (e.date, e.id), reverse=True)


class ExpenseStore:
    def __init__(self):
        self._expenses: Dict[int, Expense] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._expenses)

    def create(self, amount, type, remarks, month, year) -> Expense:
        """Store a new expense stamped with the current time, not yet synced.

        Input is trusted: validation happens before the store is reached.
        """
        with self._lock:
            expense = Expense(
                id=self._next_id,
                amount=amount,
                type=type,
                remarks=remarks,
                date=datetime.now().astimezone(),
                month=month,
                year=year,
                google_sheets_sync=False,
            )
            self._next_id += 1
            self._expenses[expense.id] = expense
        return expense

    def _snapshot(self) -> List[Expense]:
        with self._lock:
            return list(self._expenses.values())

    def list(self) -> List[Expense]:
        return _newest_first(self._snapshot())

    def list_by_period(self, month: int, year: int) -> List[Expense]:
        return _newest_first(
            e for e in self._snapshot() if e.month == month and e.year == year
        )

    def get(self, expense_id: int) -> Optional[Expense]:
        with self._lock:
            return self._expenses.get(expense_id)

    def set_sync_flag(self, expense_id: int, synced: bool) -> Optional[Expense]:
        """Returns the updated expense, or None when the id is unknown"""
        with self._lock:
            expense = self._expenses.get(expense_id)
            if expense is None:
                return None
            updated = replace(expense, google_sheets_sync=synced)
            self._expenses[expense_id] = updated
            return updated

    def list_unsynced(self) -> List[Expense]:
        # Oldest first so a retry sweep appends rows in creation order
        return sorted(
            (e for e in self._snapshot() if not e.google_sheets_sync),
            key=lambda e: e.id,
        )
