import threading

from storage import ExpenseStore


def add(store, month=6, year=2024, **kw):
    data = dict(amount=10.0, type="food", remarks=None, month=month, year=year)
    data.update(kw)
    return store.create(**data)


def test_create_assigns_increasing_ids():
    store = ExpenseStore()
    first = add(store)
    second = add(store)

    assert (first.id, second.id) == (1, 2)
    assert first.google_sheets_sync is False
    assert first.date.tzinfo is not None


def test_period_is_independent_of_creation_date():
    """Test: month/year are stored as given, even for a different period than today"""
    store = ExpenseStore()
    expense = add(store, month=12, year=2001)

    assert (expense.month, expense.year) == (12, 2001)
    assert store.list_by_period(12, 2001) == [expense]


def test_list_newest_first():
    store = ExpenseStore()
    created = [add(store) for _ in range(3)]

    assert [e.id for e in store.list()] == [e.id for e in reversed(created)]


def test_list_by_period_filters_exactly():
    store = ExpenseStore()
    a = add(store, month=1, year=2024)
    add(store, month=2, year=2024)
    add(store, month=1, year=2025)
    d = add(store, month=1, year=2024)

    assert [e.id for e in store.list_by_period(1, 2024)] == [d.id, a.id]
    assert store.list_by_period(3, 2024) == []


def test_get_unknown_id():
    assert ExpenseStore().get(42) is None


def test_set_sync_flag_keeps_other_fields():
    store = ExpenseStore()
    expense = add(store, remarks="bus")

    updated = store.set_sync_flag(expense.id, True)

    assert updated.google_sheets_sync is True
    assert updated.date == expense.date
    assert updated.remarks == "bus"
    assert store.get(expense.id) == updated


def test_set_sync_flag_unknown_id_returns_none():
    store = ExpenseStore()
    assert store.set_sync_flag(99, True) is None
    assert len(store) == 0


def test_list_unsynced():
    store = ExpenseStore()
    a = add(store)
    b = add(store)
    c = add(store)
    store.set_sync_flag(b.id, True)

    assert [e.id for e in store.list_unsynced()] == [a.id, c.id]


def test_to_dict_uses_api_field_names():
    expense = add(ExpenseStore(), remarks="lunch")
    data = expense.to_dict()

    assert data["googleSheetsSync"] is False
    assert data["remarks"] == "lunch"
    assert data["date"] == expense.date.isoformat()


def test_reads_while_other_threads_create():
    """Test: Listing while expenses are being added never sees the dict change mid-iteration"""
    store = ExpenseStore()
    errors = []

    def writer():
        for _ in range(500):
            add(store)

    def reader():
        try:
            for _ in range(200):
                store.list()
                store.list_by_period(6, 2024)
                store.list_unsynced()
        except RuntimeError as e:
            errors.append(e)

    threads = [threading.Thread(target=writer) for _ in range(2)]
    threads += [threading.Thread(target=reader) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(store.list()) == 1000
    assert [e.id for e in store.list_unsynced()] == list(range(1, 1001))
