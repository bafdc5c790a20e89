from sqlalchemy import func, select

from models import Setting


def test_get_missing_key(settings_store):
    assert settings_store.get("nothing-here") is None


def test_set_then_get(settings_store):
    settings_store.set("google_sheets_spreadsheet_id", "abc")
    assert settings_store.get("google_sheets_spreadsheet_id") == "abc"


def test_set_overwrites_single_row(settings_store):
    settings_store.set("key", "first")
    settings_store.set("key", "second")

    assert settings_store.get("key") == "second"
    with settings_store.Session() as session:
        count = session.execute(select(func.count()).select_from(Setting)).scalar_one()
    assert count == 1


def test_init_db_is_idempotent(settings_store):
    settings_store.set("key", "value")
    settings_store.init_db()
    assert settings_store.get("key") == "value"


def test_value_survives_new_store_instance(settings_store):
    from settings_store import SettingsStore

    settings_store.set("key", "value")
    reopened = SettingsStore(settings_store.engine)
    assert reopened.get("key") == "value"
