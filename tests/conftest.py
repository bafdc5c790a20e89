# Shared test setup: a fake Google Sheets service and a throwaway SQLite settings DB

import pytest

from app import create_app
from settings_store import SettingsStore
from fakes import FakeSheetsClient


@pytest.fixture
def sheets():
    return FakeSheetsClient()


@pytest.fixture
def settings_store(tmp_path):
    store = SettingsStore.from_url(f"sqlite:///{tmp_path / 'settings.db'}")
    store.init_db()
    return store


@pytest.fixture
def app(sheets, settings_store, tmp_path):
    """Create a test version of our Flask app"""
    return create_app(
        {"TESTING": True, "DATABASE_URL": f"sqlite:///{tmp_path / 'settings.db'}"},
        sheets_client=sheets,
        settings_store=settings_store,
    )


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def tracker(app):
    return app.extensions["expense_tracker"]


@pytest.fixture
def document(sheets):
    return sheets.add_document("sheet-123", title="My Expenses")


@pytest.fixture
def connected_client(client, document):
    """Client whose app is already connected to spreadsheet sheet-123"""
    response = client.post("/api/google-sheets/connect", json={"spreadsheetId": "sheet-123"})
    assert response.get_json()["connected"] is True
    return client
