from pathlib import Path
import os
import time

import click
from flask import Blueprint, Flask, current_app, jsonify, request
from flask.cli import with_appcontext
from werkzeug.exceptions import HTTPException

from config import Config
from errors import ExpenseTrackerError
from expense_sync import ExpenseSyncService
from forms import EXPENSE_TYPES, validate_connect, validate_period
from logging_config import configure_logging, get_logger
from settings_store import SettingsStore
from sheets_client import GspreadSheetsClient
from sheets_connection import ConnectionManager
from storage import ExpenseStore
from worksheets import WorksheetResolver

APP_DIR = Path(__file__).parent

logger = get_logger(__name__)

api = Blueprint("api", __name__, url_prefix="/api")


class ExpenseTracker:
    """Everything a request handler needs, built once per app"""

    def __init__(self, store, settings, connection, sync):
        self.store = store
        self.settings = settings
        self.connection = connection
        self.sync = sync


def get_tracker() -> ExpenseTracker:
    return current_app.extensions["expense_tracker"]


@api.route("/expenses", methods=["GET"])
def list_expenses():
    expenses = get_tracker().store.list()
    return jsonify([e.to_dict() for e in expenses])


@api.route("/expenses/filter", methods=["GET"])
def filter_expenses():
    month, year = validate_period(request.args)
    expenses = get_tracker().store.list_by_period(month, year)
    return jsonify([e.to_dict() for e in expenses])


@api.route("/expenses", methods=["POST"])
def create_expense():
    payload = request.get_json(silent=True)
    expense = get_tracker().sync.create_expense(payload)
    return jsonify(expense.to_dict()), 201


@api.route("/expenses/sync", methods=["POST"])
def sync_pending_expenses():
    """Retry expenses that were stored but never reached the sheet"""
    result = get_tracker().sync.sync_pending()
    return jsonify(result.to_dict())


@api.route("/expense-types", methods=["GET"])
def expense_types():
    return jsonify(EXPENSE_TYPES)


@api.route("/google-sheets/status", methods=["GET"])
def google_sheets_status():
    state = get_tracker().connection.verify()
    return jsonify(state.to_dict())


@api.route("/google-sheets/connect", methods=["POST"])
def google_sheets_connect():
    spreadsheet_id = validate_connect(request.get_json(silent=True))
    # 200 even when the connect fails; the body says why
    state = get_tracker().connection.connect(spreadsheet_id)
    return jsonify(state.to_dict())


def handle_app_error(error):
    return jsonify(error.to_dict()), error.status_code


def handle_http_error(error):
    return jsonify({"message": error.description}), error.code


def handle_unexpected_error(error):
    logger.exception("Unexpected error handling %s %s", request.method, request.path)
    return jsonify({"message": "Unexpected server error"}), 500


def ping():
    """Ultra-fast health check for keep-alive - no DB or Sheets calls"""
    return jsonify({"status": "ok", "timestamp": time.time()}), 200


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Create the settings table."""
    get_tracker().settings.init_db()
    click.echo("Database initialized")


def create_app(overrides=None, sheets_client=None, settings_store=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    configure_logging(app.config["LOG_LEVEL"], app.config.get("LOG_FILE"))

    if settings_store is None:
        settings_store = SettingsStore.from_url(app.config["DATABASE_URL"])
    settings_store.init_db()

    if sheets_client is None:
        sheets_client = GspreadSheetsClient.from_config(app.config)

    store = ExpenseStore()
    connection = ConnectionManager(sheets_client, settings_store)
    sync = ExpenseSyncService(store, connection, WorksheetResolver())
    app.extensions["expense_tracker"] = ExpenseTracker(store, settings_store, connection, sync)

    connection.restore_from_durable_store()

    app.json.sort_keys = False
    app.register_blueprint(api)
    app.add_url_rule("/ping", view_func=ping)
    app.register_error_handler(ExpenseTrackerError, handle_app_error)
    app.register_error_handler(HTTPException, handle_http_error)
    app.register_error_handler(Exception, handle_unexpected_error)
    app.cli.add_command(init_db_command)

    return app


if __name__ == "__main__":
    app = create_app()

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))

    # SSL support: set SSL_CERT and SSL_KEY env vars to point to cert/key files
    ssl_cert = os.environ.get("SSL_CERT") or str(APP_DIR / "cert.pem")
    ssl_key = os.environ.get("SSL_KEY") or str(APP_DIR / "key.pem")

    if Path(ssl_cert).exists() and Path(ssl_key).exists():
        logger.info("Starting server with SSL on https://%s:%s", host, port)
        app.run(host=host, port=port, ssl_context=(ssl_cert, ssl_key))
    else:
        logger.info("Starting server without SSL on http://%s:%s", host, port)
        app.run(host=host, port=port)
