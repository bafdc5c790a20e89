"""Logging configuration for the application."""
import logging
from logging.handlers import RotatingFileHandler

LOGGER_NAME = "expense_tracker"

LOG = logging.getLogger(LOGGER_NAME)

formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")


def get_logger(name):
    """Child of the application logger, e.g. expense_tracker.sheets_connection"""
    return LOG.getChild(name)


def configure_logging(level="INFO", log_file=None, max_bytes=5 * 1024 * 1024, backup_count=5):
    """Attach console (and optionally rotating file) handlers to the app logger.

    Safe to call more than once: handlers are only added the first time.

    Args:
        level: Log level name or number
        log_file: Optional path for a rotating log file
        max_bytes: Maximum size of log file before rotation (default: 5MB)
        backup_count: Number of backup log files to keep (default: 5)
    """
    LOG.setLevel(level)

    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
               for h in LOG.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        LOG.addHandler(console_handler)

    if log_file and not any(isinstance(h, RotatingFileHandler) for h in LOG.handlers):
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count
        )
        file_handler.setFormatter(formatter)
        LOG.addHandler(file_handler)

    return LOG
