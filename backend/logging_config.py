"""Logging configuration for the Snap-to-Report backend.

Records go to a rotating JSON log file and to the console. Records logged while
a request is handled carry its method and path; services add fields of their
own with ``extra={'extra_fields': {...}}`` (upstream URL and status, flow step,
storage object name).
"""
import json
import logging
import os
from logging.handlers import RotatingFileHandler
from flask import has_request_context, request
from shared.models import now

LOG_FILE_NAME = 'backend.log'
MAX_LOG_BYTES = 10 * 1024 * 1024  # 10MB
LOG_BACKUPS = 5

# Third-party loggers that only report warnings and errors
QUIET_LOGGERS = ('werkzeug', 'sqlalchemy.engine', 'urllib3', 'requests', 'libcloud')


class RequestContextFilter(logging.Filter):
    """Attach the current request's method and path to each record."""

    def filter(self, record):
        if has_request_context():
            record.request_method = request.method
            record.request_path = request.path
        else:
            record.request_method = None
            record.request_path = None
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record):
        entry = {
            'timestamp': now().isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        if getattr(record, 'request_path', None):
            entry['request'] = f"{record.request_method} {record.request_path}"

        entry.update(getattr(record, 'extra_fields', None) or {})

        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def log_directory():
    return os.getenv('LOG_DIR') or os.path.join(os.path.dirname(__file__), '..', 'logs')


def setup_logging():
    """Configure the root logger; called by the application factory.

    ``LOG_LEVEL`` sets the level (default INFO) and ``LOG_DIR`` the directory
    of the JSON log file.

    Returns:
        str: Path of the JSON log file
    """
    level_name = os.getenv('LOG_LEVEL', 'INFO').upper()
    level = getattr(logging, level_name, logging.INFO)

    logs_dir = log_directory()
    os.makedirs(logs_dir, exist_ok=True)
    log_file = os.path.join(logs_dir, LOG_FILE_NAME)

    file_handler = RotatingFileHandler(log_file, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS)
    file_handler.setFormatter(StructuredFormatter())

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s %(levelname)-8s %(name)-20s %(message)s'
    ))

    root = logging.getLogger()
    root.setLevel(level)
    # Clear existing handlers to avoid duplicates when the factory runs again
    root.handlers.clear()

    request_filter = RequestContextFilter()
    for handler in (file_handler, console_handler):
        handler.setLevel(level)
        handler.addFilter(request_filter)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.info(f"Logging initialized at {level_name}", extra={'extra_fields': {'log_file': log_file}})
    return log_file
