import os
import sys
import json
import logging
from logging.handlers import RotatingFileHandler

from flask import g, has_request_context

# Package logger: every module logger (cinesift_app.*) propagates here
logger = logging.getLogger("cinesift_app")
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO').upper())

# Determine log file path
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
LOG_DIR = os.environ.get('LOG_DIR', os.path.join(BASE_DIR, 'instance'))
LOG_FILE = os.path.join(LOG_DIR, 'cinesift.log')
LOG_TO_FILE = os.environ.get('LOG_TO_FILE', 'true').lower() in ('1', 'true', 'yes', 'on')


class RequestIdFilter(logging.Filter):
    """Prefix records emitted inside a Flask request with its request id."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_prefix = _request_prefix()
        return True


def _request_prefix() -> str:
    """Return request id prefix if available."""
    if has_request_context() and getattr(g, "request_id", None):
        return f"[{g.request_id}] "
    return ""


if not logger.handlers:
    request_filter = RequestIdFilter()

    if LOG_TO_FILE:
        os.makedirs(LOG_DIR, exist_ok=True)
        file_handler = RotatingFileHandler(LOG_FILE, maxBytes=10*1024*1024, backupCount=5, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(levelname)s - %(name)s - %(request_prefix)s%(message)s'
        ))
        file_handler.addFilter(request_filter)
        logger.addHandler(file_handler)

    # Stream Handler (stdout)
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(logging.Formatter('%(request_prefix)s%(message)s'))  # Keep stdout clean
    stream_handler.addFilter(request_filter)
    logger.addHandler(stream_handler)

# Structured per-request events (one JSON object per line)
DEBUG_LOGGING = os.environ.get('DEBUG_LOGGING', 'false').lower() in ('1', 'true', 'yes', 'on')
DEBUG_LOG_FILE = os.path.join(LOG_DIR, 'debug.log')

debug_logger = logging.getLogger("cinesift_app.debug")
debug_logger.setLevel(logging.INFO)
debug_logger.propagate = False
if DEBUG_LOGGING and not any(getattr(h, "baseFilename", None) == DEBUG_LOG_FILE for h in debug_logger.handlers):
    os.makedirs(LOG_DIR, exist_ok=True)
    debug_handler = RotatingFileHandler(DEBUG_LOG_FILE, maxBytes=10 * 1024 * 1024, backupCount=10, encoding='utf-8')
    debug_handler.setFormatter(logging.Formatter('%(message)s'))
    debug_logger.addHandler(debug_handler)
if not DEBUG_LOGGING:
    debug_logger.disabled = True


def log(msg: str) -> None:
    """Log an application-level message (request id added by the handlers)."""
    logger.info(msg)


def debug_log_event(event: dict) -> None:
    """Write structured debug events to a local file."""
    if debug_logger.disabled:
        return
    try:
        debug_logger.info(json.dumps(event, ensure_ascii=False, separators=(',', ':')))
    except (TypeError, ValueError) as exc:
        logger.info(f"Debug log failure: {exc}")
