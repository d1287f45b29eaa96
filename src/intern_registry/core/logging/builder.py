# src/intern_registry/core/logging/builder.py
"""
Logging builder: assemble a dictConfig mapping from Settings, apply it, and
optionally move the real handlers behind a QueueListener thread so request
handlers only pay for an enqueue.

Settings used: LOG_LEVEL, LOG_FORMAT, LOG_TO_STDOUT, LOG_DIR, LOG_MAX_BYTES,
LOG_BACKUP_COUNT, LOG_USE_QUEUE, ENABLE_SQL_LOGGING, ENV. Any object with
these attributes works (tests pass a SimpleNamespace).
"""

from __future__ import annotations

from pathlib import Path
import logging
import logging.config
import queue as _queue
from logging.handlers import QueueHandler, QueueListener
from typing import Optional

from intern_registry.utils.logging import get_project_name
from .formatters import JsonFormatter, ColorFormatter
from .filters import RequestIdFilter, RedactFilter
from .handlers import (
    get_console_handler,
    get_file_handler,
    get_error_file_handler,
    get_error_console_handler,
)

_QUEUE_LISTENER: Optional[QueueListener] = None


def _writes_files(settings) -> bool:
    return (not settings.LOG_TO_STDOUT) and bool(settings.LOG_DIR)


def make_dict_config(settings) -> dict:
    """
    Build the dictConfig mapping.

    Handlers: console always; file + error_file when logging to LOG_DIR,
    otherwise error_console. Loggers: root, uvicorn.*, sqlalchemy.engine.
    """
    formatters = {
        "standard": {
            "()": ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter,
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s",
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": get_project_name(),
        },
    }

    filters = {
        "request_id": {"()": RequestIdFilter},
        "redact": {"()": RedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}
    if _writes_files(settings):
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers.keys()),
                "level": settings.LOG_LEVEL,
            },
            "uvicorn.error": {
                "level": settings.LOG_LEVEL,
                "handlers": list(handlers.keys()),
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "INFO" if settings.ENABLE_SQL_LOGGING else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def setup_logging(settings) -> None:
    """
    Apply the logging configuration.

    1. Create LOG_DIR when writing files.
    2. dictConfig(make_dict_config(settings)).
    3. With LOG_USE_QUEUE: detach the root handlers, run them in a
       QueueListener thread and put a QueueHandler on the root logger. The
       request-id and redact filters go on the QueueHandler so they run in
       the producing task, where the request contextvar is still set.
    """
    global _QUEUE_LISTENER

    # A previous queue listener would keep writing with stale handlers.
    stop_queue_logging()

    if _writes_files(settings):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))

    if not getattr(settings, "LOG_USE_QUEUE", False):
        return

    root_logger = logging.getLogger()
    real_handlers = list(root_logger.handlers)
    if not real_handlers:
        return
    for handler in real_handlers:
        root_logger.removeHandler(handler)

    log_queue: _queue.Queue = _queue.Queue()
    listener = QueueListener(log_queue, *real_handlers, respect_handler_level=True)
    listener.start()

    queue_handler = QueueHandler(log_queue)
    queue_handler.addFilter(RequestIdFilter())
    queue_handler.addFilter(RedactFilter())
    root_logger.addHandler(queue_handler)

    _QUEUE_LISTENER = listener


def stop_queue_logging() -> None:
    """
    Flush and stop the background QueueListener, if one is running.
    """
    global _QUEUE_LISTENER
    listener = _QUEUE_LISTENER
    if listener is None:
        return
    try:
        listener.stop()
    except Exception:
        logging.getLogger(__name__).exception("Failed to stop QueueListener cleanly")
    finally:
        _QUEUE_LISTENER = None
