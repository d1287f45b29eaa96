# src/intern_registry/core/logging/filters.py
"""
Logging filters.

- RequestIdFilter stamps every LogRecord with the id of the HTTP request
  being served (stored in a contextvar by RequestIDMiddleware), or "-".
- RedactFilter hides secrets and masks intern email addresses passed via
  `extra={...}` so personal data does not land in log files verbatim.

A contextvar (not threading.local) is used because each request runs as its
own asyncio task and the id must survive `await` boundaries.
"""

import logging
from logging import LogRecord
import contextvars

_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


def set_request_id(request_id: str | None):
    """
    Set the request id for the current context.

    Returns:
        token: pass it to reset_request_id() to restore the previous value
    """
    return _request_id_ctx.set(request_id)


def reset_request_id(token):
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Guarantee `record.request_id` exists: an explicit `extra` value wins,
    then the contextvar, then the "-" sentinel. Never drops a record.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


def mask_email(value) -> str:
    """
    'alice.smith@example.com' -> 'a***@example.com'. Non-emails are fully masked.
    """
    text = str(value)
    local, sep, domain = text.partition("@")
    if not sep or not local:
        return "***"
    return f"{local[0]}***@{domain}"


class RedactFilter(logging.Filter):
    SENSITIVE = {"password", "secret", "token", "access_token", "refresh_token", "authorization"}
    PARTIAL = {"email"}

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            lowered = key.lower()
            if lowered in self.SENSITIVE:
                record.__dict__[key] = "***REDACTED***"
            elif lowered in self.PARTIAL and record.__dict__[key] is not None:
                record.__dict__[key] = mask_email(record.__dict__[key])
        return True
