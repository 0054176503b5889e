from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Optional, Union

# Set by the HTTP middleware and the auth dependency for the current request.
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
user_var: ContextVar[Optional[str]] = ContextVar("user", default=None)

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(correlation_id)s] %(user)s %(name)s: %(message)s"

_HANDLER_NAME = "pipetrack"


class LoggingContextFilter(logging.Filter):
    """Stamp each record with the request's correlation id and acting user ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get() or "-"
        record.user = user_var.get() or "-"
        return True


# PUBLIC_INTERFACE
def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Install the service's stdout handler on the root logger.

    Safe to call more than once: the previous pipetrack handler is replaced,
    handlers installed by others (pytest's capture, uvicorn) are left alone.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(LoggingContextFilter())

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
