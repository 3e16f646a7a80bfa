from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Optional, Union

from src.core.settings import get_app_settings

# Set per request by the request context middleware
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
tenant_var: ContextVar[Optional[str]] = ContextVar("tenant", default=None)

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | request_id=%(request_id)s | "
    "tenant=%(tenant)s | %(message)s"
)

# Log every broker connection at INFO
_CHATTY_LOGGERS = ("aiokafka",)


class LoggingContextFilter(logging.Filter):
    """
    Tags each record with the insights request id and the account number of
    the request it was emitted for, "-" outside of a request.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        record.request_id = request_id_var.get() or "-"
        record.tenant = tenant_var.get() or "-"
        return True


def _level_number(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    number = logging.getLevelName(level.strip().upper())
    return number if isinstance(number, int) else logging.INFO


# PUBLIC_INTERFACE
def configure_logging(level: Union[int, str, None] = None) -> None:
    """
    Send all logs to stdout in the structured format above.

    The level defaults to the LOG_LEVEL setting. Replaces any handler installed
    earlier, so calling it twice does not duplicate output.
    """
    if level is None:
        level = get_app_settings().LOG_LEVEL
    number = _level_number(level)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
    handler.addFilter(LoggingContextFilter())

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    root.setLevel(number)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(number, logging.WARNING))
