"""Process-wide logging setup."""
from __future__ import annotations

import logging
import sys

from portal_messaging.api.middleware.correlation_id import correlation_id_ctx

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(correlation_id)s]: %(message)s"

_handler: logging.Handler | None = None


class CorrelationIdFilter(logging.Filter):
    """Stamps each record with the current request's correlation id."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_ctx.get() or "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    """Install one stdout handler on the root logger; safe to call twice."""
    global _handler  # noqa: PLW0603
    root = logging.getLogger()
    root.setLevel(level.upper())
    if _handler is not None:
        return
    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    _handler.addFilter(CorrelationIdFilter())
    root.addHandler(_handler)
