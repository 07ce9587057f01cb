"""Request timing and per-status-class counters."""
from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import dataclass, field

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

SLOW_REQUEST_MS = 1000.0


@dataclass
class RequestStats:
    by_status_class: Counter[str] = field(default_factory=Counter)
    slow: int = 0

    def record(self, status_code: int, elapsed_ms: float) -> None:
        self.by_status_class[f"{status_code // 100}xx"] += 1
        if elapsed_ms >= SLOW_REQUEST_MS:
            self.slow += 1

    def snapshot(self) -> dict[str, int]:
        return {**self.by_status_class, "slow": self.slow}


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Logs every request and counts it in ``app.state.request_stats``.

    Requests slower than ``SLOW_REQUEST_MS`` are logged at WARNING.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        stats: RequestStats | None = getattr(request.app.state, "request_stats", None)
        if stats is not None:
            stats.record(response.status_code, elapsed_ms)

        logger.log(
            logging.WARNING if elapsed_ms >= SLOW_REQUEST_MS else logging.INFO,
            "%s %s %s %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        response.headers["Server-Timing"] = f"app;dur={elapsed_ms:.1f}"
        return response
