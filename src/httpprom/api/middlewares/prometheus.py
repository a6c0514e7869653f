# src/httpprom/api/middlewares/prometheus.py
from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from httpprom.utils.logger import get_logger

if TYPE_CHECKING:
    from httpprom.api.metrics import HttpMetrics

logger = get_logger("httpprom.access")


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    Counts every request into `{prefix}_http_requests{method, status}`.

    The status is taken from the downstream response; if the downstream raises,
    the request is counted as 500 and the exception propagates unchanged.
    """

    def __init__(self, app, metrics: HttpMetrics) -> None:
        super().__init__(app)
        self.metrics = metrics

    def _record(self, method: str, status: int) -> None:
        try:
            self.metrics.record(method, str(status))
        except Exception:
            # Never let counting alter the wrapped response
            logger.exception("METRICS_RECORD_FAILED metric=%s method=%s status=%s", self.metrics.name, method, status)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        method = request.method

        status = 500
        try:
            resp = await call_next(request)
            status = resp.status_code
            return resp
        finally:
            self._record(method, status)
