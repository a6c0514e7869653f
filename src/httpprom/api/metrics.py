# src/httpprom/api/metrics.py
from __future__ import annotations

from typing import Optional

from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from httpprom.api.middlewares.prometheus import PrometheusMiddleware
from httpprom.core.counter import CounterVec, MetricDescriptor, Registry, default_registry
from httpprom.core.exposition import render
from httpprom.utils.logger import get_logger

logger = get_logger("httpprom")

HTTP_REQUESTS_SUFFIX = "_http_requests"
HTTP_REQUESTS_HELP = "Counts http requests"
HTTP_REQUESTS_LABELS = ("method", "status")


class HttpMetrics:
    """
    Default HTTP metrics for one prefix.

    Creating it registers `{prefix}_http_requests` in `registry` (the default
    registry when omitted), so build it once per prefix and share the handle.
    """

    def __init__(self, prefix: str, registry: Optional[Registry] = None) -> None:
        if not isinstance(prefix, str) or not prefix:
            raise ValueError("metric prefix must be a non-empty string")
        self.registry = default_registry() if registry is None else registry
        self.counter: CounterVec = self.registry.register(
            MetricDescriptor(
                name=f"{prefix}{HTTP_REQUESTS_SUFFIX}",
                help=HTTP_REQUESTS_HELP,
                label_names=HTTP_REQUESTS_LABELS,
            )
        )
        logger.info("HTTP_METRICS_READY metric=%s", self.name)

    @property
    def name(self) -> str:
        return self.counter.name

    def record(self, method: str, status: str) -> None:
        self.counter.observe([method, status])


def install_prometheus(app: ASGIApp, prefix: str, registry: Optional[Registry] = None) -> HttpMetrics:
    """
    Register `{prefix}_http_requests` and wrap `app` (Starlette/FastAPI) with
    the counting middleware. Returns the handle.
    """
    metrics = HttpMetrics(prefix, registry=registry)
    app.add_middleware(PrometheusMiddleware, metrics=metrics)  # type: ignore[attr-defined]
    return metrics


def metrics_endpoint(request: Request) -> Response:
    """
    Prometheus scrape endpoint.

    Encodes `request.app.state.metrics_registry` when set, the default
    registry otherwise.

    NOTE:
    - Mounting it on an instrumented app makes scrapes count themselves.
    """
    registry = getattr(request.app.state, "metrics_registry", None)
    body, content_type = render(registry)
    return Response(content=body, media_type=content_type)
