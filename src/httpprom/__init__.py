"""
Request-count telemetry for Starlette/FastAPI apps, exposed in the
Prometheus text format.

    from httpprom.api.metrics import install_prometheus
    from httpprom.api.routes.metrics import router as metrics_router

    app = FastAPI()
    install_prometheus(app, "tide")
    app.include_router(metrics_router)
"""
from __future__ import annotations

__version__ = "0.1.0"

from httpprom.core import (  # noqa: E402
    CONTENT_TYPE,
    CounterVec,
    DuplicateMetricName,
    EncodingIOFailure,
    InvalidMetricDescriptor,
    LabelCardinalityMismatch,
    MetricDescriptor,
    MetricsError,
    ProcessCollector,
    Registry,
    default_registry,
    encode,
    register_counter,
    render,
    write_to,
)

__all__ = [
    "__version__",
    "CONTENT_TYPE",
    "CounterVec",
    "DuplicateMetricName",
    "EncodingIOFailure",
    "InvalidMetricDescriptor",
    "LabelCardinalityMismatch",
    "MetricDescriptor",
    "MetricsError",
    "ProcessCollector",
    "Registry",
    "default_registry",
    "encode",
    "register_counter",
    "render",
    "write_to",
]
