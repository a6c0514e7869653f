# src/httpprom/api/routes/metrics.py
from __future__ import annotations

from fastapi import APIRouter, Request, Response

from httpprom.api.metrics import metrics_endpoint


def build_router(path: str = "/metrics") -> APIRouter:
    r = APIRouter(tags=["metrics"])

    @r.get(path, include_in_schema=False)
    def prom_metrics(request: Request) -> Response:
        return metrics_endpoint(request)

    return r


router = build_router()
