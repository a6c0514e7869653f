from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from httpprom.core.errors import MetricsError
from httpprom.utils.logger import get_logger

logger = get_logger("httpprom")

REQUEST_ID_HEADER = "X-Request-Id"

def _err_payload(
    *,
    code: str,
    message: str,
    request_id: Optional[str],
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details or {},
            "request_id": request_id or "",
        }
    }

def install_error_handlers(app: FastAPI) -> None:
    """
    Centralized error handling.

    A MetricsError only ever fails the request that raised it (in practice the
    scrape); it is answered with a 500 and a stable error code.
    """

    @app.exception_handler(MetricsError)
    async def _handle_metrics_error(request: Request, exc: MetricsError) -> JSONResponse:
        rid = request.headers.get(REQUEST_ID_HEADER)
        logger.error(f"METRICS_ERROR rid={rid} path={request.url.path} code={exc.code} msg={exc.message}")
        return JSONResponse(
            status_code=500,
            content=_err_payload(code=exc.code, message=exc.message, request_id=rid, details=exc.details),
        )
