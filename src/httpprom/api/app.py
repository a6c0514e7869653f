# src/httpprom/api/app.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from httpprom.api import __version__
from httpprom.api.config import ApiConfig, load_config
from httpprom.api.metrics import install_prometheus
from httpprom.api.middlewares.error_handler import install_error_handlers
from httpprom.api.routes import api_router
from httpprom.api.routes.metrics import build_router
from httpprom.core.counter import Registry, default_registry
from httpprom.core.process import ProcessCollector
from httpprom.utils.logger import configure_logging, get_logger

logger = get_logger("httpprom")


def _level(name: str) -> int:
    level = logging.getLevelName((name or "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def create_app(cfg: Optional[ApiConfig] = None, registry: Optional[Registry] = None) -> FastAPI:
    """
    Build the API. Each call registers `{cfg.prefix}_http_requests` in
    `registry`, so pass a fresh Registry when building more than one app.
    """
    cfg = cfg or load_config()
    registry = default_registry() if registry is None else registry

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Process-level logging baseline:
        # - console -> stderr at cfg.log_level
        # - optional log file -> cfg.log_path (if set)
        configure_logging(
            logger_name="httpprom",
            console_level=_level(cfg.log_level),
            file_level=logging.DEBUG,
            log_path=(cfg.log_path or None),
        )
        logger.info("API_STARTUP metric=%s path=%s", app.state.http_metrics.name, cfg.metrics_path)
        yield
        logger.info("API_SHUTDOWN")

    app = FastAPI(
        title="httpprom",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.metrics_registry = registry

    # Counting middleware wraps the routers and error handlers
    app.state.http_metrics = install_prometheus(app, cfg.prefix, registry=registry)

    if cfg.process_metrics:
        registry.register_collector(ProcessCollector())

    # Error handlers (stable error JSON, echoes X-Request-Id)
    install_error_handlers(app)

    # Routers
    app.include_router(api_router)
    app.include_router(build_router(cfg.metrics_path))

    return app
