# src/httpprom/api/routes/__init__.py
from __future__ import annotations

from fastapi import APIRouter

# Root router to be included by app.py (metrics router is mounted separately,
# its path is configurable)
api_router = APIRouter()

from httpprom.api.routes.health import router as health_router  # noqa: E402

api_router.include_router(health_router)
