from __future__ import annotations

from fastapi import APIRouter

from httpprom.api import __version__

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict:
    return {"ok": True, "service": "httpprom", "version": __version__}


@router.get("/healthz")
def healthz() -> dict:
    """
    Liveness: must be fast and never block on external deps.
    """
    return {"ok": True}


@router.get("/readyz")
def readyz() -> dict:
    return {"ok": True}
