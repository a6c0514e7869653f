# src/httpprom/api/main.py
from __future__ import annotations

from typing import Optional

from httpprom.api.app import create_app
from httpprom.api.config import ApiConfig, load_config

# stdlib logging aliases that uvicorn's --log-level does not accept
_UVICORN_LEVEL_ALIASES = {"warn": "warning", "fatal": "critical"}
_UVICORN_LEVELS = ("critical", "error", "warning", "info", "debug", "trace")


def uvicorn_log_level(name: str) -> str:
    level = (name or "info").strip().lower()
    level = _UVICORN_LEVEL_ALIASES.get(level, level)
    return level if level in _UVICORN_LEVELS else "info"


def run(cfg: Optional[ApiConfig] = None) -> None:
    """
    Programmatic runner:
    python -m httpprom.api.main
    """
    import uvicorn  # local import to keep import graph light

    cfg = cfg or load_config()
    uvicorn.run(create_app(cfg), host=cfg.host, port=cfg.port, log_level=uvicorn_log_level(cfg.log_level))


if __name__ == "__main__":
    run()
