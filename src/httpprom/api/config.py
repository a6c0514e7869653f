from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env(name: str, default: str) -> str:
    return os.getenv(name, default)


def _env_bool(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip() not in ("", "0", "false", "False", "no")


@dataclass(frozen=True)
class ApiConfig:
    """
    API runtime config (env-driven, read when the config is built).

    Only `prefix` reaches the metrics core; the rest is server glue.
    """

    # Metric name prefix -> "{prefix}_http_requests"
    prefix: str = field(default_factory=lambda: _env("HTTPPROM_PREFIX", "http"))

    # Scrape path for the exposition endpoint
    metrics_path: str = field(default_factory=lambda: _env("HTTPPROM_METRICS_PATH", "/metrics"))

    # Register process_* metrics alongside the request counter
    process_metrics: bool = field(default_factory=lambda: _env_bool("HTTPPROM_PROCESS_METRICS"))

    # Logging knobs
    log_level: str = field(default_factory=lambda: _env("HTTPPROM_LOG_LEVEL", "INFO"))
    log_path: str = field(default_factory=lambda: _env("HTTPPROM_LOG_PATH", ""))

    # Runner bind
    host: str = field(default_factory=lambda: _env("HTTPPROM_API_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(_env("HTTPPROM_API_PORT", "8000")))

    def __post_init__(self) -> None:
        # dataclass(frozen=True): normalize via object.__setattr__
        path = (self.metrics_path or "").strip() or "/metrics"
        if not path.startswith("/"):
            path = "/" + path
        object.__setattr__(self, "metrics_path", path)


def load_config() -> ApiConfig:
    return ApiConfig()
