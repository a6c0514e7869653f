from __future__ import annotations

from dataclasses import replace
from typing import Optional

import typer

from httpprom import __version__
from httpprom.api.config import load_config

app = typer.Typer(help="HTTP request counters exposed in the Prometheus text format")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind host (default: HTTPPROM_API_HOST or 0.0.0.0)"),
    port: Optional[int] = typer.Option(None, help="Bind port (default: HTTPPROM_API_PORT or 8000)"),
    prefix: Optional[str] = typer.Option(None, help="Metric prefix -> {prefix}_http_requests"),
    metrics_path: Optional[str] = typer.Option(None, help="Scrape path (default: /metrics)"),
    process_metrics: Optional[bool] = typer.Option(
        None, "--process-metrics/--no-process-metrics", help="Also expose process_* metrics"
    ),
):
    """Run the instrumented API with uvicorn."""
    from httpprom.api.main import run

    cfg = load_config()
    overrides = {
        "host": host,
        "port": port,
        "prefix": prefix,
        "metrics_path": metrics_path,
        "process_metrics": process_metrics,
    }
    cfg = replace(cfg, **{k: v for k, v in overrides.items() if v is not None})
    if not cfg.prefix:
        raise typer.BadParameter("prefix must be a non-empty string")
    run(cfg)


@app.command()
def version():
    """Print the package version."""
    typer.echo(__version__)


if __name__ == "__main__":
    app()
