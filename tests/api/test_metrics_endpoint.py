from __future__ import annotations

import pytest

fastapi = pytest.importorskip("fastapi")
from fastapi import FastAPI, Response
from fastapi.testclient import TestClient

from httpprom.api.metrics import HttpMetrics, install_prometheus
from httpprom.api.middlewares.error_handler import install_error_handlers
from httpprom.api.routes.metrics import build_router
from httpprom.core.counter import Registry
from httpprom.core.errors import DuplicateMetricName, EncodingIOFailure
from httpprom.core.exposition import CONTENT_TYPE
from tests._helpers import sample_lines

METRICS = """
# HELP custom_http_requests Counts http requests
# TYPE custom_http_requests counter
custom_http_requests{method="HEAD",status="500"} 1
custom_http_requests{method="DELETE",status="500"} 1
# HELP tide_http_requests Counts http requests
# TYPE tide_http_requests counter
tide_http_requests{method="GET",status="200"} 1
tide_http_requests{method="POST",status="200"} 1
"""


def _app_with_status(status: int, registry: Registry, prefix: str) -> FastAPI:
    app = FastAPI()
    app.state.metrics_registry = registry

    @app.api_route("/route", methods=["GET", "POST", "HEAD", "DELETE"])
    def route() -> Response:
        return Response(status_code=status)

    install_prometheus(app, prefix, registry=registry)
    return app


def _scrape_app(registry: Registry) -> FastAPI:
    app = FastAPI()
    app.state.metrics_registry = registry
    app.include_router(build_router())
    return app


def test_metrics_from_two_prefixes() -> None:
    registry = Registry()
    ok = TestClient(_app_with_status(200, registry, "tide"))
    ise = TestClient(_app_with_status(500, registry, "custom"))

    assert ok.get("/route").status_code == 200
    assert ok.post("/route").status_code == 200
    assert ise.head("/route").status_code == 500
    assert ise.delete("/route").status_code == 500

    resp = TestClient(_scrape_app(registry)).get("/metrics")

    assert resp.status_code == 200
    assert resp.headers["content-type"] == CONTENT_TYPE
    for line in METRICS.strip().splitlines():
        assert line in resp.text
    assert resp.text == METRICS.lstrip()


def test_prefixes_have_independent_partitions() -> None:
    registry = Registry()
    tide = HttpMetrics("tide", registry=registry)
    custom = HttpMetrics("custom", registry=registry)

    tide.record("GET", "200")

    assert custom.counter.snapshot() == []
    body = TestClient(_scrape_app(registry)).get("/metrics").content
    assert sample_lines(body, "custom_http_requests") == []
    assert sample_lines(body, "tide_http_requests") == ['tide_http_requests{method="GET",status="200"} 1']


def test_same_prefix_twice_is_a_setup_error() -> None:
    registry = Registry()
    HttpMetrics("tide", registry=registry)

    with pytest.raises(DuplicateMetricName):
        HttpMetrics("tide", registry=registry)


@pytest.mark.parametrize("prefix", ["", None])
def test_prefix_must_be_non_empty(prefix) -> None:
    with pytest.raises(ValueError):
        HttpMetrics(prefix, registry=Registry())  # type: ignore[arg-type]


def test_downstream_exception_counts_as_500_and_propagates() -> None:
    registry = Registry()
    app = FastAPI()

    @app.get("/boom")
    def boom() -> dict:
        raise RuntimeError("boom")

    metrics = install_prometheus(app, "tide", registry=registry)
    client = TestClient(app, raise_server_exceptions=False)

    assert client.get("/boom").status_code == 500
    assert metrics.counter.get(["GET", "500"]) == 1


def test_recording_failure_does_not_alter_response() -> None:
    registry = Registry()
    app = FastAPI()

    @app.get("/ok")
    def ok() -> dict:
        return {"ok": True}

    metrics = install_prometheus(app, "tide", registry=registry)

    def broken_record(method: str, status: str) -> None:
        raise RuntimeError("counter store unavailable")

    metrics.record = broken_record  # type: ignore[method-assign]

    resp = TestClient(app).get("/ok")

    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


def test_scrape_failure_only_fails_the_scrape(monkeypatch) -> None:
    registry = Registry()
    app = FastAPI()
    app.state.metrics_registry = registry

    @app.get("/ok")
    def ok() -> dict:
        return {"ok": True}

    metrics = install_prometheus(app, "tide", registry=registry)
    install_error_handlers(app)
    app.include_router(build_router())

    def failing_render(_registry):
        raise EncodingIOFailure("write rejected")

    monkeypatch.setattr("httpprom.api.metrics.render", failing_render)
    client = TestClient(app)

    scrape = client.get("/metrics", headers={"X-Request-Id": "scrape-1"})
    assert scrape.status_code == 500
    assert scrape.json()["error"]["code"] == "encoding_io_failure"
    assert scrape.json()["error"]["request_id"] == "scrape-1"
    assert client.get("/metrics").json()["error"]["request_id"] == ""

    assert client.get("/ok").status_code == 200
    assert metrics.counter.get(["GET", "200"]) == 1
    assert metrics.counter.get(["GET", "500"]) == 2


def test_endpoint_on_plain_starlette_app() -> None:
    from starlette.applications import Starlette
    from starlette.routing import Route

    from httpprom.api.metrics import metrics_endpoint

    registry = Registry()
    HttpMetrics("tide", registry=registry).record("GET", "200")
    app = Starlette(routes=[Route("/metrics", metrics_endpoint)])
    app.state.metrics_registry = registry

    resp = TestClient(app).get("/metrics")

    assert resp.headers["content-type"] == CONTENT_TYPE
    assert 'tide_http_requests{method="GET",status="200"} 1' in resp.text
