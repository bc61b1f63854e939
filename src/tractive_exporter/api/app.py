# src/tractive_exporter/api/app.py
"""
FastAPI application wiring.

This file creates the `FastAPI` instance and serves two routes:
- `GET /`: a static landing page linking to the metrics path,
- `GET <metrics_path>`: one poll cycle rendered in Prometheus text format.

Polling and metric derivation live in `tractive_exporter.exporter`.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import HTMLResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from prometheus_client.registry import CollectorRegistry

from tractive_exporter.config.settings import Settings, get_settings
from tractive_exporter.exporter.collector import TractiveCollector
from tractive_exporter.exporter.engine import PollEngine, build_engine

LANDING_PAGE = """<html>
<head><title>Tractive Exporter</title></head>
<body>
<h1>Tractive Tracker Data Exporter</h1>
<p><a href='{metrics_path}'>Metrics</a></p>
</body>
</html>"""


def create_app(settings: Settings | None = None, engine: PollEngine | None = None) -> FastAPI:
    """Build the exporter app; `engine` defaults to one wired from `settings`."""
    settings = settings or get_settings()
    engine = engine or build_engine(settings)
    metrics_path = settings.web.metrics_path

    registry = CollectorRegistry()
    registry.register(TractiveCollector(engine))

    app = FastAPI(title=settings.app.name, version="0.1.0", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.engine = engine
    app.state.registry = registry

    # Sync handlers: FastAPI runs them in its thread pool, so a slow poll does not block the loop.
    def metrics() -> Response:
        return Response(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

    def index() -> HTMLResponse:
        return HTMLResponse(LANDING_PAGE.format(metrics_path=metrics_path))

    app.add_api_route(metrics_path, metrics, methods=["GET"], include_in_schema=False)
    if metrics_path != "/":
        app.add_api_route("/", index, methods=["GET"], response_class=HTMLResponse, include_in_schema=False)
    return app
