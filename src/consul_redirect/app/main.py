"""Redirect service FastAPI application factory.

The create_app() factory is the single entry point for building the ASGI
application. It wires observability middleware, builds the resolver and
injects the catalog client.

Usage:
    # Next to a Consul agent
    app = create_app(RedirectSettings.from_env())

    # Testing (no network)
    app = create_app(settings, catalog_client=InMemoryCatalogClient())
"""

from __future__ import annotations

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from starlette.responses import PlainTextResponse, Response

from ..observability.logging import get_logger
from ..observability.metrics import metrics_text
from ..observability.middleware import (
    MetricsMiddleware,
    RequestIdMiddleware,
    RequestLoggingMiddleware,
)
from .presentation import render_outcome
from .protocols import CatalogClient
from .providers.consul_client import ConsulCatalogClient
from .routing.hostname import strip_port
from .routing.resolver import Resolver
from .settings import RedirectSettings

logger = get_logger(__name__)

# Every method is redirected, not only GET.
_SERVED_METHODS = ['GET', 'HEAD', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']


def create_app(
    settings: RedirectSettings | None = None,
    *,
    catalog_client: CatalogClient | None = None,
) -> FastAPI:
    """Create a configured redirect application.

    Args:
        settings: Service settings. Defaults to local settings.
        catalog_client: Catalog override. When None, a Consul client is
            built from ``settings`` and its HTTP pool is closed on shutdown.

    Returns:
        Configured FastAPI application ready for uvicorn.run().

    Raises:
        ValueError: If settings validation fails.
    """
    if settings is None:
        settings = RedirectSettings()

    errors = settings.validate()
    if errors:
        raise ValueError(
            "Redirect settings validation failed:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    owned_http_client: httpx.AsyncClient | None = None
    if catalog_client is None:
        owned_http_client = httpx.AsyncClient()
        catalog_client = ConsulCatalogClient(
            base_url=settings.consul_http_addr,
            token=settings.consul_http_token,
            http_client=owned_http_client,
            timeout_seconds=settings.consul_timeout_seconds,
        )

    resolver = Resolver(settings, catalog_client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "redirector_startup",
            consul=settings.consul_http_addr,
            hostname_suffix=settings.hostname_suffix,
            custom_routes=len(settings.custom_routes),
            redirect_to_nomad_ui=settings.redirect_to_nomad_ui,
        )
        try:
            yield
        finally:
            if owned_http_client is not None:
                await owned_http_client.aclose()
            logger.info("redirector_shutdown")

    app = FastAPI(
        title="Consul Redirect",
        description="Redirects Consul service hostnames to a live service port",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.settings = settings
    app.state.resolver = resolver

    # ── Middleware stack (applied in reverse order) ──────────────
    # Order of execution: RequestID -> Metrics -> RequestLogging -> handler
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIdMiddleware)

    # ── Routes ──────────────────────────────────────────────────

    @app.api_route("/{path:path}", methods=_SERVED_METHODS)
    async def serve(request: Request, path: str) -> Response:
        trimmed = request.url.path.removeprefix("/")

        # Allow for health checks at /healthy and /healthz
        if trimmed.startswith("health"):
            logger.debug(
                "health_check",
                host=request.headers.get("host", ""),
                path=request.url.path,
            )
            return PlainTextResponse("ok")

        if trimmed.startswith("metrics"):
            payload, content_type = metrics_text()
            return Response(content=payload, media_type=content_type)

        hostname = strip_port(request.headers.get("host", ""))
        outcome = await resolver.resolve(hostname, request.url)
        return render_outcome(request, outcome, hostname=hostname, settings=settings)

    return app
