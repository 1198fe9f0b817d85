import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from content_relay.api.graphql.endpoint import router as graphql_router
from content_relay.api.health.endpoint import router as health_router
from content_relay.api.image.endpoint import router as image_router
from content_relay.config import Settings, load_settings
from content_relay.observability import MetricsRegistry, RequestMetricsAndLoggingMiddleware, configure_logging
from content_relay.relay.challenge import ChallengeDetector
from content_relay.relay.graphql import GraphQLRelay
from content_relay.relay.image import ImageRelay

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app.state.graphql_relay.log_configuration()
    logger.info("content relay ready, image hosts: %s", ", ".join(sorted(app.state.settings.image_allowed_hosts)))
    yield


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    detector: ChallengeDetector | None = None,
) -> FastAPI:
    """Build the relay application.

    ``settings`` defaults to the process environment, read once here. ``transport``
    replaces the network for every upstream call (tests pass an ``httpx.MockTransport``).
    """
    settings = settings or load_settings()
    configure_logging(settings)

    app = FastAPI(title="Content Relay API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.metrics = MetricsRegistry(enabled=settings.enable_metrics)
    app.state.graphql_relay = GraphQLRelay(settings, detector=detector, transport=transport)
    app.state.image_relay = ImageRelay(settings, transport=transport)

    app.add_middleware(
        RequestMetricsAndLoggingMiddleware,
        registry=app.state.metrics,
        tracked_paths=("/", "/health", "/metrics", "/api/graphql/proxy", settings.image_proxy_path),
    )

    app.include_router(health_router)
    app.include_router(graphql_router)
    app.include_router(image_router, prefix=settings.image_proxy_path)

    @app.get("/")
    def root() -> dict[str, str]:
        return {"message": "Welcome to the content relay API!"}

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> PlainTextResponse:
        return PlainTextResponse(app.state.metrics.render_prometheus())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            logger.warning("404 Error: %s %s", request.method, request.url.path)
            return JSONResponse(status_code=404, content={"message": "Route not found"})
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled server error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": "Internal Server Error"})

    return app


app = create_app()
