"""FastAPI entrypoint for the Daybook journal backend."""

import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .api.dependencies import get_settings
from .api.envelope import install_exception_handlers
from .api.routers import entries, health, search, stats
from .config import Settings
from .infra.logging import configure_logging, get_logger
from .infra.metrics import get_metrics_client

logger = get_logger("daybook.http")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Instantiate the FastAPI app and register routers."""

    explicit_settings = settings is not None
    settings = settings or get_settings()
    configure_logging(settings.logging)
    application = FastAPI(title="Daybook API", version="0.1.0")
    if explicit_settings:
        application.dependency_overrides[get_settings] = lambda: settings
    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.perf_counter()
        # Unhandled errors reach the catch-all handler only after this frame.
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            metrics = get_metrics_client()
            metrics.increment("http_requests_total")
            metrics.observe("http_request_duration_ms", duration_ms)
            logger.info(
                "request_completed",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": status_code,
                    "duration_ms": duration_ms,
                },
            )

    install_exception_handlers(application)
    for router in (
        health.router,
        entries.router,
        search.router,
        stats.router,
    ):
        application.include_router(router)
    logger.info(
        "application_created",
        extra={
            "environment": settings.environment,
            "entry_store": settings.entry_store.backend,
        },
    )
    return application


app = create_app()
