"""FastAPI application entrypoint."""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from opentelemetry import trace
from opentelemetry.baggage import get_baggage

from trading_journal import __version__
from trading_journal.api.dependencies import attach_resources, release_resources
from trading_journal.api.errors import register_error_handlers
from trading_journal.api.routes import api_router
from trading_journal.config import get_settings
from trading_journal.core.logging import setup_logging
from trading_journal.core.telemetry import setup_telemetry

settings = get_settings()
app = FastAPI(title=settings.app_name, version=__version__)
setup_logging(settings.log_level)
setup_telemetry(app, settings)
attach_resources(app, settings)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[
        # Expose tracing headers for end-to-end propagation debugging
        "traceparent",
        "tracestate",
        "baggage",
    ],
)


@app.on_event("shutdown")
async def shutdown() -> None:
    """Close the shared HTTP client."""

    await release_resources(app)


@app.get("/health", tags=["health"])
async def health() -> dict[str, str]:
    """Return service readiness metadata."""

    return {
        "status": "ok",
        "timestamp": datetime.now(ZoneInfo(settings.timezone)).isoformat(),
        "timezone": settings.timezone,
    }


def configure_app() -> FastAPI:
    """Attach routes and error handlers."""

    app.include_router(api_router)
    register_error_handlers(app)
    return app


configure_app()


# Attach end-user attributes from W3C Baggage to the active server span
@app.middleware("http")
async def _attach_user_baggage(request, call_next):  # type: ignore[no-redef]
    span = trace.get_current_span()
    try:
        for key in ("enduser.id", "enduser.role"):
            val = get_baggage(key)
            if val:
                span.set_attribute(key, val)
    except Exception:  # best-effort only
        pass
    return await call_next(request)


__all__ = ["app", "configure_app"]
