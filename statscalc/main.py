from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from statscalc.api import calculators, health
from statscalc.config import Settings, load_settings
from statscalc.observability.metrics import LIVE_HANDLES, MetricsMiddleware, metrics_router
from statscalc.observability.logging import setup_logging
from statscalc.services.registry import HandleRegistry
from contextlib import asynccontextmanager
import logging

logger = logging.getLogger(__name__)

# Lifespan handler: marks this app ready after startup and not ready on shutdown.
# Readiness lives on app.state so independent apps never affect each other.
@asynccontextmanager
async def app_lifespan(app: FastAPI):
    gauge = LIVE_HANDLES.labels(app.state.metrics_label)
    gauge.set(len(app.state.registry))
    app.state.ready = True
    logger.info("stats calculator ready, data_dir=%s", app.state.settings.data_dir)
    yield
    app.state.ready = False
    # Live calculators are dropped with the registry
    logger.info("shutting down with %d live calculator(s)", len(app.state.registry))
    LIVE_HANDLES.remove(app.state.metrics_label)

async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Report malformed requests as 400 with location, message and type per error."""
    detail = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": str(err.get("msg", "")), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    logger.debug("rejected %s %s: %s", request.method, request.url.path, detail)
    return JSONResponse(status_code=400, content={"detail": detail})

# Factory function to create the FastAPI app
def create_app(settings: Settings | None = None, registry: HandleRegistry | None = None) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings.log_level)
    app = FastAPI(
        title="Stats Calculator Service",
        version="1.0.0",
        lifespan=app_lifespan,
    )
    # Each app owns its registry; pass one in to share or inspect it (tests)
    app.state.settings = settings
    app.state.registry = registry if registry is not None else HandleRegistry()
    app.state.ready = False
    app.state.metrics_label = f"{id(app.state.registry):x}"
    app.add_middleware(MetricsMiddleware)    # Add Prometheus metrics middleware
    app.include_router(metrics_router)       # Expose /metrics endpoint
    app.include_router(health.router)        # Expose /health and /ready endpoints
    app.include_router(calculators.router)   # Expose /calculators endpoints
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    return app
