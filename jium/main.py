"""Application entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from jium.api.container import get_container
from jium.api.dependencies import limiter, route_limit
from jium.api.routes.dialogue import router as dialogue_router
from jium.api.routes.synthesis import router as synthesis_router
from jium.api.routes.templates import router as templates_router
from jium.domain.errors import SynthesisFailure
from jium.infrastructure.resilience import get_all_breakers
from jium.shared.logging import setup_logging

log = structlog.get_logger()


def _apply_logging_config(container):
    """Apply logging from container config (stdout + optional file)."""
    c = container.config
    setup_logging(
        level=c.log_level,
        file_path=c.log_file or "",
        rotation_max_mb=c.log_rotation_max_mb,
        rotation_backups=c.log_rotation_backups,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: load config, setup logging, build the dialogue engine."""
    container = get_container()
    _apply_logging_config(container)
    log.info(
        "startup_begin",
        llm_provider=container.config.llm.provider,
        admission_limit=container.config.admission.limit,
        admission_window_seconds=container.config.admission.window_seconds,
    )
    _ = container.dialogue_engine
    log.info("startup_complete", templates=[t.template_type for t in container.registry.templates()])
    yield
    log.info("shutdown_begin")
    if hasattr(container.llm, "close"):
        try:
            await container.llm.close()
        except Exception:  # noqa: BLE001
            log.debug("llm_close_error", exc_info=True)
    log.info("shutdown_complete")


async def synthesis_failure_handler(request: Request, exc: SynthesisFailure) -> JSONResponse:
    """Render a SynthesisFailure as ``{error, message, fieldErrors?}``."""
    if exc.status_code >= 500:
        log.error("synthesis_failure", path=request.url.path, error=exc.code)
    else:
        log.info("synthesis_rejected", path=request.url.path, error=exc.code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


# Create app
app = FastAPI(
    title="Jium",
    version="0.1.0",
    description="Guided dialogue that turns a few answers into a finished prompt",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(SynthesisFailure, synthesis_failure_handler)

# CORS
container = get_container()
app.add_middleware(
    CORSMiddleware,
    allow_origins=container.config.security.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(synthesis_router)
app.include_router(dialogue_router)
app.include_router(templates_router)


@app.get("/health")
@limiter.limit(route_limit)
async def health(request: Request) -> dict:
    """Health check with LLM availability and circuit breaker state."""
    container = get_container()
    llm_available = await container.llm.is_available()
    return {
        "status": "ok",
        "service": "jium",
        "llm_provider": container.config.llm.provider,
        "llm_available": llm_available,
        "circuit_breakers": get_all_breakers(),
    }
