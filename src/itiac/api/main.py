"""HTTP entry point for the impact analysis service.

The service is stateless: every analysis request carries its own
snapshot, so startup only configures logging and metrics.
"""

import sys
import time
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import NoReturn

from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from itiac.common.config import Settings, get_settings
from itiac.common.exceptions import ItiacError, SnapshotValidationError
from itiac.common.logging import get_logger, log_context, setup_logging
from itiac.common.metrics import API_REQUEST_DURATION, API_REQUESTS, set_app_info

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    setup_logging(settings.logging)
    set_app_info(version=settings.app_version, environment=settings.environment)

    logger.info("ITIAC API started", version=settings.app_version, environment=settings.environment)
    yield
    logger.info("ITIAC API stopped")


async def observe_request(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Tag the request with an id, then record its outcome in logs and metrics."""
    route = request.url.path
    with log_context(request_id=uuid.uuid4().hex[:8], method=request.method, path=route):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Request crashed", duration_ms=_elapsed_ms(start))
            raise

        API_REQUESTS.labels(method=request.method, endpoint=route, status=response.status_code).inc()
        API_REQUEST_DURATION.labels(method=request.method, endpoint=route).observe(
            time.perf_counter() - start
        )
        logger.info("Request served", status_code=response.status_code, duration_ms=_elapsed_ms(start))
        return response


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


async def handle_itiac_error(request: Request, exc: ItiacError) -> JSONResponse:
    """Typed domain errors carry their own status and payload."""
    logger.warning("Analysis request rejected", error_code=exc.error_code, details=exc.details)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed snapshots are reported with the offending field locations."""
    errors = jsonable_encoder(exc.errors())
    logger.warning("Snapshot failed validation", error_count=len(errors))
    error = SnapshotValidationError("Request validation failed", details={"errors": errors})
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error", error=str(exc), error_type=type(exc).__name__)
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": "An internal error occurred"},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application."""
    settings = settings or get_settings()
    expose_docs = not settings.is_production

    app = FastAPI(
        title="ITIAC API",
        description="Outage propagation, root-cause attribution and business impact scoring",
        version=settings.app_version,
        docs_url="/docs" if expose_docs else None,
        redoc_url="/redoc" if expose_docs else None,
        openapi_url="/openapi.json" if expose_docs else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.middleware("http")(observe_request)

    app.add_exception_handler(ItiacError, handle_itiac_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)

    from itiac.api.routers import admin, analysis

    app.include_router(admin.router)
    app.include_router(analysis.router, prefix="/api/v1")

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        return {
            "name": "ITIAC API",
            "version": settings.app_version,
            "docs": "/docs" if expose_docs else None,
        }

    return app


app = create_app()


def run() -> NoReturn:
    """Serve the API with uvicorn (``itiac-api`` console script)."""
    import uvicorn

    settings = get_settings()
    try:
        uvicorn.run(
            "itiac.api.main:app",
            host=settings.api.host,
            port=settings.api.port,
            workers=1 if settings.api.reload else settings.api.workers,
            reload=settings.api.reload,
            log_level=settings.logging.level.lower(),
            access_log=False,  # observe_request logs every request
        )
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.error("API failed to start", error=str(e))
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    run()
