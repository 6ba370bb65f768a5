"""
Booking Mock API - FastAPI Application
Version: 1.0.0

Main entry point. Builds the in-memory store on startup,
seeds the sample bookings and serves the bookings API.
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_settings

settings = get_settings()

# Configure structured logging FIRST (before the service modules create loggers)
from services.logging_config import bind_request_context, configure_logging, get_logger

configure_logging(settings)

logger = get_logger(__name__)

from routers.bookings import router as bookings_router
from services.booking_service import BookingService
from services.booking_store import BookingStore
from services.errors import BookingError
from services.metrics import get_metrics, record_request, set_app_info


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager: construct, seed, serve, discard."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}...")

    store = BookingStore()
    service = BookingService(
        store,
        default_limit=settings.DEFAULT_PAGE_LIMIT,
        max_limit=settings.MAX_PAGE_LIMIT
    )
    if settings.SEED_SAMPLE_DATA:
        service.seed()

    app.state.booking_store = store
    app.state.booking_service = service
    logger.info("Booking store ready", bookings=store.count())

    set_app_info(version=settings.APP_VERSION, environment=settings.APP_ENV)

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Mock bookings API for client integration testing",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def trace_id_middleware(request: Request, call_next):
    """Tag each request with a trace ID, log it and record metrics."""
    trace_id = request.headers.get("X-Trace-ID") or str(uuid.uuid4())[:8]
    bind_request_context(trace_id, method=request.method, path=request.url.path)
    started = time.perf_counter()

    logger.info("Request started")

    response = await call_next(request)

    response.headers["X-Trace-ID"] = trace_id

    route = request.scope.get("route")
    endpoint = getattr(route, "path", "unmatched")
    record_request(request.method, endpoint, response.status_code, time.perf_counter() - started)

    logger.info("Request completed", status_code=response.status_code)

    return response


app.include_router(bookings_router)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

def error_response(status_code: int, message: str, error: str = None) -> JSONResponse:
    content = {"code": status_code, "message": message}
    if error:
        content["error"] = error
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed JSON, unknown fields and wrong types all answer 400."""
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ())[1:]) or "body"
        problems.append(f"{location}: {err.get('msg', 'invalid')}")

    logger.info("Request body rejected", path=request.url.path, problems=problems)
    return error_response(400, "invalid request body: " + "; ".join(problems), "INVALID_BODY")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "request failed"
    return error_response(exc.status_code, message.lower())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return error_response(500, "internal server error")


# =============================================================================
# SERVICE ENDPOINTS
# =============================================================================

@app.get("/health/live")
async def liveness_check():
    """Liveness probe - the process is running."""
    return {"status": "alive"}


@app.get("/health/ready")
async def readiness_check():
    """Readiness probe - the store has been constructed."""
    store = getattr(app.state, "booking_store", None)
    if store is None:
        return JSONResponse(status_code=503, content={"status": "not_ready"})

    return {
        "status": "ready",
        "version": settings.APP_VERSION,
        "bookings": store.count()
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return get_metrics()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        workers=1
    )
