"""FastAPI application entry point."""

import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from grocerylist import __version__
from grocerylist.config import get_settings
from grocerylist.logging_config import LoggingContext, configure_logging, get_logger
from grocerylist.routers import build_store, lists_router

settings = get_settings()

REQUEST_ID_HEADER = "X-Request-ID"

# Configure logging on module load; development always logs human-readable text
configure_logging(settings.log_level, json_format=False if settings.is_development else None)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info(f"Starting Grocery List API ({settings.environment})")
    app.state.store = build_store()
    yield
    logger.info("Shutting down Grocery List API")


app = FastAPI(
    title="Grocery List API",
    description="Merge recipe ingredients into a running shopping list",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Tag every log line of a request with its request id."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    with LoggingContext(request_id=request_id):
        response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


app.include_router(lists_router)


@app.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok", "service": "grocerylist-api"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "Grocery List API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }
