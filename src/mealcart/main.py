"""FastAPI application entry point."""

import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from mealcart import __version__
from mealcart.config import get_settings
from mealcart.database import Base, async_engine
from mealcart.errors import register_exception_handlers
from mealcart.logging_config import LoggingContext, configure_logging, get_logger
from mealcart.routers import cart_router, shopping_lists_router

settings = get_settings()

# Configure logging on module load
configure_logging(settings.log_level, log_file=settings.log_file)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting Mealcart API")

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialized")

    yield

    logger.info("Shutting down Mealcart API")
    await async_engine.dispose()


app = FastAPI(
    title="Mealcart API",
    description="Weekly meal plans to aggregated grocery shopping lists",
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
    """Tag every log line of a request with its request ID."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    with LoggingContext(request_id=request_id):
        response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


register_exception_handlers(app)

app.include_router(shopping_lists_router)
app.include_router(cart_router)


@app.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok", "service": "mealcart-api"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "Mealcart API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }
