from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import feed
from core.config import settings
from core.logging import configure_logging, get_logger, SERVICE_VERSION
from core.middleware import RequestLoggingMiddleware
from core.errors import register_error_handlers

# Initialize logging before anything else
configure_logging(
    level=settings.LOG_LEVEL,
    json_logs=settings.LOG_JSON,
)

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info(
        "startup",
        message="Feed validator starting up",
        coerce=settings.FEED_COERCE,
        datetime_offsets=settings.FEED_DATETIME_ALLOW_OFFSET,
        batch_concurrency=settings.FEED_BATCH_CONCURRENCY,
        max_batch_size=settings.FEED_MAX_BATCH_SIZE,
    )
    yield
    log.info("shutdown", message="Feed validator shutting down")


app = FastAPI(
    title="Feed Validator API",
    description="Validation and normalization of merchant product feed records",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)

# Register structured error handlers
register_error_handlers(app)

# Middleware (order matters: last added = first executed)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(feed.router, prefix="/api/feed", tags=["feed"])


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": SERVICE_VERSION}


if __name__ == "__main__":
    import uvicorn

    log.info("server_config", host=settings.BACKEND_HOST, port=settings.BACKEND_PORT, debug=settings.APP_DEBUG)
    uvicorn.run(
        "main:app",
        host=settings.BACKEND_HOST,
        port=settings.BACKEND_PORT,
        reload=settings.APP_DEBUG,
        log_config=None,  # Disable uvicorn's default logging, we handle it
    )
