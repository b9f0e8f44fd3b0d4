"""
Finishing Touch API.

Office back end for a turnover painting business: estimates priced from a
room rate card, invoices derived from them, crew scheduling and the punch
clock. API docs are served only when DOCS_ENABLED is set.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from finishing_touch.api.v2.router import api_router
from finishing_touch.config import settings
from finishing_touch.database import init_db
from finishing_touch.exceptions import register_exception_handlers
from finishing_touch.middleware import RequestContextLogFilter, RequestContextMiddleware
# Registers every table on Base.metadata before init_db() runs
import finishing_touch.models  # noqa: F401

VERSION = "1.0.0"

DEV_ORIGINS = ["http://localhost:5173", "http://localhost:3000"]


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s",
    )
    for handler in logging.getLogger().handlers:
        handler.addFilter(RequestContextLogFilter())


configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Finishing Touch API %s (%s)", VERSION, settings.ENVIRONMENT)
    try:
        await init_db()
    except Exception as exc:
        # The exception text can include the connection string
        logger.error("Database initialization failed: %s", type(exc).__name__)
        raise
    yield
    logger.info("Finishing Touch API stopped")


app = FastAPI(
    title="Finishing Touch API",
    description="Estimates, invoices, scheduling and time tracking for a turnover painting business",
    version=VERSION,
    docs_url="/docs" if settings.DOCS_ENABLED else None,
    redoc_url="/redoc" if settings.DOCS_ENABLED else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL] + ([] if settings.is_production else DEV_ORIGINS),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestContextMiddleware)

register_exception_handlers(app)

app.include_router(api_router, prefix="/api/v2")


@app.get("/")
async def root():
    info = {"name": "Finishing Touch API", "version": VERSION, "health": "/health"}
    if settings.DOCS_ENABLED:
        info["docs"] = "/docs"
    return info


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": VERSION, "environment": settings.ENVIRONMENT}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("finishing_touch.main:app", host="0.0.0.0", port=5001, reload=settings.DEBUG)
