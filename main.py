"""Setlist quick-set service: FastAPI app and uvicorn entry point."""

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

from catalog.router import router as catalog_router
from config.settings import get_settings
from core.dependencies import close_catalog_db
from core.logging import default_log_file, setup_logging
from core.sentry import init_sentry
from routers.health import router as health_router
from setlists.router import router as setlists_router

load_dotenv()

settings = get_settings()

init_sentry(
    dsn=settings.sentry_dsn,
    environment=settings.environment,
    release=settings.app_version,
    traces_sample_rate=settings.sentry_traces_sample_rate,
)
setup_logging(level=settings.log_level, log_file=default_log_file(settings.log_level))

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the matching configuration on startup and release the catalog on shutdown."""
    logger.info(
        f"Starting {settings.app_name} v{settings.app_version} "
        f"(catalog: {settings.resolved_catalog_db_path}, "
        f"pool limit: {settings.match_candidate_pool_limit}, "
        f"auto-select at: {settings.auto_select_confidence})"
    )

    yield

    await close_catalog_db()
    logger.info("Catalog connection closed, shutdown complete")


app = FastAPI(
    title=settings.app_name,
    description="Turn pasted setlist text into structured, catalog-linked setlists",
    version=settings.app_version,
    lifespan=lifespan,
)

app.include_router(health_router, tags=["health"])
app.include_router(setlists_router, prefix="/api/v1")
app.include_router(catalog_router, prefix="/api/v1")

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
