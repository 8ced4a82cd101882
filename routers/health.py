"""Health check router."""

import asyncio
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from catalog.db import CatalogDB
from config.settings import Settings, get_settings
from core.dependencies import get_catalog_db

logger = logging.getLogger(__name__)

router = APIRouter()

CHECK_TIMEOUT = 3.0
"""Seconds before a probe is reported as "timeout"."""


async def _check_database(db: CatalogDB) -> str:
    return "ok" if await db.is_available() else "error"


async def _run_check(coro) -> str:
    """Await a probe, converting a hang into "timeout"."""
    try:
        return await asyncio.wait_for(coro, timeout=CHECK_TIMEOUT)
    except TimeoutError:
        return "timeout"


@router.get(
    "/health",
    summary="Health check",
    responses={
        200: {"description": "Catalog reachable"},
        503: {"description": "Catalog unreachable; matching returns no suggestions"},
    },
)
async def health_check(
    settings: Settings = Depends(get_settings),
    db: CatalogDB = Depends(get_catalog_db),
):
    """Report whether the song catalog answers queries.

    Parsing works without the catalog, but every match lookup would come
    back empty, so a dead catalog makes the service unhealthy.
    """
    database = await _run_check(_check_database(db))
    healthy = database == "ok"
    if not healthy:
        logger.warning(f"Health check failed: catalog database {database}")

    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "version": settings.app_version,
            "services": {"database": database},
        },
    )
