"""FastAPI dependency injection providers."""

import logging

from fastapi import Depends

from catalog.db import CatalogDB
from config.settings import Settings, get_settings
from core.exceptions import ServiceInitializationError
from setlists.matcher import SongMatcher
from setlists.parser import SetlistTextParser

logger = logging.getLogger(__name__)

# Module-level instances for lifecycle management
_catalog_db: CatalogDB | None = None
_parser = SetlistTextParser()


async def get_catalog_db(settings: Settings = Depends(get_settings)) -> CatalogDB:
    """Get catalog database instance.

    Args:
        settings: Application settings

    Returns:
        CatalogDB: Catalog database instance (unconnected if the file is missing)

    Raises:
        ServiceInitializationError: If database initialization fails
    """
    global _catalog_db

    if _catalog_db is None:
        db_path = settings.resolved_catalog_db_path
        db = CatalogDB(db_path=db_path)
        try:
            await db.connect()
            logger.info(f"Catalog database connected: {db_path}")
        except FileNotFoundError:
            logger.warning(
                f"Catalog database not found at {db_path}. "
                "Service will start without a catalog (health check will report unhealthy, "
                "song matching will return no suggestions)."
            )
        except Exception as e:
            logger.error(f"Failed to initialize catalog database: {e}")
            raise ServiceInitializationError(f"Database initialization failed: {e}") from e
        _catalog_db = db

    return _catalog_db


async def close_catalog_db() -> None:
    """Close catalog database connection."""
    global _catalog_db
    if _catalog_db:
        await _catalog_db.close()
        _catalog_db = None


def get_setlist_parser() -> SetlistTextParser:
    """Get the shared, stateless setlist parser."""
    return _parser


async def get_song_matcher(
    db: CatalogDB = Depends(get_catalog_db),
    settings: Settings = Depends(get_settings),
) -> SongMatcher:
    """Build a song matcher over the catalog using configured limits."""
    return SongMatcher(
        catalog=db,
        candidate_pool_limit=settings.match_candidate_pool_limit,
        max_results=settings.max_match_results,
    )
