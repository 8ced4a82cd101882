import logging
from pathlib import Path

import aiosqlite

from catalog.models import CatalogSong
from core.exceptions import CatalogLookupError, CatalogUnavailableError
from core.matching import DEFAULT_CANDIDATE_POOL_LIMIT, MAX_MATCH_RESULTS

logger = logging.getLogger(__name__)

# Default path to SQLite database (relative to project root)
DEFAULT_DB_PATH = Path(__file__).parent.parent / "catalog.db"

# Artist names are folded into one column so each song comes back as a single row.
# \x1f (unit separator) never appears in user-entered names.
ARTIST_SEPARATOR = "\x1f"

# SQLite's LOWER() only folds ASCII; comparisons go through Python's str.lower instead.
LOWER_FUNCTION = "PY_LOWER"


def _py_lower(value):
    return value.lower() if isinstance(value, str) else value


async def register_functions(conn: aiosqlite.Connection) -> None:
    """Install the SQL functions the catalog queries rely on."""
    await conn.create_function(LOWER_FUNCTION, 1, _py_lower, deterministic=True)


class CatalogDB:
    """Async SQLite client for song catalog lookups.

    Expected schema::

        songs(id INTEGER PRIMARY KEY, title TEXT NOT NULL)
        artists(id INTEGER PRIMARY KEY, name TEXT NOT NULL)
        song_artists(song_id INTEGER, artist_id INTEGER)
    """

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or DEFAULT_DB_PATH
        self._conn: aiosqlite.Connection | None = None

    async def connect(self):
        """Open database connection."""
        if not self.db_path.exists():
            raise FileNotFoundError(f"Catalog database not found at {self.db_path}.")

        self._conn = await aiosqlite.connect(self.db_path)
        self._conn.row_factory = aiosqlite.Row
        await register_functions(self._conn)
        logger.info(f"Connected to SQLite catalog: {self.db_path}")

    async def is_available(self) -> bool:
        """Check if the database connection is alive."""
        try:
            if self._conn is None:
                return False
            async with self._conn.execute("SELECT 1") as cursor:
                row = await cursor.fetchone()
                return row is not None
        except Exception:
            return False

    async def close(self):
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None
            logger.info("Closed SQLite connection")

    def _song_select(self) -> str:
        return f"""
            SELECT s.id AS id, s.title AS title,
                   GROUP_CONCAT(a.name, '{ARTIST_SEPARATOR}') AS artist_names
            FROM songs s
            LEFT JOIN song_artists sa ON sa.song_id = s.id
            LEFT JOIN artists a ON a.id = sa.artist_id
        """

    @staticmethod
    def _row_to_song(row) -> CatalogSong:
        names = row["artist_names"]
        return CatalogSong(
            id=row["id"],
            title=row["title"],
            artist_names=names.split(ARTIST_SEPARATOR) if names else [],
        )

    async def _fetch_songs(self, operation: str, sql: str, params: tuple) -> list[CatalogSong]:
        if not self._conn:
            raise CatalogUnavailableError("Catalog database not connected", operation=operation)
        try:
            cursor = await self._conn.execute(sql, params)
            rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise CatalogLookupError(
                f"Catalog query failed: {e}", operation=operation, details={"params": params}
            ) from e
        return [self._row_to_song(row) for row in rows]

    async def find_exact_matches(
        self,
        title: str,
        artist: str = "",
        limit: int = MAX_MATCH_RESULTS,
    ) -> list[CatalogSong]:
        """
        Find songs whose title equals ``title`` case-insensitively.

        Args:
            title: Song title to match
            artist: If given, at least one of the song's artists must equal it
                (case-insensitive)
            limit: Max results to return

        Returns:
            Matching songs with all of their artist names
        """
        conditions = [f"{LOWER_FUNCTION}(TRIM(s.title)) = {LOWER_FUNCTION}(TRIM(?))"]
        params: list[str | int] = [title]
        if artist.strip():
            conditions.append(
                f"""EXISTS (
                    SELECT 1 FROM song_artists sa2
                    JOIN artists a2 ON a2.id = sa2.artist_id
                    WHERE sa2.song_id = s.id
                      AND {LOWER_FUNCTION}(TRIM(a2.name)) = {LOWER_FUNCTION}(TRIM(?))
                )"""
            )
            params.append(artist)
        params.append(limit)

        sql = f"""
            {self._song_select()}
            WHERE {" AND ".join(conditions)}
            GROUP BY s.id
            ORDER BY s.id
            LIMIT ?
        """
        return await self._fetch_songs("find_exact_matches", sql, tuple(params))

    async def list_candidate_pool(
        self, limit: int = DEFAULT_CANDIDATE_POOL_LIMIT
    ) -> list[CatalogSong]:
        """
        Return a bounded pool of catalog songs for keyword and fuzzy scoring.

        Songs beyond ``limit`` are never considered by those strategies.
        """
        sql = f"""
            {self._song_select()}
            GROUP BY s.id
            ORDER BY s.id
            LIMIT ?
        """
        return await self._fetch_songs("list_candidate_pool", sql, (limit,))
