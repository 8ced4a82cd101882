"""Integration test fixtures.

Provides a real CatalogDB backed by in-memory SQLite,
seeded with a small song catalog.
"""

import aiosqlite
import pytest
import pytest_asyncio

from config.settings import Settings
from catalog.db import CatalogDB, register_functions


# ---------------------------------------------------------------------------
# Seed data -- representative catalog songs
# ---------------------------------------------------------------------------

SEED_SONGS = [
    (1, "Wild Horses"),
    (2, "Wild Horses"),
    (3, "Gimme Shelter"),
    (4, "Brown Eyed Girl"),
    (5, "Every Rose Has Its Thorn"),
    (6, "Gloria"),
    (7, "Horse With No Name"),
    (8, "Into the Mystic"),
    (9, "Dark Star"),
    (10, "Über Alles"),
]

SEED_ARTISTS = [
    (1, "Rolling Stones"),
    (2, "The Sundays"),
    (3, "Van Morrison"),
    (4, "Poison"),
    (5, "America"),
    (6, "Them"),
    (7, "Grateful Dead"),
    (8, "Émile"),
]

SEED_SONG_ARTISTS = [
    (1, 1),
    (2, 2),
    (3, 1),
    (4, 3),
    (5, 4),
    (6, 6),
    (6, 3),
    (7, 5),
    (8, 3),
    (10, 8),
    # Dark Star has no credited artist
]


async def _create_schema(conn: aiosqlite.Connection):
    """Create the songs, artists and song_artists tables."""
    await conn.execute("""
        CREATE TABLE songs (
            id INTEGER PRIMARY KEY,
            title TEXT NOT NULL
        )
    """)
    await conn.execute("""
        CREATE TABLE artists (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL
        )
    """)
    await conn.execute("""
        CREATE TABLE song_artists (
            song_id INTEGER NOT NULL REFERENCES songs(id),
            artist_id INTEGER NOT NULL REFERENCES artists(id),
            PRIMARY KEY (song_id, artist_id)
        )
    """)
    await conn.commit()


async def _seed_data(conn: aiosqlite.Connection):
    """Insert seed songs and their artist credits."""
    await conn.executemany("INSERT INTO songs VALUES (?, ?)", SEED_SONGS)
    await conn.executemany("INSERT INTO artists VALUES (?, ?)", SEED_ARTISTS)
    await conn.executemany("INSERT INTO song_artists VALUES (?, ?)", SEED_SONG_ARTISTS)
    await conn.commit()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def catalog_db():
    """Real CatalogDB backed by in-memory SQLite and seed data."""
    db = CatalogDB()
    conn = await aiosqlite.connect(":memory:")
    conn.row_factory = aiosqlite.Row
    await register_functions(conn)

    await _create_schema(conn)
    await _seed_data(conn)

    # Bypass connect() path-checking by directly setting the connection
    db._conn = conn

    yield db

    await conn.close()


@pytest.fixture
def test_settings():
    """Settings with no real DSNs."""
    return Settings(
        sentry_dsn=None,
        catalog_db_path="test_catalog.db",
    )


@pytest_asyncio.fixture
async def app_client(catalog_db, test_settings):
    """httpx AsyncClient wired to the real in-memory catalog."""
    from httpx import ASGITransport, AsyncClient
    from main import app
    from core.dependencies import get_catalog_db
    from config.settings import get_settings

    app.dependency_overrides[get_catalog_db] = lambda: catalog_db
    app.dependency_overrides[get_settings] = lambda: test_settings

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()
