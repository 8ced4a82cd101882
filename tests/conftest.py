"""Shared test fixtures for pytest."""

from unittest.mock import AsyncMock, Mock

import pytest

from tests.factories import make_catalog_song


@pytest.fixture
def sample_catalog_songs():
    """A small catalog covering exact, keyword and fuzzy matches."""
    return [
        make_catalog_song(id=1, title="Wild Horses", artist_names=["Rolling Stones"]),
        make_catalog_song(id=2, title="Wild Horses", artist_names=["The Sundays"]),
        make_catalog_song(id=3, title="Gimme Shelter", artist_names=["Rolling Stones"]),
        make_catalog_song(id=4, title="Brown Eyed Girl", artist_names=["Van Morrison"]),
        make_catalog_song(id=5, title="Every Rose Has Its Thorn", artist_names=["Poison"]),
        make_catalog_song(id=6, title="Gloria", artist_names=[]),
        make_catalog_song(id=7, title="Horse With No Name", artist_names=["America"]),
    ]


@pytest.fixture
def mock_catalog_db(sample_catalog_songs):
    """Create a mock catalog database serving ``sample_catalog_songs``."""
    db = AsyncMock()

    async def find_exact_matches(title, artist="", limit=5):
        wanted_title = title.strip().lower()
        wanted_artist = artist.strip().lower()
        found = [
            song
            for song in sample_catalog_songs
            if song.title.lower() == wanted_title
            and (not wanted_artist or any(a.lower() == wanted_artist for a in song.artist_names))
        ]
        return found[:limit]

    async def list_candidate_pool(limit=1000):
        return sample_catalog_songs[:limit]

    db.find_exact_matches = AsyncMock(side_effect=find_exact_matches)
    db.list_candidate_pool = AsyncMock(side_effect=list_candidate_pool)
    db.connect = AsyncMock()
    db.close = AsyncMock()
    db.is_available = AsyncMock(return_value=True)
    db._conn = Mock()
    return db
