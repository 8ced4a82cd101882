"""Song matching against the catalog.

Given a freeform title (and optional artist) from a parsed setlist, find up
to five existing catalog songs using three escalating strategies:

1. Exact: case-insensitive title (and artist) equality, confidence 1.0.
2. Keyword: overlap of significant title words, with an artist bonus.
3. Fuzzy: Levenshtein similarity, only to fill remaining slots.

Matching is advisory. Catalog failures are logged and reported to Sentry,
and the caller gets an empty list instead of an exception.
"""

import asyncio
import logging
from typing import Protocol

from catalog.models import CatalogSong
from core.matching import (
    AUTO_SELECT_CONFIDENCE,
    DEFAULT_CANDIDATE_POOL_LIMIT,
    EXACT_MATCH_CONFIDENCE,
    FUZZY_MIN_SCORE,
    KEYWORD_MIN_SCORE,
    MAX_MATCH_RESULTS,
    calculate_fuzzy_score,
    calculate_keyword_score,
    extract_keywords,
)
from core.sentry import add_catalog_breadcrumb, capture_match_failure
from setlists.models import MatchType, SongMatch

logger = logging.getLogger(__name__)


class CatalogLookup(Protocol):
    """Read-only song catalog consulted by the matcher."""

    async def find_exact_matches(
        self, title: str, artist: str = "", limit: int = MAX_MATCH_RESULTS
    ) -> list[CatalogSong]: ...

    async def list_candidate_pool(
        self, limit: int = DEFAULT_CANDIDATE_POOL_LIMIT
    ) -> list[CatalogSong]: ...


def _unique(names: list[str]) -> list[str]:
    return list(dict.fromkeys(names))


def to_song_match(
    song: CatalogSong,
    match_type: MatchType,
    confidence: float,
    matched_keywords: list[str] | None = None,
) -> SongMatch:
    return SongMatch(
        song_id=song.id,
        title=song.title,
        artist_names=_unique(song.artist_names),
        match_type=match_type,
        confidence=min(confidence, 1.0),
        matched_keywords=matched_keywords or [],
    )


def is_auto_selectable(match: SongMatch, threshold: float = AUTO_SELECT_CONFIDENCE) -> bool:
    """Whether a match may be pre-selected without asking the user.

    Exact matches always qualify; anything else needs ``confidence >= threshold``.
    """
    return match.match_type is MatchType.EXACT or match.confidence >= threshold


def select_match(
    matches: list[SongMatch], threshold: float = AUTO_SELECT_CONFIDENCE
) -> SongMatch | None:
    """Return the best auto-selectable match, or None if the user must choose."""
    return next((m for m in matches if is_auto_selectable(m, threshold)), None)


def score_keyword_matches(
    title: str,
    artist: str,
    candidates: list[CatalogSong],
    limit: int = MAX_MATCH_RESULTS,
) -> list[SongMatch]:
    """Score candidates by keyword overlap, keeping those at or above the minimum."""
    title_keywords = extract_keywords(title)
    if not title_keywords:
        return []
    artist_keywords = extract_keywords(artist)

    scored: list[SongMatch] = []
    for song in candidates:
        candidate_artist_keywords = [
            keyword for name in song.artist_names for keyword in extract_keywords(name)
        ]
        score, matched = calculate_keyword_score(
            title_keywords,
            extract_keywords(song.title),
            artist_keywords,
            candidate_artist_keywords,
        )
        if score >= KEYWORD_MIN_SCORE:
            scored.append(to_song_match(song, MatchType.KEYWORD, score, matched))

    scored.sort(key=lambda m: m.confidence, reverse=True)
    return scored[:limit]


def score_fuzzy_matches(
    title: str,
    artist: str,
    candidates: list[CatalogSong],
    limit: int = MAX_MATCH_RESULTS,
) -> list[SongMatch]:
    """Score candidates by Levenshtein similarity, keeping those above the minimum."""
    if limit <= 0:
        return []

    scored: list[SongMatch] = []
    for song in candidates:
        score = calculate_fuzzy_score(title, song.title, artist, song.artist_names)
        if score > FUZZY_MIN_SCORE:
            scored.append(to_song_match(song, MatchType.FUZZY, score))

    scored.sort(key=lambda m: m.confidence, reverse=True)
    return scored[:limit]


class SongMatcher:
    """Find existing catalog songs for a freeform title and artist.

    The candidate pool is loaded once per matcher and shared by every lookup
    it serves, so build one matcher per request to see catalog changes.
    """

    def __init__(
        self,
        catalog: CatalogLookup,
        candidate_pool_limit: int = DEFAULT_CANDIDATE_POOL_LIMIT,
        max_results: int = MAX_MATCH_RESULTS,
    ):
        self.catalog = catalog
        self.candidate_pool_limit = candidate_pool_limit
        self.max_results = min(max_results, MAX_MATCH_RESULTS)
        self._pool: list[CatalogSong] | None = None
        self._pool_lock = asyncio.Lock()

    async def find_matches(self, title: str, artist: str = "") -> list[SongMatch]:
        """Return up to ``max_results`` matches ordered by descending confidence.

        Never raises; a failing catalog yields an empty list.
        """
        title = (title or "").strip()
        artist = (artist or "").strip()
        if not title:
            return []

        try:
            return await self._find_matches(title, artist)
        except Exception as e:
            logger.error(f"Song matching failed for '{title}' ({type(e).__name__}: {e})")
            capture_match_failure(e, title, artist)
            return []

    async def _candidate_pool(self) -> list[CatalogSong]:
        async with self._pool_lock:
            if self._pool is None:
                add_catalog_breadcrumb("list_candidate_pool", limit=self.candidate_pool_limit)
                self._pool = await self.catalog.list_candidate_pool(self.candidate_pool_limit)
        return self._pool

    async def _find_matches(self, title: str, artist: str) -> list[SongMatch]:
        add_catalog_breadcrumb("find_exact_matches", title=title, artist=artist)
        exact_songs = await self.catalog.find_exact_matches(title, artist, limit=self.max_results)
        matches = [
            to_song_match(song, MatchType.EXACT, EXACT_MATCH_CONFIDENCE)
            for song in exact_songs[: self.max_results]
        ]

        # Nothing can outrank a full list of exact matches.
        if len(matches) >= self.max_results:
            return matches

        pool = await self._candidate_pool()

        selected_ids = {m.song_id for m in matches}
        candidates = [song for song in pool if song.id not in selected_ids]

        keyword_matches = score_keyword_matches(title, artist, candidates, self.max_results)
        matches.extend(keyword_matches)

        remaining = self.max_results - len(matches)
        if remaining > 0:
            selected_ids.update(m.song_id for m in keyword_matches)
            fuzzy_candidates = [song for song in candidates if song.id not in selected_ids]
            matches.extend(score_fuzzy_matches(title, artist, fuzzy_candidates, remaining))

        matches.sort(key=lambda m: m.confidence, reverse=True)
        matches = matches[: self.max_results]

        logger.debug(
            f"Matched '{title}' to {len(matches)} catalog songs "
            f"({', '.join(m.match_type for m in matches) or 'none'})"
        )
        return matches
