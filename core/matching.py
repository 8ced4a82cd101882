"""Shared matching constants and utilities for song title reconciliation.

This module centralizes the scoring rules used by the song matcher so the
thresholds live in one place and can be unit tested without a catalog.
"""

import re

from rapidfuzz.distance import Levenshtein

# =============================================================================
# Normalization
# =============================================================================


def normalize_for_comparison(text: str | None) -> str:
    """Lowercase and trim text for comparison. Returns empty string for None."""
    if not text:
        return ""
    return text.lower().strip()


# =============================================================================
# Result Limiting and Thresholds
# =============================================================================

MAX_MATCH_RESULTS = 5
"""Maximum number of matches returned for a single title."""

DEFAULT_CANDIDATE_POOL_LIMIT = 1000
"""Number of catalog songs scored by the keyword and fuzzy strategies."""

EXACT_MATCH_CONFIDENCE = 1.0

KEYWORD_MIN_SCORE = 0.15
"""Keyword matches below this overlap ratio are dropped."""

ARTIST_KEYWORD_BONUS = 0.2
"""Flat bonus when the requested artist shares a keyword with a candidate artist."""

FUZZY_MIN_SCORE = 0.3
"""Fuzzy matches must score strictly above this."""

FUZZY_TITLE_WEIGHT = 0.7
FUZZY_ARTIST_WEIGHT = 0.3

AUTO_SELECT_CONFIDENCE = 0.7
"""Non-exact matches at or above this confidence may be pre-selected for the user."""


# =============================================================================
# Stopwords
# =============================================================================

STOPWORDS = frozenset(
    {
        # Articles
        "the",
        "a",
        "an",
        # Prepositions
        "in",
        "on",
        "at",
        "to",
        "for",
        "of",
        "with",
        # Conjunctions
        "and",
        "or",
        "but",
        # Possessives
        "my",
        "your",
        "his",
        "her",
        "its",
        "our",
        "their",
    }
)
"""Words to exclude when extracting significant keywords from song titles."""

MIN_KEYWORD_LENGTH = 3

_PUNCTUATION_RE = re.compile(r"[^\w\s]")


# =============================================================================
# Keyword Matching
# =============================================================================


def extract_keywords(text: str | None) -> list[str]:
    """Extract significant keywords from a title or artist name.

    Lowercases, strips punctuation, splits on whitespace, then drops
    stopwords and tokens shorter than three characters. Order is preserved
    and duplicates are removed.

    Examples:
        "The Wild Horses" -> ["wild", "horses"]
        "Don't Stop Me Now" -> ["dont", "stop", "now"]
    """
    if not text:
        return []
    cleaned = _PUNCTUATION_RE.sub("", text.lower())
    keywords: list[str] = []
    for word in cleaned.split():
        if word in STOPWORDS or len(word) < MIN_KEYWORD_LENGTH:
            continue
        if word not in keywords:
            keywords.append(word)
    return keywords


def keywords_match(first: str, second: str) -> bool:
    """Two keywords match if identical or one contains the other ("rose"/"roses")."""
    return first == second or first in second or second in first


def keyword_intersection(source: list[str], target: list[str]) -> list[str]:
    """Return the keywords from ``source`` that match any keyword in ``target``."""
    return [word for word in source if any(keywords_match(word, other) for other in target)]


def calculate_keyword_score(
    title_keywords: list[str],
    candidate_keywords: list[str],
    artist_keywords: list[str] | None = None,
    candidate_artist_keywords: list[str] | None = None,
) -> tuple[float, list[str]]:
    """Score keyword overlap between a requested title and a candidate title.

    Scoring rules:
    - Base score: matched keywords / max(len(title_keywords), len(candidate_keywords))
    - Artist keyword overlap: +0.2
    - Capped at 1.0

    A candidate sharing no title keywords scores 0.0 regardless of artist.

    Returns:
        Tuple of (score, matched title keywords)
    """
    if not title_keywords or not candidate_keywords:
        return 0.0, []

    matched = keyword_intersection(title_keywords, candidate_keywords)
    if not matched:
        return 0.0, []

    score = len(matched) / max(len(title_keywords), len(candidate_keywords))

    if artist_keywords and candidate_artist_keywords:
        if keyword_intersection(artist_keywords, candidate_artist_keywords):
            score += ARTIST_KEYWORD_BONUS

    return min(score, 1.0), matched


# =============================================================================
# Fuzzy Matching
# =============================================================================


def calculate_similarity(first: str | None, second: str | None) -> float:
    """Normalized Levenshtein similarity between two strings.

    Both strings are lowercased and trimmed first. The result is
    ``(max_len - edit_distance) / max_len``; two empty strings are identical.

    Returns:
        Similarity between 0.0 and 1.0
    """
    a = normalize_for_comparison(first)
    b = normalize_for_comparison(second)

    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0

    distance = Levenshtein.distance(a, b)
    return (max_len - distance) / max_len


def best_artist_similarity(artist: str, candidate_artists: list[str]) -> float:
    """Highest similarity between ``artist`` and any of ``candidate_artists`` (0.0 if none)."""
    if not candidate_artists:
        return 0.0
    return max(calculate_similarity(artist, name) for name in candidate_artists)


def calculate_fuzzy_score(
    title: str,
    candidate_title: str,
    artist: str = "",
    candidate_artists: list[str] | None = None,
) -> float:
    """Combine title and artist similarity for the fuzzy strategy.

    Without a requested artist the score is the title similarity alone.
    With one, the score is ``0.7 * title + 0.3 * best_artist``; a candidate
    with no artists contributes 0.0 for the artist part.
    """
    title_similarity = calculate_similarity(title, candidate_title)
    if not normalize_for_comparison(artist):
        return title_similarity

    artist_similarity = best_artist_similarity(artist, candidate_artists or [])
    return FUZZY_TITLE_WEIGHT * title_similarity + FUZZY_ARTIST_WEIGHT * artist_similarity
