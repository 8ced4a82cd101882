"""Catalog router with dependency injection."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from core.dependencies import get_song_matcher
from setlists.matcher import SongMatcher
from setlists.models import SongMatchResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get(
    "/songs/matches",
    response_model=SongMatchResponse,
    summary="Find catalog songs matching a title",
    description="""
    Find up to five existing catalog songs for a freeform title, using exact,
    keyword and fuzzy matching in that order.

    Example request:
    ```
    GET /api/v1/catalog/songs/matches?title=Wild+Horses&artist=Rolling+Stones
    ```
    """,
    responses={
        200: {"description": "Matches returned (possibly empty)"},
        400: {"description": "Invalid request (blank title)"},
    },
)
async def find_song_matches(
    title: str = Query(..., description="Song title to match"),
    artist: str = Query("", description="Optional artist name"),
    matcher: SongMatcher = Depends(get_song_matcher),
):
    """Find catalog matches for a title."""
    if not title.strip():
        raise HTTPException(status_code=400, detail="title must not be blank")

    matches = await matcher.find_matches(title, artist)
    return SongMatchResponse(matches=matches, total=len(matches))
