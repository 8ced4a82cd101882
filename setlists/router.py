"""Quick-set API router."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from config.settings import Settings, get_settings
from core.dependencies import get_setlist_parser, get_song_matcher
from setlists.matcher import SongMatcher
from setlists.models import ParseResult, QuickSetRequest, QuickSetResponse
from setlists.orchestrator import build_quick_set
from setlists.parser import SetlistTextParser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/setlists", tags=["setlists"])


@router.post(
    "/quick-set/parse",
    response_model=ParseResult,
    summary="Parse pasted setlist text",
    description="""
    Parse freeform setlist text into sets and songs without touching the catalog.

    Sets are detected from header lines (`Set 1:`, `Set II`, `Encore`, `E`) or,
    when no header exists, from blank lines between groups of songs. Each song
    line is `Title` or `Title, Artist`. Problem lines are reported in `errors`.

    Example body:
    ```
    {"text": "Set 1:\\nWild Horses, Rolling Stones\\nEncore\\nGloria"}
    ```
    """,
    responses={
        200: {"description": "Text parsed (check errors for skipped lines)"},
    },
)
async def parse_quick_set(
    request: QuickSetRequest,
    parser: SetlistTextParser = Depends(get_setlist_parser),
):
    """Parse pasted setlist text."""
    return parser.parse(request.text)


@router.post(
    "/quick-set",
    response_model=QuickSetResponse,
    summary="Build a catalog-linked setlist from pasted text",
    description="""
    Parses the text like `/quick-set/parse`, then looks up catalog matches for
    every song. Exact matches, and others at or above the configured
    confidence, are returned as `selected_match`; the rest are suggestions.
    """,
    responses={
        200: {"description": "Quick set built"},
        500: {"description": "Internal server error"},
    },
)
async def create_quick_set(
    request: QuickSetRequest,
    matcher: SongMatcher = Depends(get_song_matcher),
    parser: SetlistTextParser = Depends(get_setlist_parser),
    settings: Settings = Depends(get_settings),
):
    """Parse pasted text and match each song against the catalog."""
    try:
        return await build_quick_set(
            request.text,
            matcher,
            auto_select_confidence=settings.auto_select_confidence,
            parser=parser,
        )
    except Exception as e:
        logger.error(f"Quick set failed: {e}")
        raise HTTPException(status_code=500, detail="Internal server error") from e
