"""Quick-set workflow: pasted text in, catalog-linked setlist out."""

import asyncio
import logging

from core.matching import AUTO_SELECT_CONFIDENCE
from setlists.matcher import SongMatcher, select_match
from setlists.models import (
    ParsedSong,
    ParseResult,
    QuickSetResponse,
    QuickSetSection,
    QuickSetSong,
)
from setlists.parser import SetlistTextParser

logger = logging.getLogger(__name__)


async def match_parsed_songs(
    songs: list[ParsedSong],
    matcher: SongMatcher,
    auto_select_confidence: float = AUTO_SELECT_CONFIDENCE,
) -> list[QuickSetSong]:
    """Find catalog matches for every parsed song concurrently.

    Results keep the order of ``songs``.
    """

    async def match_one(song: ParsedSong) -> QuickSetSong:
        matches = await matcher.find_matches(song.title, song.artist)
        return QuickSetSong(
            song=song,
            matches=matches,
            selected_match=select_match(matches, auto_select_confidence),
        )

    return list(await asyncio.gather(*[match_one(song) for song in songs]))


def assemble_quick_set(parsed: ParseResult, matched: list[QuickSetSong]) -> QuickSetResponse:
    """Group matched songs back into the parsed sets."""
    by_line = {item.song.line_number: item for item in matched}

    sections = [
        QuickSetSection(
            name=parsed_set.name,
            set_number=parsed_set.set_number,
            storage_name=parsed_set.storage_name,
            songs=[by_line[song.line_number] for song in parsed_set.songs],
        )
        for parsed_set in parsed.sets
    ]

    return QuickSetResponse(
        sets=sections,
        errors=parsed.errors,
        total_songs=len(matched),
        matched_songs=sum(1 for item in matched if item.selected_match is not None),
    )


async def build_quick_set(
    text: str,
    matcher: SongMatcher,
    auto_select_confidence: float = AUTO_SELECT_CONFIDENCE,
    parser: SetlistTextParser | None = None,
) -> QuickSetResponse:
    """Parse pasted setlist text and attach catalog matches to each song."""
    parsed = (parser or SetlistTextParser()).parse(text)
    matched = await match_parsed_songs(parsed.songs, matcher, auto_select_confidence)
    response = assemble_quick_set(parsed, matched)

    logger.info(
        f"Quick set built: {response.total_songs} songs in {len(response.sets)} sets, "
        f"{response.matched_songs} auto-matched, {len(response.errors)} errors"
    )
    return response
