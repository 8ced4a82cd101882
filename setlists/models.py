"""Models for parsed setlists and the quick-set API contract."""

from enum import StrEnum

from pydantic import BaseModel, Field, computed_field

MAYBE_SET_NUMBER = 999
"""Sentinel set number for the overflow bucket."""

MAYBE_SET_NAME = "Maybe"

MAX_NUMBERED_SETS = 4
"""Sets beyond this number are routed to the Maybe set."""


def set_display_name(set_number: int) -> str:
    """Display name for a set number: "Set 1" .. "Set 4", otherwise "Maybe"."""
    if 1 <= set_number <= MAX_NUMBERED_SETS:
        return f"Set {set_number}"
    return MAYBE_SET_NAME


def set_storage_name(set_number: int) -> str:
    """Storage enum value for a set (Set 1, Set 2, Set 3, Set 4, Maybe)."""
    return set_display_name(set_number)


def set_storage_order(set_number: int) -> int:
    """Storage ordering for a set; Maybe always sorts after the numbered sets."""
    if 1 <= set_number <= MAX_NUMBERED_SETS:
        return set_number
    return MAX_NUMBERED_SETS + 1


class ParsedSong(BaseModel):
    """A song line recovered from pasted setlist text."""

    title: str
    artist: str = ""
    set_number: int
    line_number: int
    """1-based position of the line in the original input."""


class ParsedSet(BaseModel):
    """A named, ordered group of parsed songs."""

    name: str
    set_number: int
    songs: list[ParsedSong] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def storage_name(self) -> str:
        return set_storage_name(self.set_number)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def storage_order(self) -> int:
        return set_storage_order(self.set_number)


class ParseResult(BaseModel):
    """Output of the setlist text parser.

    Every song in ``songs`` also appears in exactly one set's ``songs``.
    """

    sets: list[ParsedSet] = Field(default_factory=list)
    songs: list[ParsedSong] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class QuickSetRequest(BaseModel):
    """Request body for the quick-set endpoints."""

    text: str


class MatchType(StrEnum):
    """How a catalog song was matched to a parsed title."""

    EXACT = "exact"
    """Case-insensitive title (and artist, when given) equality."""

    KEYWORD = "keyword"
    """Overlap of significant title keywords."""

    FUZZY = "fuzzy"
    """Levenshtein similarity of title and artist."""


class SongMatch(BaseModel):
    """A candidate catalog song for a parsed title. Never persisted."""

    song_id: int
    title: str
    artist_names: list[str] = Field(default_factory=list)
    match_type: MatchType
    confidence: float = Field(ge=0.0, le=1.0)
    matched_keywords: list[str] = Field(default_factory=list)
    """Only populated for keyword matches."""


class SongMatchResponse(BaseModel):
    """Response from the catalog match endpoint."""

    matches: list[SongMatch] = Field(default_factory=list)
    total: int = 0


class QuickSetSong(BaseModel):
    """A parsed song with its catalog suggestions."""

    song: ParsedSong
    matches: list[SongMatch] = Field(default_factory=list)
    selected_match: SongMatch | None = None
    """Pre-selected match, if one is confident enough to skip user confirmation."""


class QuickSetSection(BaseModel):
    name: str
    set_number: int
    storage_name: str
    songs: list[QuickSetSong] = Field(default_factory=list)


class QuickSetResponse(BaseModel):
    """Structured, catalog-linked setlist built from pasted text."""

    sets: list[QuickSetSection] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    total_songs: int = 0
    matched_songs: int = 0
