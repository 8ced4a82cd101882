"""Free-text setlist parser.

Turns a musician's pasted setlist notes into ordered sets of songs. Two
layouts are understood:

- Header-based: lines such as ``Set 1:``, ``Set II``, ``Encore`` or ``E``
  start a new set and every other line is a song.
- Blank-line separated: when no header line exists anywhere, each block of
  lines separated by blank lines is one set.

Song lines are ``Title`` or ``Title, Artist``. Bad lines are reported in
``ParseResult.errors`` and skipped; parsing never raises.
"""

import logging
import re
from dataclasses import dataclass
from enum import StrEnum

from setlists.models import (
    MAX_NUMBERED_SETS,
    MAYBE_SET_NUMBER,
    ParsedSet,
    ParsedSong,
    ParseResult,
    set_display_name,
)

logger = logging.getLogger(__name__)

NO_SONGS_MESSAGE = "No songs found. Please enter at least one song."

REPRISE_SUFFIX = " Reprise"

# Trailing segue marker ("Song A ->" segues into the next song)
_SEGUE_RE = re.compile(r"\s*(?:->|>)\s*$")

_QUOTE_PAIRS = {'"': '"', "'": "'", "“": "”", "‘": "’"}

ROMAN_NUMERALS = {
    "i": 1,
    "ii": 2,
    "iii": 3,
    "iv": 4,
    "v": 5,
    "vi": 6,
    "vii": 7,
    "viii": 8,
    "ix": 9,
    "x": 10,
}


def roman_to_number(numeral: str) -> int | None:
    """Convert a Roman numeral I-X (any case) to an int, or None if unrecognized."""
    return ROMAN_NUMERALS.get(numeral.strip().lower())


def parse_set_token(token: str) -> int | None:
    """Parse the number in a ``Set <N>`` header. Returns None when unusable."""
    if token.isdigit():
        number = int(token)
        return number if number >= 1 else None
    return roman_to_number(token)


# =============================================================================
# Header Patterns
# =============================================================================


class HeaderKind(StrEnum):
    NUMBERED = "numbered"
    ENCORE = "encore"


@dataclass(frozen=True)
class HeaderPattern:
    """One recognized set-header shape."""

    name: str
    regex: re.Pattern
    kind: HeaderKind
    uses_colon: bool


@dataclass(frozen=True)
class HeaderMatch:
    pattern: HeaderPattern
    token: str = ""
    """The raw set number for numbered headers."""


_SET_NUMBER = r"set(?:\s*(?P<digits>\d+)|\s+(?P<roman>[ivx]+))"

NUMBERED_WITH_COLON = HeaderPattern(
    "numbered_with_colon",
    re.compile(rf"^{_SET_NUMBER}\s*:\s*$", re.IGNORECASE),
    HeaderKind.NUMBERED,
    uses_colon=True,
)
NUMBERED = HeaderPattern(
    "numbered",
    re.compile(rf"^{_SET_NUMBER}\s*$", re.IGNORECASE),
    HeaderKind.NUMBERED,
    uses_colon=False,
)
ENCORE_WITH_COLON = HeaderPattern(
    "encore_with_colon",
    re.compile(r"^encore\s*:\s*$", re.IGNORECASE),
    HeaderKind.ENCORE,
    uses_colon=True,
)
ENCORE = HeaderPattern(
    "encore",
    re.compile(r"^encore\s*$", re.IGNORECASE),
    HeaderKind.ENCORE,
    uses_colon=False,
)
E_SHORTHAND = HeaderPattern(
    "e_shorthand",
    re.compile(r"^e\s*:?\s*$", re.IGNORECASE),
    HeaderKind.ENCORE,
    uses_colon=False,
)

COLON_FIRST_PATTERNS = (NUMBERED_WITH_COLON, ENCORE_WITH_COLON, NUMBERED, ENCORE, E_SHORTHAND)
NO_COLON_FIRST_PATTERNS = (NUMBERED, ENCORE, NUMBERED_WITH_COLON, ENCORE_WITH_COLON, E_SHORTHAND)


def match_header(line: str, patterns=NO_COLON_FIRST_PATTERNS) -> HeaderMatch | None:
    """Return the first header pattern matching ``line``, in ``patterns`` order."""
    stripped = line.strip()
    for pattern in patterns:
        found = pattern.regex.match(stripped)
        if found:
            if pattern.kind is HeaderKind.NUMBERED:
                token = found.group("digits") or found.group("roman")
                return HeaderMatch(pattern, token)
            return HeaderMatch(pattern)
    return None


def is_set_header(line: str) -> bool:
    return match_header(line) is not None


def uses_colon_headers(lines: list[str]) -> bool:
    """Lock in the colon convention if the first non-blank line is a colon header."""
    for line in lines:
        if line.strip():
            found = match_header(line, (NUMBERED_WITH_COLON, ENCORE_WITH_COLON))
            return found is not None
    return False


# =============================================================================
# Song Lines
# =============================================================================


def _strip_quotes(part: str) -> str:
    if len(part) >= 2 and _QUOTE_PAIRS.get(part[0]) == part[-1]:
        return part[1:-1].strip()
    return part


def parse_song_line(
    line: str, line_number: int, set_number: int
) -> tuple[ParsedSong | None, str | None]:
    """Parse ``Title`` or ``Title, Artist``.

    Returns:
        Tuple of (song, error). Exactly one of them is None.
    """
    parts = [_strip_quotes(part.strip()) for part in line.split(",")]

    if len(parts) > 2:
        return None, (
            f"Line {line_number}: Too many commas ({len(parts) - 1}). "
            'Use the format "Title" or "Title, Artist".'
        )

    title = _SEGUE_RE.sub("", parts[0]).strip()
    if not title:
        return None, f"Line {line_number}: Empty song title"

    artist = parts[1] if len(parts) > 1 else ""
    return ParsedSong(
        title=title, artist=artist, set_number=set_number, line_number=line_number
    ), None


def mark_reprises(songs: list[ParsedSong]) -> list[ParsedSong]:
    """Append " Reprise" to every repeat of a title already played.

    Titles are compared lowercased and trimmed. The first occurrence is kept
    as-is; each later occurrence gets exactly one suffix. Returns new song
    objects for renamed entries and leaves the input untouched.
    """
    seen: set[str] = set()
    result: list[ParsedSong] = []
    for song in songs:
        key = song.title.lower().strip()
        if key in seen:
            result.append(song.model_copy(update={"title": song.title + REPRISE_SUFFIX}))
        else:
            seen.add(key)
            result.append(song)
    return result


# =============================================================================
# Parser
# =============================================================================


def effective_set_number(set_number: int | None) -> int:
    """Numbered sets above the cap, or unusable numbers, go to the Maybe set."""
    if set_number is None or set_number > MAX_NUMBERED_SETS:
        return MAYBE_SET_NUMBER
    return set_number


@dataclass
class _ParseState:
    """Mutable bookkeeping for a single parse call."""

    sets: dict[int, ParsedSet]
    songs: list[ParsedSong]
    errors: list[str]
    current_set: int | None = None
    highest_set: int = 0

    def open_set(self, set_number: int) -> int:
        if set_number not in self.sets:
            self.sets[set_number] = ParsedSet(
                name=set_display_name(set_number), set_number=set_number
            )
        self.current_set = set_number
        return set_number

    def add_song_line(self, line: str, line_number: int) -> None:
        set_number = self.current_set
        if set_number is None:
            set_number = self.open_set(1)
            self.highest_set = max(self.highest_set, 1)
        song, error = parse_song_line(line, line_number, set_number)
        if error:
            self.errors.append(error)
        elif song:
            self.songs.append(song)


class SetlistTextParser:
    """Parse pasted setlist text into sets and songs.

    Instances hold no state between calls and are safe to share.
    """

    def parse(self, text: str | None) -> ParseResult:
        lines = (text or "").splitlines()
        state = _ParseState(sets={}, songs=[], errors=[])

        if any(is_set_header(line) for line in lines if line.strip()):
            self._parse_with_headers(lines, state)
            songs = mark_reprises(state.songs)
            mode = "headers"
        else:
            self._parse_blank_line_groups(lines, state)
            songs = state.songs
            mode = "blank_lines"

        # Sets are rebuilt from the final flat list so both views share titles.
        sets = [
            parsed_set.model_copy(
                update={"songs": [s for s in songs if s.set_number == parsed_set.set_number]}
            )
            for parsed_set in state.sets.values()
        ]

        errors = list(state.errors)
        if not songs:
            errors.append(NO_SONGS_MESSAGE)

        logger.debug(
            f"Parsed setlist ({mode}): {len(songs)} songs in {len(sets)} sets, "
            f"{len(errors)} errors"
        )
        return ParseResult(sets=sets, songs=songs, errors=errors)

    def _parse_blank_line_groups(self, lines: list[str], state: _ParseState) -> None:
        group_index = 0
        in_group = False
        for line_number, raw in enumerate(lines, start=1):
            line = raw.strip()
            if not line:
                if in_group:
                    group_index += 1
                in_group = False
                continue
            if not in_group:
                state.open_set(effective_set_number(group_index + 1))
                in_group = True
            state.add_song_line(line, line_number)

    def _parse_with_headers(self, lines: list[str], state: _ParseState) -> None:
        patterns = (
            COLON_FIRST_PATTERNS if uses_colon_headers(lines) else NO_COLON_FIRST_PATTERNS
        )
        for line_number, raw in enumerate(lines, start=1):
            line = raw.strip()
            if not line:
                continue

            header = match_header(line, patterns)
            if header is None:
                state.add_song_line(line, line_number)
                continue

            if header.pattern.kind is HeaderKind.ENCORE:
                set_number: int | None = min(state.highest_set + 1, MAX_NUMBERED_SETS)
            else:
                set_number = parse_set_token(header.token)
                if set_number is None:
                    state.errors.append(
                        f'Line {line_number}: Unrecognized set number "{header.token}", '
                        "songs moved to the Maybe set"
                    )

            if set_number is not None:
                state.highest_set = max(state.highest_set, set_number)
            state.open_set(effective_set_number(set_number))


_default_parser = SetlistTextParser()


def parse_setlist(text: str | None) -> ParseResult:
    """Parse pasted setlist text with a shared parser instance."""
    return _default_parser.parse(text)
