"""Incremental, case-insensitive search across buffer rows.

A search session runs from opening the find prompt until it is confirmed
or cancelled. While it runs, every keystroke re-runs the search: typing
refines the query and restarts from the top of the document, the arrow
keys step to the next (right/down) or previous (left/up) matching row,
wrapping around at either end.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .keyboard import EditorKey, KeyEvent
from .model import CursorPosition, TextBuffer


def find_all_in_row(text: str, query: str) -> list[tuple[int, int]]:
    """Return every case-insensitive, non-overlapping match as (start, end).

    Matches are listed left to right.
    """
    matches = []
    if not query:
        return matches
    haystack = text.lower()
    needle = query.lower()
    pos = haystack.find(needle)
    while pos != -1:
        matches.append((pos, pos + len(needle)))
        pos = haystack.find(needle, pos + len(needle))
    return matches


class SearchHint(Enum):
    FORWARD = 1
    BACKWARD = -1
    RESTART = 0


_HINTS_BY_KEY = {
    EditorKey.MOVE_RIGHT: SearchHint.FORWARD,
    EditorKey.MOVE_DOWN: SearchHint.FORWARD,
    EditorKey.MOVE_LEFT: SearchHint.BACKWARD,
    EditorKey.MOVE_UP: SearchHint.BACKWARD,
}


class IncrementalSearch:
    """Remembers the last match and the direction of travel.

    ``last_match`` is the row of the last match (-1 before the first one)
    and ``last_col`` its column, so repeated steps also visit later
    matches on the same row before moving on.
    """

    def __init__(self):
        self.last_match = -1
        self.last_col = -1
        self.direction = 1

    def reset(self):
        self.last_match = -1
        self.last_col = -1
        self.direction = 1

    def _step_within_row(self, buffer: TextBuffer, query: str) -> int:
        """Column of the next match on the last matching row, or -1."""
        if not 0 <= self.last_match < buffer.numrows:
            return -1
        matches = find_all_in_row(buffer.rows[self.last_match], query)
        if self.direction > 0:
            later = [start for start, _ in matches if start > self.last_col]
            return later[0] if later else -1
        earlier = [start for start, _ in matches if start < self.last_col]
        return earlier[-1] if earlier else -1

    def advance(self, buffer: TextBuffer, query: str,
                hint: SearchHint = SearchHint.RESTART) -> Optional[CursorPosition]:
        """Find the next match after the last one in the current direction.

        Scans at most every row once, wrapping around at either end of
        the document, and returns the position of the match or None. A
        RESTART hint forgets the last match and searches forward from
        the top.
        """
        if hint is SearchHint.RESTART:
            self.reset()
        else:
            self.direction = hint.value
        if self.last_match == -1:
            self.direction = 1

        numrows = buffer.numrows
        if not query or numrows == 0:
            return None

        col = self._step_within_row(buffer, query)
        if col != -1:
            self.last_col = col
            return CursorPosition(self.last_match, col)

        current = self.last_match
        for _ in range(numrows):
            current += self.direction
            if current == -1:
                current = numrows - 1
            elif current == numrows:
                current = 0
            matches = find_all_in_row(buffer.rows[current], query)
            if matches:
                start, _ = matches[0] if self.direction > 0 else matches[-1]
                self.last_match = current
                self.last_col = start
                return CursorPosition(current, start)
        return None


@dataclass
class SearchSnapshot:
    """Cursor and scroll offsets captured when a search session starts."""
    cursor: CursorPosition
    rowoff: int
    coloff: int


class SearchState(Enum):
    IDLE = "idle"
    PROMPTING = "prompting"


class SearchStatus(Enum):
    CONTINUE = "continue"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass
class SearchStep:
    """Result of feeding one key to the session."""
    status: SearchStatus
    match: Optional[CursorPosition] = None
    snapshot: Optional[SearchSnapshot] = None


class SearchSession:
    """Find-prompt state machine with the states Idle and Prompting.

    The session only reports what happened. Moving the cursor to a match,
    and restoring the snapshot after a cancel, is up to whoever started
    the session.
    """

    def __init__(self):
        self.state = SearchState.IDLE
        self.query = ""
        self.snapshot: Optional[SearchSnapshot] = None
        self.search = IncrementalSearch()

    @property
    def active(self) -> bool:
        return self.state is SearchState.PROMPTING

    @property
    def highlight_query(self) -> Optional[str]:
        """Query to highlight on screen while the prompt is open."""
        if self.active and self.query:
            return self.query
        return None

    def start(self, snapshot: SearchSnapshot):
        self.state = SearchState.PROMPTING
        self.query = ""
        self.snapshot = snapshot
        self.search.reset()

    def _finish(self, status: SearchStatus) -> SearchStep:
        snapshot = self.snapshot
        self.state = SearchState.IDLE
        self.query = ""
        self.snapshot = None
        self.search.reset()
        return SearchStep(status, snapshot=snapshot)

    def handle_key(self, event: KeyEvent, buffer: TextBuffer) -> SearchStep:
        if not self.active:
            return SearchStep(SearchStatus.CONTINUE)

        if event.key is EditorKey.ESCAPE:
            return self._finish(SearchStatus.CANCELLED)
        if event.key is EditorKey.CONFIRM:
            if self.query:
                return self._finish(SearchStatus.CONFIRMED)
            self.search.reset()
            return SearchStep(SearchStatus.CONTINUE)

        hint = SearchHint.RESTART
        if event.key in (EditorKey.DELETE_BACKWARD, EditorKey.DELETE_FORWARD):
            self.query = self.query[:-1]
        elif event.is_char and event.char.isprintable():
            self.query += event.char
        elif event.key in _HINTS_BY_KEY:
            hint = _HINTS_BY_KEY[event.key]

        match = self.search.advance(buffer, self.query, hint)
        return SearchStep(SearchStatus.CONTINUE, match=match)
