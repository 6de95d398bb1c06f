"""Viewport scrolling and styled-span rendering of the visible rows."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .constants import EditorConstants
from .model import CursorPosition, TextBuffer
from .search import find_all_in_row
from .selection import SelectionRange

Interval = tuple[int, int]


def gutter_width(numrows: int) -> int:
    """Width of the line-number gutter: digits of the last line plus a space."""
    return len(str(max(numrows, 1))) + 1


class Style(Enum):
    NORMAL = "normal"
    INVERSE = "inverse"


@dataclass
class Span:
    text: str
    style: Style = Style.NORMAL


@dataclass
class Viewport:
    """Top-left visible cell and the size of the text area.

    ``screencols`` includes the gutter; the width left for text is
    ``available_width(gutter)``.
    """
    rowoff: int = 0
    coloff: int = 0
    screenrows: int = 24
    screencols: int = 80
    scroll_invalidated: bool = False

    def available_width(self, gutter: int) -> int:
        return max(self.screencols - gutter, 1)

    def invalidate_scroll(self):
        """Make the next scroll() bring the cursor row to the top of the window."""
        self.scroll_invalidated = True

    def scroll(self, cursor: CursorPosition, gutter: int):
        """Adjust the offsets by the least amount that keeps the cursor visible."""
        if self.scroll_invalidated:
            self.rowoff = cursor.row
            self.scroll_invalidated = False
        if cursor.row < self.rowoff:
            self.rowoff = cursor.row
        if cursor.row >= self.rowoff + self.screenrows:
            self.rowoff = cursor.row - self.screenrows + 1

        width = self.available_width(gutter)
        if cursor.col < self.coloff:
            self.coloff = cursor.col
        if cursor.col >= self.coloff + width:
            self.coloff = cursor.col - width + 1

        self.rowoff = max(self.rowoff, 0)
        self.coloff = max(self.coloff, 0)


def spans_from_intervals(visible: str, coloff: int, intervals: list[Interval]) -> list[Span]:
    """Split the visible slice of a row into normal and inverted spans.

    ``intervals`` are absolute (start, end) columns of the row, sorted and
    non-overlapping. They are clipped to the visible slice, which begins
    at column ``coloff``; anything outside it is dropped.
    """
    spans: list[Span] = []
    pos = 0
    for start, end in intervals:
        start = max(start - coloff, pos)
        end = min(end - coloff, len(visible))
        if start >= end:
            continue
        if start > pos:
            spans.append(Span(visible[pos:start]))
        spans.append(Span(visible[start:end], Style.INVERSE))
        pos = end
    if pos < len(visible):
        spans.append(Span(visible[pos:]))
    return spans


def row_is_selected(row_index: int, sel_range: Optional[SelectionRange]) -> bool:
    if sel_range is None:
        return False
    start, end = sel_range
    return start.row <= row_index <= end.row


def selection_interval(row_index: int, row_size: int,
                       sel_range: Optional[SelectionRange]) -> Optional[Interval]:
    """Columns of ``row_index`` covered by the selection, or None."""
    if not row_is_selected(row_index, sel_range):
        return None
    start, end = sel_range
    sel_start = start.col if row_index == start.row else 0
    sel_end = end.col if row_index == end.row else row_size
    return (sel_start, sel_end)


def render_row(text: str, row_index: int, viewport: Viewport, gutter: int,
               sel_range: Optional[SelectionRange] = None,
               query: Optional[str] = None) -> list[Span]:
    """Render the visible part of one document row as styled spans.

    A selection on the row hides any search highlighting on it, even
    where the two do not overlap. Search matches are looked for from the
    first visible column on, so a match cut by the left edge is not shown
    while one running past the right edge is clipped.
    """
    coloff = viewport.coloff
    visible = text[coloff:coloff + viewport.available_width(gutter)]

    interval = selection_interval(row_index, len(text), sel_range)
    if interval is not None:
        intervals = [interval]
    elif query:
        intervals = [(start + coloff, end + coloff)
                     for start, end in find_all_in_row(text[coloff:], query)]
    else:
        intervals = []
    return spans_from_intervals(visible, coloff, intervals)


@dataclass
class RenderedRow:
    gutter: str
    spans: list[Span] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)


@dataclass
class Frame:
    """Everything the terminal backend needs to draw one screen."""
    rows: list[RenderedRow]
    status_bar: str
    message: str
    cursor_y: int
    cursor_x: int


def compose_status_bar(filename: Optional[str], numrows: int, cursor_row: int, width: int) -> str:
    name = filename or EditorConstants.NO_NAME
    left = f"{name[:EditorConstants.STATUS_FILENAME_WIDTH]} - {numrows} lines"[:width]
    right = f"{cursor_row + 1}/{numrows}"
    if len(left) + len(right) <= width:
        return left + " " * (width - len(left) - len(right)) + right
    return left.ljust(width)


class TerminalTextView:
    """Turns the buffer, selection and search state into a Frame."""

    def __init__(self, screenrows: int = 24, screencols: int = 80, version: str = ""):
        self.viewport = Viewport(screenrows=screenrows, screencols=screencols)
        self.version = version

    def resize(self, screenrows: int, screencols: int):
        self.viewport.screenrows = max(screenrows, 1)
        self.viewport.screencols = max(screencols, 1)

    def _welcome_row(self, gutter: int) -> RenderedRow:
        width = self.viewport.available_width(gutter)
        welcome = EditorConstants.WELCOME_MESSAGE.format(self.version)[:width]
        padding = (width - len(welcome)) // 2
        return RenderedRow(
            EditorConstants.FILLER_GLYPH.rjust(gutter),
            [Span(" " * padding + welcome)],
        )

    def render(self, buffer: TextBuffer,
               sel_range: Optional[SelectionRange] = None,
               query: Optional[str] = None,
               filename: Optional[str] = None,
               message: str = "") -> Frame:
        """Scroll to the cursor and lay out one full screen."""
        gutter = gutter_width(buffer.numrows)
        vp = self.viewport
        vp.scroll(buffer.cursor, gutter)

        rows: list[RenderedRow] = []
        for y in range(vp.screenrows):
            filerow = y + vp.rowoff
            if filerow >= buffer.numrows:
                if buffer.numrows == 0 and y == vp.screenrows // 3:
                    rows.append(self._welcome_row(gutter))
                else:
                    rows.append(RenderedRow(EditorConstants.FILLER_GLYPH.rjust(gutter)))
                continue
            number = str(filerow + 1).rjust(gutter - 1) + " "
            spans = render_row(buffer.rows[filerow], filerow, vp, gutter, sel_range, query)
            rows.append(RenderedRow(number, spans))

        return Frame(
            rows=rows,
            status_bar=compose_status_bar(filename, buffer.numrows, buffer.cursor.row, vp.screencols),
            message=message[:vp.screencols],
            cursor_y=buffer.cursor.row - vp.rowoff,
            cursor_x=buffer.cursor.col - vp.coloff + gutter,
        )
