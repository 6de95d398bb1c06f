"""Selection state and the clipboard operations driven by it."""

from typing import Optional

from .clipboard import Clipboard
from .model import CursorPosition, TextBuffer

SelectionRange = tuple[CursorPosition, CursorPosition]


def normalized_range(anchor: CursorPosition, cursor: CursorPosition) -> SelectionRange:
    """Order the two selection endpoints so that start <= end."""
    if anchor <= cursor:
        return anchor.copy(), cursor.copy()
    return cursor.copy(), anchor.copy()


class Selection:
    """Anchor of an in-progress selection.

    The live end of the selection is always the buffer cursor, so the
    range has to be recomputed on every access: either end may have moved
    since the last one.
    """

    def __init__(self):
        self.anchor: Optional[CursorPosition] = None
        self.active = False

    def start(self, cursor: CursorPosition):
        self.anchor = cursor.copy()
        self.active = True

    def cancel(self):
        self.active = False
        self.anchor = None

    def toggle(self, cursor: CursorPosition) -> bool:
        """Start or stop selecting; returns the new active state."""
        if self.active:
            self.cancel()
        else:
            self.start(cursor)
        return self.active

    def range(self, cursor: CursorPosition) -> Optional[SelectionRange]:
        if not self.active or self.anchor is None:
            return None
        return normalized_range(self.anchor, cursor)


def _in_document(buffer: TextBuffer, sel_range: SelectionRange) -> bool:
    start, end = sel_range
    return start.row >= 0 and end.row < buffer.numrows


def extract(buffer: TextBuffer, sel_range: SelectionRange) -> Optional[str]:
    """Return the selected text, or None when there is nothing to copy.

    Rows of a multi-row selection are joined with ``\\n``; the end column
    is exclusive and clamped to the length of the end row.
    """
    if not _in_document(buffer, sel_range):
        return None
    start, end = sel_range

    if start.row == end.row:
        text = buffer.rows[start.row]
        if start.col >= len(text) or start.col >= end.col:
            return None
        return text[start.col:min(end.col, len(text))]

    parts = [buffer.rows[start.row][start.col:], "\n"]
    for i in range(start.row + 1, end.row):
        parts.append(buffer.rows[i])
        parts.append("\n")
    end_text = buffer.rows[end.row]
    parts.append(end_text[:min(end.col, len(end_text))])
    return "".join(parts)


def delete_range(buffer: TextBuffer, selection: Selection, sel_range: SelectionRange):
    """Remove the selected text and put the cursor where it started."""
    if not _in_document(buffer, sel_range):
        return
    start, end = sel_range

    if start.row == end.row:
        text = buffer.rows[start.row]
        if start.col < len(text) and start.col < end.col:
            stop = min(end.col, len(text))
            buffer.rows[start.row] = text[:start.col] + text[stop:]
    else:
        remainder = buffer.rows[end.row][end.col:]
        buffer.rows[start.row] = buffer.rows[start.row][:start.col] + remainder
        # Rows start.row+1 .. end.row inclusive
        del buffer.rows[start.row + 1:end.row + 1]

    buffer.move_to(start.row, start.col)
    selection.cancel()


def copy(buffer: TextBuffer, selection: Selection, clipboard: Clipboard) -> Optional[str]:
    """Copy the selection, or the current line when nothing is selected.

    Returns the status message to show, or None if nothing happened.
    """
    sel_range = selection.range(buffer.cursor)
    if sel_range is not None:
        clipboard.store(extract(buffer, sel_range))
        selection.cancel()
        return "Copied selection to clipboard"
    if buffer.on_virtual_row():
        return None
    clipboard.store(buffer.rows[buffer.cursor.row])
    return "Copied line to clipboard"


def cut(buffer: TextBuffer, selection: Selection, clipboard: Clipboard) -> Optional[str]:
    """Like copy, but the copied text is removed from the document."""
    sel_range = selection.range(buffer.cursor)
    if sel_range is not None:
        clipboard.store(extract(buffer, sel_range))
        delete_range(buffer, selection, sel_range)
        return "Cut selection to clipboard"
    if buffer.on_virtual_row():
        return None
    clipboard.store(buffer.rows[buffer.cursor.row])
    buffer.delete_row(buffer.cursor.row)
    return "Cut line to clipboard"


def paste(buffer: TextBuffer, selection: Selection, clipboard: Clipboard) -> Optional[str]:
    """Insert the clipboard at the cursor, replacing any active selection."""
    sel_range = selection.range(buffer.cursor)
    if sel_range is not None:
        delete_range(buffer, selection, sel_range)
    if clipboard.is_empty():
        return None
    for ch in clipboard.content:
        if ch in "\r\n":
            buffer.insert_newline()
        else:
            buffer.insert_char(ch)
    return "Pasted from clipboard"
