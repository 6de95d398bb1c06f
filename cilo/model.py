from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass
class CursorPosition:
    row: int = 0
    col: int = 0

    def __lt__(self, other):
        if self.row != other.row:
            return self.row < other.row
        return self.col < other.col

    def __le__(self, other):
        return not other < self

    def __ge__(self, other):
        return not self < other

    def copy(self) -> "CursorPosition":
        return CursorPosition(self.row, self.col)


class TextBuffer:
    """Line-oriented document plus the cursor that edits it.

    Rows are plain strings without line terminators. The cursor may sit
    on the virtual empty line just past the last row (``row == numrows``),
    in which case its column is always 0.

    Every mutation treats out-of-range indexes as a no-op rather than an
    error, so a cursor or selection that got out of sync with the rows
    can never corrupt the document.
    """

    rows: list[str]
    cursor: CursorPosition

    def __init__(self, rows: Optional[list[str]] = None):
        self.rows = list(rows) if rows is not None else []
        self.cursor = CursorPosition()

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "TextBuffer":
        """Build a buffer from lines as read from disk.

        Trailing ``\\n`` and ``\\r`` characters are stripped, so both
        Unix and DOS line endings load into the same rows.
        """
        return cls([line.rstrip("\r\n") for line in lines])

    @classmethod
    def from_text(cls, text: str) -> "TextBuffer":
        """Build a buffer from a whole file's contents.

        Only ``\\n`` ends a row; a lone ``\\r`` inside a line is kept. The
        final newline does not start another row.
        """
        lines = text.split("\n")
        if lines[-1] == "":
            lines.pop()
        return cls.from_lines(lines)

    @property
    def numrows(self) -> int:
        return len(self.rows)

    def row_text(self, at: int) -> str:
        if 0 <= at < len(self.rows):
            return self.rows[at]
        return ""

    def row_size(self, at: int) -> int:
        return len(self.row_text(at))

    def on_virtual_row(self) -> bool:
        return self.cursor.row >= len(self.rows)

    def serialize(self) -> str:
        """Return the on-disk representation: every row ends with ``\\n``."""
        return "".join(row + "\n" for row in self.rows)

    # --- Row level ---

    def insert_row(self, at: int, content: str = ""):
        if at < 0 or at > len(self.rows):
            return
        self.rows.insert(at, content)

    def delete_row(self, at: int):
        if at < 0 or at >= len(self.rows):
            return
        del self.rows[at]
        self.clamp_cursor()

    def _append_to_row(self, at: int, text: str):
        self.rows[at] = self.rows[at] + text

    # --- Character level ---

    def insert_char(self, ch: str):
        """Insert a character at the cursor and advance past it."""
        if self.on_virtual_row():
            self.insert_row(len(self.rows), "")
        row = self.cursor.row
        col = self.cursor.col
        text = self.rows[row]
        self.rows[row] = text[:col] + ch + text[col:]
        self.cursor.col += 1

    def delete_char_before(self):
        """Backspace: delete the character left of the cursor.

        At column 0 the current row is joined onto the end of the previous
        one and the cursor lands on the join point.
        """
        if self.on_virtual_row():
            return
        row = self.cursor.row
        col = self.cursor.col
        if col == 0 and row == 0:
            return
        if col > 0:
            text = self.rows[row]
            self.rows[row] = text[:col - 1] + text[col:]
            self.cursor.col -= 1
        else:
            prev_size = len(self.rows[row - 1])
            self._append_to_row(row - 1, self.rows[row])
            del self.rows[row]
            self.cursor.row = row - 1
            self.cursor.col = prev_size

    def delete_char_at(self):
        """Forward delete: remove the character under the cursor.

        At the end of a row the next row is joined onto this one.
        """
        if self.on_virtual_row():
            return
        row = self.cursor.row
        col = self.cursor.col
        text = self.rows[row]
        if col < len(text):
            self.rows[row] = text[:col] + text[col + 1:]
        elif row + 1 < len(self.rows):
            self._append_to_row(row, self.rows[row + 1])
            del self.rows[row + 1]
        # else: end of document, nothing to join

    def insert_newline(self):
        """Split the current row at the cursor."""
        row = self.cursor.row
        if self.on_virtual_row():
            self.insert_row(len(self.rows), "")
        else:
            text = self.rows[row]
            col = self.cursor.col
            if col == 0:
                self.insert_row(row, "")
            elif col >= len(text):
                self.insert_row(row + 1, "")
            else:
                self.insert_row(row + 1, text[col:])
                self.rows[row] = text[:col]
        self.cursor.row = row + 1
        self.cursor.col = 0

    # --- Cursor movement ---

    def clamp_cursor(self):
        """Pull the cursor back inside the document after rows changed."""
        if self.cursor.row > len(self.rows):
            self.cursor.row = len(self.rows)
        if self.cursor.row < 0:
            self.cursor.row = 0
        size = self.row_size(self.cursor.row)
        if self.cursor.col > size:
            self.cursor.col = size
        if self.cursor.col < 0:
            self.cursor.col = 0

    def move_left(self):
        if self.cursor.col > 0:
            self.cursor.col -= 1

    def move_right(self):
        if not self.on_virtual_row() and self.cursor.col < len(self.rows[self.cursor.row]):
            self.cursor.col += 1

    def move_up(self):
        if self.cursor.row > 0:
            self.cursor.row -= 1
        self.clamp_cursor()

    def move_down(self):
        if self.cursor.row < len(self.rows):
            self.cursor.row += 1
        self.clamp_cursor()

    def move_home(self):
        self.cursor.col = 0

    def move_end(self):
        if not self.on_virtual_row():
            self.cursor.col = len(self.rows[self.cursor.row])

    def page_up(self, rows: int):
        for _ in range(rows):
            self.move_up()

    def page_down(self, rows: int):
        for _ in range(rows):
            self.move_down()

    def move_to(self, row: int, col: int):
        """Place the cursor at (row, col), clamped to the document."""
        self.cursor = CursorPosition(row, col)
        self.clamp_cursor()
