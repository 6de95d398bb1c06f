"""Terminal interface using Blessed for display and Curtsies for input."""

import logging
import select
import sys
from typing import Optional

import blessed

from .constants import EditorConstants
from .view import Frame, Span, Style

logger = logging.getLogger(__name__)


class TerminalInterface:
    """Handles terminal I/O using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        self._curtsies_input: Optional[object] = None

    def setup(self):
        """Enter fullscreen mode and switch the keyboard to raw input."""
        # Raw mode first: without it there is no way to read keys
        from curtsies import Input  # type: ignore
        self._curtsies_input = Input(keynames='curtsies')  # type: ignore
        self._curtsies_input.__enter__()
        print(self.term.enter_fullscreen, end='')
        print(self.term.clear, end='', flush=True)
        self.is_fullscreen = True

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self.is_fullscreen:
            print(self.term.exit_fullscreen, end='')
            print(self.term.normal_cursor, end='', flush=True)
            self.is_fullscreen = False
        if self._curtsies_input is not None:
            try:
                self._curtsies_input.__exit__(None, None, None)  # type: ignore
            except Exception as e:
                # Teardown runs on the way out of the program; report and move on
                logger.warning(f"Could not restore terminal input mode: {e}")
            finally:
                self._curtsies_input = None

    def _styled(self, span: Span) -> str:
        if span.style is Style.INVERSE:
            return self.term.reverse + span.text + self.term.normal
        return span.text

    def draw_frame(self, frame: Frame):
        """Draw a complete frame and place the cursor.

        Text rows come first, then the inverted status bar and the
        message line below them.
        """
        out = [self.term.hide_cursor, self.term.home]
        for y, row in enumerate(frame.rows):
            out.append(self.term.move_yx(y, 0))
            out.append(row.gutter)
            out.extend(self._styled(span) for span in row.spans)
            out.append(self.term.clear_eol)

        status_y = len(frame.rows)
        out.append(self.term.move_yx(status_y, 0))
        out.append(self.term.reverse + frame.status_bar + self.term.normal)
        out.append(self.term.move_yx(status_y + 1, 0))
        out.append(frame.message)
        out.append(self.term.clear_eol)

        out.append(self.term.move_yx(frame.cursor_y, frame.cursor_x))
        out.append(self.term.normal_cursor)
        # Undecodable bytes from the file are shown as '?'
        screen = ''.join(out).encode('utf-8', errors='replace').decode('utf-8')
        print(screen, end='', flush=True)

    def get_key(self, timeout=None):
        """Get a single keypress from the user.

        Args:
            timeout: Timeout in seconds (None for blocking, 0 for non-blocking)

        Returns:
            The curtsies key name, or None if nothing arrived in time.
        """
        if self._curtsies_input is None:
            return None
        if timeout is not None:
            r, _, _ = select.select([sys.stdin], [], [], float(timeout))
            if not r:
                return None
        return str(next(self._curtsies_input))

    @property
    def width(self):
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self):
        """Rows available for text (excluding status and message bars)."""
        return self.term.height - EditorConstants.STATUS_ROWS
