"""Main editor controller for the cilo text editor."""

import logging
import os
import tempfile
import time
from typing import Optional

from .clipboard import Clipboard
from .commands import CommandRegistry
from .config import EditorConfig
from .constants import EditorConstants
from .keyboard import EditorKey, KeyboardHandler, KeyEvent
from .model import TextBuffer
from .search import SearchSession, SearchSnapshot, SearchStatus
from .selection import Selection
from .terminal import TerminalInterface
from .version import get_version
from .view import Frame, TerminalTextView

logger = logging.getLogger(__name__)


class Editor:
    """One editing session: the document plus everything that edits and shows it."""

    def __init__(self, config: Optional[EditorConfig] = None,
                 terminal: Optional[TerminalInterface] = None):
        """Initialize the editor components."""
        self.config = config or EditorConfig()
        self.terminal = terminal or TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.buffer = TextBuffer()
        self.selection = Selection()
        self.clipboard = Clipboard(mirror_to_system=self.config.system_clipboard)
        self.search = SearchSession()
        self.view = TerminalTextView(version=get_version())
        self.command_registry = CommandRegistry()  # Command pattern for key handling
        self.running = False
        # File handling
        self.filename: Optional[str] = None
        self.dirty = False
        self.quit_times = EditorConstants.QUIT_TIMES
        # Status message and the monotonic time it was set
        self.status_message = ""
        self.status_time = 0.0

    # --- Status messages ---

    def set_status_message(self, message: str):
        """Show a message below the status bar; replaces any previous one."""
        self.status_message = message
        self.status_time = time.monotonic()

    def current_message(self) -> str:
        """The status message, or an empty string once it has expired."""
        if not self.status_message:
            return ""
        if time.monotonic() - self.status_time >= self.config.message_timeout:
            return ""
        return self.status_message

    # --- Files ---

    def load_file(self, filename: str):
        """Load a file into the editor.

        A file that does not exist yet opens as an empty document under
        that name. Any other read error propagates to the caller. Bytes
        that are not valid UTF-8 are carried through surrogate escapes and
        written back unchanged on save.

        Args:
            filename: Path to file to load
        """
        self.filename = filename
        try:
            with open(filename, 'r', encoding='utf-8', errors='surrogateescape',
                      newline='') as f:
                self.buffer = TextBuffer.from_text(f.read())
        except FileNotFoundError:
            logger.info(f"{filename} does not exist, starting a new document")
            self.buffer = TextBuffer()
        self.selection.cancel()
        self.dirty = False
        logger.info(f"Loaded {filename}: {self.buffer.numrows} lines")

    def save_file(self, filename: Optional[str] = None) -> bool:
        """Save the current document to a file atomically.

        The document is written to a temporary file in the target
        directory which then replaces the target, so a failed save never
        leaves a half-written file behind.

        Args:
            filename: Path to save to; defaults to the loaded file name

        Returns:
            True if save succeeded, False otherwise
        """
        filename = filename or self.filename
        if not filename:
            self.set_status_message("Can't save! No file name")
            return False

        content = self.buffer.serialize()
        data = content.encode('utf-8', errors='surrogateescape')
        dir_name = os.path.dirname(filename) or '.'
        temp_filename = None
        try:
            mode = os.stat(filename).st_mode & 0o7777
        except OSError:
            mode = EditorConstants.NEW_FILE_MODE
        try:
            with tempfile.NamedTemporaryFile(mode='wb', dir=dir_name,
                                             suffix=EditorConstants.ATOMIC_SAVE_SUFFIX,
                                             delete=False) as temp_file:
                temp_filename = temp_file.name
                temp_file.write(data)
                temp_file.flush()
                os.fsync(temp_file.fileno())
            os.chmod(temp_filename, mode)
            os.replace(temp_filename, filename)
        except OSError as e:
            logger.warning(f"Saving {filename} failed: {e}")
            self.set_status_message(f"Can't save! I/O error: {e.strerror or e}")
            if temp_filename and os.path.exists(temp_filename):
                try:
                    os.remove(temp_filename)
                except OSError as cleanup_error:
                    logger.warning(f"Could not remove {temp_filename}: {cleanup_error}")
            return False

        self.filename = filename
        self.dirty = False
        logger.info(f"Saved {len(data)} bytes to {filename}")
        self.set_status_message(f"{len(data)} bytes written to disk")
        return True

    # --- Search ---

    def start_search(self):
        """Open the find prompt, remembering where to return on cancel."""
        vp = self.view.viewport
        self.search.start(SearchSnapshot(self.buffer.cursor.copy(), vp.rowoff, vp.coloff))
        self.set_status_message(EditorConstants.SEARCH_PROMPT.format(""))

    def _handle_search_key(self, key_event: KeyEvent):
        # Enter confirms the prompt instead of splitting a line
        if key_event.key is EditorKey.NEWLINE:
            key_event = KeyEvent(key=EditorKey.CONFIRM, raw=key_event.raw)

        step = self.search.handle_key(key_event, self.buffer)
        if step.status is SearchStatus.CANCELLED:
            snapshot = step.snapshot
            if snapshot is not None:
                vp = self.view.viewport
                self.buffer.cursor = snapshot.cursor.copy()
                vp.rowoff = snapshot.rowoff
                vp.coloff = snapshot.coloff
                vp.scroll_invalidated = False
            self.set_status_message("")
            return
        if step.status is SearchStatus.CONFIRMED:
            self.set_status_message("")
            return

        if step.match is not None:
            self.buffer.move_to(step.match.row, step.match.col)
            self.view.viewport.invalidate_scroll()
        self.set_status_message(EditorConstants.SEARCH_PROMPT.format(self.search.query))

    # --- Input ---

    def process_key(self, key_event: Optional[KeyEvent]):
        """Apply one key event to the session."""
        if key_event is None:
            return
        if self.search.active:
            self._handle_search_key(key_event)
            return

        if key_event.key is not EditorKey.QUIT:
            self.quit_times = EditorConstants.QUIT_TIMES
        if self.command_registry.execute(self, key_event):
            self.dirty = True

    def request_quit(self):
        """Quit, unless there are unsaved changes and the user has not insisted."""
        if self.dirty and self.quit_times > 0:
            self.set_status_message(
                f"WARNING!!! File has unsaved changes. "
                f"Press Ctrl-Q {self.quit_times} more times to quit."
            )
            self.quit_times -= 1
            return
        self.running = False

    # --- Output ---

    def render(self) -> Frame:
        return self.view.render(
            self.buffer,
            sel_range=self.selection.range(self.buffer.cursor),
            query=self.search.highlight_query,
            filename=self.filename,
            message=self.current_message(),
        )

    def refresh_screen(self):
        self.view.resize(self.terminal.height, self.terminal.width)
        self.terminal.draw_frame(self.render())

    def run(self):
        """Run the main editor loop until the user quits."""
        self.terminal.setup()
        self.running = True
        try:
            while self.running:
                self.refresh_screen()
                self.process_key(self.keyboard.get_key_event())
        finally:
            self.terminal.cleanup()
