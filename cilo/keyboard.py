"""Keyboard input handling using curtsies-style tokens."""

from typing import Optional
from dataclasses import dataclass
from enum import Enum


class EditorKey(Enum):
    """Logical keys the editor reacts to."""
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"
    DELETE_FORWARD = "delete_forward"
    DELETE_BACKWARD = "delete_backward"
    NEWLINE = "newline"
    ESCAPE = "escape"
    CONFIRM = "confirm"
    # Editor commands
    SAVE = "save"
    FIND = "find"
    COPY = "copy"
    CUT = "cut"
    PASTE = "paste"
    TOGGLE_SELECT = "toggle_select"
    QUIT = "quit"


@dataclass
class KeyEvent:
    """A decoded keypress: either a logical key or a printable character."""
    key: Optional[EditorKey] = None
    char: Optional[str] = None
    raw: str = ""

    @property
    def is_char(self) -> bool:
        return self.char is not None


# Named keys as produced by curtsies (lower-cased, without the brackets)
_NAMED_KEYS = {
    'left': EditorKey.MOVE_LEFT,
    'right': EditorKey.MOVE_RIGHT,
    'up': EditorKey.MOVE_UP,
    'down': EditorKey.MOVE_DOWN,
    'page_up': EditorKey.PAGE_UP,
    'page_down': EditorKey.PAGE_DOWN,
    'home': EditorKey.HOME,
    'end': EditorKey.END,
    'delete': EditorKey.DELETE_FORWARD,
    'backspace': EditorKey.DELETE_BACKWARD,
    'enter': EditorKey.NEWLINE,
    'esc': EditorKey.ESCAPE,
    'escape': EditorKey.ESCAPE,
}

# Ctrl-<letter> bindings
_CTRL_KEYS = {
    'q': EditorKey.QUIT,
    's': EditorKey.SAVE,
    'f': EditorKey.FIND,
    'c': EditorKey.COPY,
    'x': EditorKey.CUT,
    'v': EditorKey.PASTE,
    'b': EditorKey.TOGGLE_SELECT,
    'h': EditorKey.DELETE_BACKWARD,
    'j': EditorKey.NEWLINE,
    'm': EditorKey.NEWLINE,
}


class KeyboardHandler:
    """Turns curtsies key names into logical KeyEvents."""

    def __init__(self, terminal_interface):
        """Initialize with a terminal interface."""
        self.terminal = terminal_interface

    def get_key_event(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        """Get next key event, or None if nothing usable arrived."""
        key = self.terminal.get_key(timeout)
        if not key:
            return None
        return self.parse_key(key)

    def parse_key(self, key) -> Optional[KeyEvent]:
        """Parse a curtsies key name into a KeyEvent.

        Args:
            key: Key string such as 'a', '<LEFT>' or '<Ctrl-s>'

        Returns:
            Parsed KeyEvent, or None for keys the editor does not use
        """
        key_str = str(key)

        # Curtsies-style key names like '<LEFT>', '<Ctrl-x>', '<PAGEUP>'
        if key_str.startswith('<') and key_str.endswith('>') and len(key_str) > 2:
            name = key_str[1:-1].lower().replace('+', '-')
            parts = name.split('-')
            base = parts[-1]
            mods = set(parts[:-1])
            if base in ('pageup', 'page_up'):
                base = 'page_up'
            elif base in ('pagedown', 'page_down'):
                base = 'page_down'

            if not mods:
                if base in ('space', 'spacebar', 'spc'):
                    return KeyEvent(char=' ', raw=key_str)
                if base == 'tab':
                    return KeyEvent(char='\t', raw=key_str)
            if 'ctrl' in mods and len(base) == 1:
                editor_key = _CTRL_KEYS.get(base)
                return KeyEvent(key=editor_key, raw=key_str) if editor_key else None
            if base in _NAMED_KEYS and not (mods - {'shift'}):
                return KeyEvent(key=_NAMED_KEYS[base], raw=key_str)
            # Alt/meta combinations and unknown names are ignored
            return None

        if len(key_str) == 1:
            o = ord(key_str)
            if key_str == '\x1b':
                return KeyEvent(key=EditorKey.ESCAPE, raw=key_str)
            if key_str == '\x7f':
                return KeyEvent(key=EditorKey.DELETE_BACKWARD, raw=key_str)
            if key_str == '\t':
                return KeyEvent(char='\t', raw=key_str)
            if 1 <= o <= 26:  # Ctrl-A .. Ctrl-Z
                editor_key = _CTRL_KEYS.get(chr(ord('a') + o - 1))
                return KeyEvent(key=editor_key, raw=key_str) if editor_key else None
            if o < 32:
                return None

        # Regular character
        return KeyEvent(char=key_str, raw=key_str)
