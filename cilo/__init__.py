"""Cilo - a small terminal text editor."""

from .model import TextBuffer, CursorPosition
from .selection import Selection, normalized_range
from .clipboard import Clipboard
from .search import IncrementalSearch, SearchSession
from .view import TerminalTextView, Viewport, render_row, gutter_width

__all__ = [
    'TextBuffer',
    'CursorPosition',
    'Selection',
    'normalized_range',
    'Clipboard',
    'IncrementalSearch',
    'SearchSession',
    'TerminalTextView',
    'Viewport',
    'render_row',
    'gutter_width',
]
