"""Single-slot clipboard with optional system clipboard mirroring."""

import logging
from typing import Optional

import pyperclip

logger = logging.getLogger(__name__)


class Clipboard:
    """Holds the most recent cut/copy payload.

    Only one value is live at a time; every store replaces the previous
    one. When ``mirror_to_system`` is set the payload is also pushed to
    the OS clipboard through pyperclip. The in-editor copy is always the
    source of truth, so a missing clipboard backend only costs the
    mirror.
    """

    def __init__(self, mirror_to_system: bool = False):
        self._content: Optional[str] = None
        self.mirror_to_system = mirror_to_system

    @property
    def content(self) -> Optional[str]:
        return self._content

    def is_empty(self) -> bool:
        return not self._content

    def store(self, text: Optional[str]) -> None:
        """Replace the clipboard contents (``None`` empties it)."""
        self._content = text
        if text and self.mirror_to_system:
            self._copy_to_system(text)

    @staticmethod
    def _copy_to_system(text: str) -> None:
        try:
            pyperclip.copy(text)
        except (pyperclip.PyperclipException, UnicodeEncodeError) as e:
            logger.warning(f"Could not copy to system clipboard: {e}")
