"""Command pattern implementation for editor actions."""

from abc import ABC, abstractmethod
from typing import Dict, Optional, TYPE_CHECKING

from . import selection
from .keyboard import EditorKey

if TYPE_CHECKING:
    from .editor import Editor
    from .keyboard import KeyEvent


class EditorCommand(ABC):
    """Base class for editor commands."""

    @abstractmethod
    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Execute the command.

        Args:
            editor: Editor instance
            key_event: The key event that triggered this command

        Returns:
            True if the command modified the document
        """
        pass


class MovementCommand(EditorCommand):
    """Base class for cursor movement commands.

    Movement keeps an active selection: in selection mode the cursor is
    the live end of the selection, so moving it extends or shrinks it.
    """

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        self._move(editor)
        return False

    @abstractmethod
    def _move(self, editor: 'Editor'):
        """Perform the movement."""
        pass


class LeftCharCommand(MovementCommand):
    def _move(self, editor):
        editor.buffer.move_left()


class RightCharCommand(MovementCommand):
    def _move(self, editor):
        editor.buffer.move_right()


class UpLineCommand(MovementCommand):
    def _move(self, editor):
        editor.buffer.move_up()


class DownLineCommand(MovementCommand):
    def _move(self, editor):
        editor.buffer.move_down()


class HomeCommand(MovementCommand):
    def _move(self, editor):
        editor.buffer.move_home()


class EndCommand(MovementCommand):
    def _move(self, editor):
        editor.buffer.move_end()


class PageUpCommand(MovementCommand):
    def _move(self, editor):
        editor.buffer.page_up(editor.view.viewport.screenrows)


class PageDownCommand(MovementCommand):
    def _move(self, editor):
        editor.buffer.page_down(editor.view.viewport.screenrows)


class EditCommand(EditorCommand):
    """Base class for editing commands."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Report a modification only if the rows actually changed."""
        before = list(editor.buffer.rows)
        self._edit(editor, key_event)
        return editor.buffer.rows != before

    @abstractmethod
    def _edit(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Perform the edit."""
        pass


class InsertNewlineCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.buffer.insert_newline()


class BackspaceCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.buffer.delete_char_before()


class DeleteCharCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.buffer.delete_char_at()


class InsertTextCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.buffer.insert_char(key_event.char)


class ClipboardCommand(EditorCommand):
    """Base class for copy/cut/paste; reports the outcome in the status bar."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        before = list(editor.buffer.rows)
        message = self._run(editor)
        if message is not None:
            editor.set_status_message(message)
        # Paste over a selection with an empty clipboard still deletes
        return editor.buffer.rows != before

    @abstractmethod
    def _run(self, editor: 'Editor') -> Optional[str]:
        pass


class CopyCommand(ClipboardCommand):
    def _run(self, editor):
        return selection.copy(editor.buffer, editor.selection, editor.clipboard)


class CutCommand(ClipboardCommand):
    def _run(self, editor):
        return selection.cut(editor.buffer, editor.selection, editor.clipboard)


class PasteCommand(ClipboardCommand):
    def _run(self, editor):
        return selection.paste(editor.buffer, editor.selection, editor.clipboard)


class SystemCommand(EditorCommand):
    """Base class for system commands like save, quit, find."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """System commands don't modify document content directly."""
        self._execute_system(editor, key_event)
        return False

    @abstractmethod
    def _execute_system(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Perform the system action."""
        pass


class QuitCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.request_quit()


class SaveCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.save_file()


class FindCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.start_search()


class ToggleSelectCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        if editor.selection.toggle(editor.buffer.cursor):
            editor.set_status_message("Selection mode ON. Press ESC to cancel.")
        else:
            editor.set_status_message("Selection mode OFF")


class EscapeCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        if editor.selection.active:
            editor.selection.cancel()
            editor.set_status_message("Selection cancelled")


class CommandRegistry:
    """Maps logical keys to the commands that handle them."""

    def __init__(self):
        self._commands: Dict[EditorKey, EditorCommand] = {
            EditorKey.MOVE_LEFT: LeftCharCommand(),
            EditorKey.MOVE_RIGHT: RightCharCommand(),
            EditorKey.MOVE_UP: UpLineCommand(),
            EditorKey.MOVE_DOWN: DownLineCommand(),
            EditorKey.HOME: HomeCommand(),
            EditorKey.END: EndCommand(),
            EditorKey.PAGE_UP: PageUpCommand(),
            EditorKey.PAGE_DOWN: PageDownCommand(),
            EditorKey.NEWLINE: InsertNewlineCommand(),
            EditorKey.DELETE_BACKWARD: BackspaceCommand(),
            EditorKey.DELETE_FORWARD: DeleteCharCommand(),
            EditorKey.COPY: CopyCommand(),
            EditorKey.CUT: CutCommand(),
            EditorKey.PASTE: PasteCommand(),
            EditorKey.SAVE: SaveCommand(),
            EditorKey.FIND: FindCommand(),
            EditorKey.QUIT: QuitCommand(),
            EditorKey.TOGGLE_SELECT: ToggleSelectCommand(),
            EditorKey.ESCAPE: EscapeCommand(),
        }
        self._insert_text = InsertTextCommand()

    def get_command(self, key: EditorKey) -> Optional[EditorCommand]:
        return self._commands.get(key)

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Execute the command for the given key event.

        Returns:
            True if the document was modified
        """
        if key_event.is_char:
            return self._insert_text.execute(editor, key_event)
        command = self.get_command(key_event.key)
        if command:
            return command.execute(editor, key_event)
        return False
