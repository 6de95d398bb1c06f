"""Tests for key dispatch, search integration and session state in the Editor."""

import unittest
from unittest.mock import MagicMock, patch

from cilo.config import EditorConfig
from cilo.editor import Editor
from cilo.keyboard import EditorKey, KeyEvent
from cilo.model import TextBuffer, CursorPosition
from cilo.view import Style


def key(k):
    return KeyEvent(key=k)


def char(c):
    return KeyEvent(char=c, raw=c)


def make_editor(rows=None, config=None):
    terminal = MagicMock()
    terminal.height = 10
    terminal.width = 40
    editor = Editor(config=config, terminal=terminal)
    if rows is not None:
        editor.buffer = TextBuffer(rows)
    return editor


class TestKeyDispatch(unittest.TestCase):

    def test_typing_inserts_and_marks_dirty(self):
        editor = make_editor()
        for c in "hi":
            editor.process_key(char(c))
        self.assertEqual(editor.buffer.rows, ["hi"])
        self.assertTrue(editor.dirty)

    def test_movement_does_not_mark_dirty(self):
        editor = make_editor(["abc"])
        editor.process_key(key(EditorKey.MOVE_RIGHT))
        editor.process_key(key(EditorKey.END))
        self.assertEqual(editor.buffer.cursor, CursorPosition(0, 3))
        self.assertFalse(editor.dirty)

    def test_none_event_is_ignored(self):
        editor = make_editor(["abc"])
        editor.process_key(None)
        self.assertEqual(editor.buffer.rows, ["abc"])

    def test_newline_and_backspace(self):
        editor = make_editor(["hello", "world"])
        editor.buffer.cursor = CursorPosition(0, 5)
        editor.process_key(key(EditorKey.NEWLINE))
        self.assertEqual(editor.buffer.rows, ["hello", "", "world"])
        editor.process_key(key(EditorKey.DELETE_BACKWARD))
        self.assertEqual(editor.buffer.rows, ["hello", "world"])
        self.assertEqual(editor.buffer.cursor, CursorPosition(0, 5))

    def test_edit_keys_that_change_nothing_keep_clean(self):
        editor = make_editor(["abc"])
        editor.process_key(key(EditorKey.DELETE_BACKWARD))
        editor.buffer.cursor = CursorPosition(0, 3)
        editor.process_key(key(EditorKey.DELETE_FORWARD))
        self.assertEqual(editor.buffer.rows, ["abc"])
        self.assertFalse(editor.dirty)

        editor.running = True
        editor.process_key(key(EditorKey.QUIT))
        self.assertFalse(editor.running)

    def test_page_down_moves_by_screen_rows(self):
        editor = make_editor([str(i) for i in range(50)])
        editor.view.viewport.screenrows = 8
        editor.process_key(key(EditorKey.PAGE_DOWN))
        self.assertEqual(editor.buffer.cursor.row, 8)
        editor.process_key(key(EditorKey.PAGE_UP))
        self.assertEqual(editor.buffer.cursor.row, 0)


class TestSelectionKeys(unittest.TestCase):

    def test_toggle_selection_messages(self):
        editor = make_editor(["abc"])
        editor.process_key(key(EditorKey.TOGGLE_SELECT))
        self.assertTrue(editor.selection.active)
        self.assertEqual(editor.status_message, "Selection mode ON. Press ESC to cancel.")
        editor.process_key(key(EditorKey.TOGGLE_SELECT))
        self.assertFalse(editor.selection.active)
        self.assertEqual(editor.status_message, "Selection mode OFF")

    def test_escape_cancels_selection(self):
        editor = make_editor(["abc"])
        editor.process_key(key(EditorKey.TOGGLE_SELECT))
        editor.process_key(key(EditorKey.ESCAPE))
        self.assertFalse(editor.selection.active)
        self.assertEqual(editor.status_message, "Selection cancelled")

    def test_movement_extends_selection(self):
        editor = make_editor(["hello world"])
        editor.process_key(key(EditorKey.TOGGLE_SELECT))
        for _ in range(5):
            editor.process_key(key(EditorKey.MOVE_RIGHT))
        self.assertEqual(editor.selection.range(editor.buffer.cursor),
                         (CursorPosition(0, 0), CursorPosition(0, 5)))

    def test_copy_then_paste(self):
        editor = make_editor(["hello world"])
        editor.process_key(key(EditorKey.TOGGLE_SELECT))
        for _ in range(5):
            editor.process_key(key(EditorKey.MOVE_RIGHT))
        editor.process_key(key(EditorKey.COPY))
        self.assertEqual(editor.status_message, "Copied selection to clipboard")
        self.assertFalse(editor.dirty)

        editor.process_key(key(EditorKey.END))
        editor.process_key(key(EditorKey.PASTE))
        self.assertEqual(editor.buffer.rows, ["hello worldhello"])
        self.assertEqual(editor.status_message, "Pasted from clipboard")
        self.assertTrue(editor.dirty)

    def test_cut_line_without_selection(self):
        editor = make_editor(["one", "two"])
        editor.process_key(key(EditorKey.CUT))
        self.assertEqual(editor.buffer.rows, ["two"])
        self.assertEqual(editor.clipboard.content, "one")
        self.assertEqual(editor.status_message, "Cut line to clipboard")
        self.assertTrue(editor.dirty)

    def test_paste_over_selection_with_empty_clipboard_marks_dirty(self):
        editor = make_editor(["hello"])
        editor.process_key(key(EditorKey.TOGGLE_SELECT))
        for _ in range(3):
            editor.process_key(key(EditorKey.MOVE_RIGHT))
        editor.process_key(key(EditorKey.PASTE))
        self.assertEqual(editor.buffer.rows, ["lo"])
        self.assertTrue(editor.dirty)

        editor.running = True
        editor.process_key(key(EditorKey.QUIT))
        self.assertTrue(editor.running)

    def test_paste_with_empty_clipboard_keeps_clean(self):
        editor = make_editor(["abc"])
        editor.process_key(key(EditorKey.PASTE))
        self.assertEqual(editor.buffer.rows, ["abc"])
        self.assertFalse(editor.dirty)
        self.assertEqual(editor.status_message, "")


class TestSearchIntegration(unittest.TestCase):

    def setUp(self):
        self.editor = make_editor(["alpha", "beta", "gamma beta", "delta"])
        self.editor.buffer.cursor = CursorPosition(3, 2)
        self.editor.view.viewport.rowoff = 2
        self.editor.view.viewport.coloff = 0

    def type_query(self, query):
        for c in query:
            self.editor.process_key(char(c))

    def test_find_opens_prompt(self):
        self.editor.process_key(key(EditorKey.FIND))
        self.assertTrue(self.editor.search.active)
        self.assertEqual(self.editor.status_message, "Search:  (Use ESC/Arrows/Enter)")

    def test_typing_moves_cursor_to_match_without_editing(self):
        self.editor.process_key(key(EditorKey.FIND))
        self.type_query("beta")
        self.assertEqual(self.editor.buffer.cursor, CursorPosition(1, 0))
        self.assertEqual(self.editor.buffer.rows, ["alpha", "beta", "gamma beta", "delta"])
        self.assertFalse(self.editor.dirty)
        self.assertTrue(self.editor.view.viewport.scroll_invalidated)
        self.assertEqual(self.editor.status_message, "Search: beta (Use ESC/Arrows/Enter)")

    def test_arrow_moves_to_next_match(self):
        self.editor.process_key(key(EditorKey.FIND))
        self.type_query("beta")
        self.editor.process_key(key(EditorKey.MOVE_DOWN))
        self.assertEqual(self.editor.buffer.cursor, CursorPosition(2, 6))

    def test_cancel_restores_cursor_and_scroll(self):
        self.editor.process_key(key(EditorKey.FIND))
        self.type_query("beta")
        self.editor.render()
        self.editor.process_key(key(EditorKey.ESCAPE))

        vp = self.editor.view.viewport
        self.assertFalse(self.editor.search.active)
        self.assertEqual(self.editor.buffer.cursor, CursorPosition(3, 2))
        self.assertEqual((vp.rowoff, vp.coloff), (2, 0))
        self.assertFalse(vp.scroll_invalidated)

    def test_enter_confirms_at_match(self):
        self.editor.process_key(key(EditorKey.FIND))
        self.type_query("gamma")
        self.editor.process_key(key(EditorKey.NEWLINE))
        self.assertFalse(self.editor.search.active)
        self.assertEqual(self.editor.buffer.cursor, CursorPosition(2, 0))
        # Enter did not split a line
        self.assertEqual(self.editor.buffer.numrows, 4)

    def test_highlight_only_while_prompting(self):
        self.editor.process_key(key(EditorKey.FIND))
        self.type_query("beta")
        frame = self.editor.render()
        inverted = [s.text for row in frame.rows for s in row.spans if s.style is Style.INVERSE]
        self.assertIn("beta", inverted)

        self.editor.process_key(key(EditorKey.NEWLINE))
        frame = self.editor.render()
        inverted = [s.text for row in frame.rows for s in row.spans if s.style is Style.INVERSE]
        self.assertEqual(inverted, [])


class TestQuit(unittest.TestCase):

    def test_quit_clean_document(self):
        editor = make_editor(["abc"])
        editor.running = True
        editor.process_key(key(EditorKey.QUIT))
        self.assertFalse(editor.running)

    def test_quit_dirty_document_needs_confirmation(self):
        editor = make_editor()
        editor.running = True
        editor.process_key(char("x"))
        for remaining in (3, 2, 1):
            editor.process_key(key(EditorKey.QUIT))
            self.assertTrue(editor.running)
            self.assertIn(f"Press Ctrl-Q {remaining} more times", editor.status_message)
        editor.process_key(key(EditorKey.QUIT))
        self.assertFalse(editor.running)

    def test_other_key_resets_quit_confirmation(self):
        editor = make_editor()
        editor.running = True
        editor.process_key(char("x"))
        editor.process_key(key(EditorKey.QUIT))
        editor.process_key(key(EditorKey.MOVE_LEFT))
        editor.process_key(key(EditorKey.QUIT))
        self.assertIn("Press Ctrl-Q 3 more times", editor.status_message)


class TestStatusMessage(unittest.TestCase):

    @patch('cilo.editor.time.monotonic')
    def test_message_expires(self, mock_time):
        editor = make_editor(config=EditorConfig(message_timeout=5.0))
        mock_time.return_value = 100.0
        editor.set_status_message("hello")
        mock_time.return_value = 104.9
        self.assertEqual(editor.current_message(), "hello")
        mock_time.return_value = 105.0
        self.assertEqual(editor.current_message(), "")

    def test_empty_message(self):
        self.assertEqual(make_editor().current_message(), "")


class TestRunLoop(unittest.TestCase):

    def test_run_draws_and_cleans_up(self):
        editor = make_editor(["abc"])
        editor.keyboard = MagicMock()
        editor.keyboard.get_key_event.side_effect = [char("x"), key(EditorKey.QUIT),
                                                     key(EditorKey.QUIT), key(EditorKey.QUIT),
                                                     key(EditorKey.QUIT)]
        editor.run()

        editor.terminal.setup.assert_called_once()
        editor.terminal.cleanup.assert_called_once()
        self.assertEqual(editor.terminal.draw_frame.call_count, 5)
        self.assertEqual(editor.buffer.rows, ["xabc"])
        # Screen size excludes the status rows
        self.assertEqual(editor.view.viewport.screenrows, 10)

    def test_cleanup_runs_on_error(self):
        editor = make_editor(["abc"])
        editor.keyboard = MagicMock()
        editor.keyboard.get_key_event.side_effect = RuntimeError("boom")
        with self.assertRaises(RuntimeError):
            editor.run()
        editor.terminal.cleanup.assert_called_once()


if __name__ == '__main__':
    unittest.main()
