"""Cilo CLI entry point.

Allows running via `python -m cilo` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import sys

from .version import get_version_string

logger = logging.getLogger("cilo")

USAGE = "usage: cilo [--version] [--keytest] [--log FILE] [filename]"


def _escape_bytes(s: str) -> str:
    """Return a printable representation of raw key string."""
    return s.encode('unicode_escape').decode('ascii')


def setup_logging(log_file: str | None) -> None:
    """Send log records to ``log_file``.

    The editor owns the whole screen, so without a log file records are
    discarded instead of being written over the text.
    """
    if log_file is None:
        logger.addHandler(logging.NullHandler())
        return
    handler = logging.FileHandler(log_file, encoding='utf-8')
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


def run_keyboard_test() -> None:
    """Print the logical key event for every keypress. Quit with ESC."""
    from .terminal import TerminalInterface
    from .keyboard import KeyboardHandler, EditorKey

    print("Keyboard test mode - press keys to see parsed events.")
    print("Quit with ESC.")

    term = TerminalInterface()
    term.setup()
    kb = KeyboardHandler(term)
    try:
        while True:
            ev = kb.get_key_event(timeout=None)
            if ev is None:
                continue
            if ev.key is EditorKey.ESCAPE:
                print("Exiting keyboard test.\r")
                break
            name = ev.key.value if ev.key else f"char {ev.char!r}"
            print(f"{name} raw='{_escape_bytes(ev.raw)}'\r")
    finally:
        term.cleanup()


def parse_args(args: list[str]) -> dict:
    """Very small argument parser: flags first, then an optional filename."""
    options = {'version': False, 'keytest': False, 'log': None, 'filename': None}
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ("--version", "-V"):
            options['version'] = True
        elif arg in ('--keytest', '--keyboard-test'):
            options['keytest'] = True
        elif arg == '--log':
            if i + 1 >= len(args):
                raise ValueError("--log needs a file name")
            options['log'] = args[i + 1]
            i += 1
        elif arg.startswith('-'):
            raise ValueError(f"unknown option {arg}")
        elif options['filename'] is None:
            options['filename'] = arg
        else:
            raise ValueError("only one file can be edited at a time")
        i += 1
    return options


def main() -> None:
    try:
        options = parse_args(sys.argv[1:])
    except ValueError as e:
        print(f"cilo: {e}\n{USAGE}", file=sys.stderr)
        sys.exit(2)

    if options['version']:
        print(get_version_string())
        return

    setup_logging(options['log'])
    if options['keytest']:
        run_keyboard_test()
        return

    # Lazy import to avoid importing UI deps for --version
    from .config import load_config
    from .editor import Editor

    editor = Editor(config=load_config())
    try:
        if options['filename']:
            editor.load_file(options['filename'])
        editor.run()
    except OSError as e:
        logger.error(f"Fatal: {e}")
        print(f"cilo: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
