"""Constants and configuration for the cilo editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    # Screen layout
    STATUS_ROWS = 2  # Status bar plus message bar below the text area
    FILLER_GLYPH = "~"  # Drawn in the gutter of rows past the end of the document
    WELCOME_MESSAGE = "Cilo editor -- version {}"

    # Status bar
    NO_NAME = "[No Name]"
    STATUS_FILENAME_WIDTH = 20  # Longest filename prefix shown in the status bar

    # Status messages
    MESSAGE_TIMEOUT = 5.0  # Seconds a status message stays visible
    SEARCH_PROMPT = "Search: {} (Use ESC/Arrows/Enter)"

    # File operations
    ATOMIC_SAVE_SUFFIX = ".tmp"  # Suffix for temporary save files
    NEW_FILE_MODE = 0o644  # Permissions for files that did not exist before saving

    # Quitting
    QUIT_TIMES = 3  # Extra Ctrl-Q presses needed to quit with unsaved changes
