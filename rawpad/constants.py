"""Constants and configuration for the rawpad editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    # Screen rendering
    FILLER_GLYPH = "~"  # Drawn on rows past the end of the document
    WELCOME_MESSAGE = "rawpad editor -- version {}"
    TAB_DISPLAY = " "  # A tab occupies one screen column
    CONTROL_DISPLAY = "?"  # Other control characters, one column each

    # Keyboard timing
    ESCAPE_SEQUENCE_TIMEOUT = 0.05  # Wait for bytes after a lone ESC (seconds)
    MAX_CSI_PARAMETER_BYTES = 16  # Longest parameter run consumed before giving up

    # Status bar (ANSI colour indices 0-7)
    STATUS_FOREGROUND = 0  # Black
    STATUS_BACKGROUND = 6  # Cyan
    NO_NAME = "[No Name]"

    # Terminal size discovery
    SIZE_PROBE_DISTANCE = 999  # Moves the cursor past the bottom-right corner

    # File operations
    ATOMIC_SAVE_PREFIX = "."  # Prefix for temporary save files
    ATOMIC_SAVE_SUFFIX = ".tmp"  # Suffix for temporary save files

    # Status messages
    QUIT_CONFIRM_MESSAGE = "Unsaved changes! Press Ctrl-Q again to quit."
    SAVE_PROMPT = "File to save in: {}"
