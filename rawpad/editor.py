"""Main editor controller."""

import errno
import logging
import os
import tempfile
from typing import Optional

from .commands import CommandRegistry
from .constants import EditorConstants
from .cursor import Cursor
from .keyboard import Key, KeyDecoder, KeyType
from .model import TextBuffer
from .settings import EditorSettings
from .terminal import TerminalCommand, TerminalInterface
from .version import __version__
from .view import RenderPipeline, StatusLine, Viewport

logger = logging.getLogger(__name__)


class Editor:
    """The editing session: reads keys, applies commands, redraws."""

    def __init__(self, terminal: Optional[TerminalInterface] = None,
                 settings: Optional[EditorSettings] = None):
        """Initialize the editor components."""
        self.terminal = terminal or TerminalInterface()
        self.settings = settings or EditorSettings()
        self.keyboard = KeyDecoder(self.terminal, escape_timeout=self.settings.escape_timeout)
        self.command_registry = CommandRegistry()
        self.pipeline = RenderPipeline(EditorConstants.WELCOME_MESSAGE.format(__version__))
        self.viewport = Viewport()
        self.buffer = TextBuffer()
        self.cursor = Cursor(self.buffer)
        self.running = False
        # File handling
        self.filename: Optional[str] = None
        self.modified = False
        self.is_new = True  # Untouched empty document, shows the welcome banner
        self.status_message: Optional[str] = None
        self.quit_pending = False
        self.prompt_mode: Optional[str] = None  # None or 'save_filename'
        self.prompt_input = ""
        self.status_visible = self.settings.show_status_bar

    def set_buffer(self, buffer: TextBuffer) -> None:
        """Replace the document and put the cursor at its start."""
        self.buffer = buffer
        self.cursor = Cursor(buffer)
        self.viewport.row_offset = 0
        self.viewport.col_offset = 0
        self.is_new = buffer.is_empty()

    def load_file(self, filename: str):
        """Load a file into the editor.

        A file that does not exist yet starts an empty document that will
        be saved under ``filename``.

        Raises:
            OSError: if the file exists but cannot be read.
        """
        self.filename = filename
        try:
            with open(filename, 'rb') as f:
                data = f.read()
        except FileNotFoundError:
            logger.info("%s does not exist, starting a new file", filename)
            self.set_buffer(TextBuffer())
        else:
            self.set_buffer(TextBuffer.load(data))
            logger.info("loaded %s (%d lines)", filename, self.buffer.line_count())
        self.modified = False

    def save_file(self, filename: str) -> bool:
        """Save the current document to a file atomically.

        Args:
            filename: Path to save file to

        Returns:
            True if save succeeded, False otherwise
        """
        dir_name = os.path.dirname(filename) or '.'
        temp_filename = None
        try:
            # Same directory so the rename stays on one filesystem
            with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8', newline='',
                                             dir=dir_name,
                                             prefix=EditorConstants.ATOMIC_SAVE_PREFIX,
                                             suffix=EditorConstants.ATOMIC_SAVE_SUFFIX,
                                             delete=False) as temp_file:
                temp_filename = temp_file.name
                temp_file.writelines(self.buffer.serialize())
                temp_file.flush()
                os.fsync(temp_file.fileno())
            os.replace(temp_filename, filename)
        except OSError as e:
            if isinstance(e, PermissionError):
                self.status_message = f"Error: Permission denied saving {filename}"
            elif e.errno == errno.ENOSPC:
                self.status_message = "Error: No space left on device"
            else:
                self.status_message = f"Error: Cannot save to {filename}"
            logger.warning("saving %s failed: %s", filename, e)
            if temp_filename and os.path.exists(temp_filename):
                try:
                    os.remove(temp_filename)
                except OSError:
                    pass
            return False

        self.filename = filename
        self.modified = False
        logger.info("saved %s (%d lines)", filename, self.buffer.line_count())
        return True

    def _handle_save(self):
        """Handle Ctrl-S save command."""
        if not self.filename:
            self.prompt_mode = 'save_filename'
            self.prompt_input = ""
        elif not self.modified and os.path.exists(self.filename):
            self.status_message = "No changes to save"
        elif self.save_file(self.filename):
            self.status_message = f"Saved to {self.filename}"

    def _handle_filename_prompt(self, key: Key):
        """Handle keypress during filename prompt."""
        if key.key_type == KeyType.ESC or key == Key.ctrl('G'):
            self.prompt_mode = None
            self.prompt_input = ""
            self.status_message = "Save cancelled"
        elif key.key_type == KeyType.NEWLINE:
            if self.prompt_input:
                if self.save_file(self.prompt_input):
                    self.status_message = f"Saved to {self.prompt_input}"
                self.prompt_mode = None
                self.prompt_input = ""
        elif key in (Key.char('\x7f'), Key.ctrl('H')):
            self.prompt_input = self.prompt_input[:-1]
        elif key.key_type == KeyType.CHAR and ord(key.value) >= 32 and key.value != '\x7f':
            self.prompt_input += key.value

    def handle_key(self, key: Key):
        """Apply one key to the editor state."""
        if self.prompt_mode == 'save_filename':
            self._handle_filename_prompt(key)
            return

        # Status messages last until the next keypress
        self.status_message = None
        if not (key.key_type == KeyType.CTRL and key.value == 'Q'):
            self.quit_pending = False

        if self.command_registry.execute(self, key):
            self.modified = True
            self.is_new = False
        self.cursor.clamp()

    def refresh_size(self):
        """Fit the viewport to the terminal, keeping a row for the status bar."""
        rows, cols = self.terminal.get_size()
        # The status bar only fits when a text row is left above it
        self.status_visible = self.settings.show_status_bar and rows > 1
        if self.status_visible:
            rows -= 1
        self.viewport.resize(rows, cols)

    def scroll(self):
        self.viewport.scroll(self.cursor.row, self.cursor.column)

    def _status_line(self) -> Optional[StatusLine]:
        if not self.status_visible:
            return None
        message = self.status_message
        if self.prompt_mode == 'save_filename':
            message = EditorConstants.SAVE_PROMPT.format(self.prompt_input)
        return StatusLine(self.filename, self.modified, self.cursor.row,
                          self.cursor.column, message)

    def render_commands(self) -> list[TerminalCommand]:
        """Commands that draw the current state."""
        self.scroll()
        show_welcome = self.settings.show_welcome and self.is_new and self.buffer.is_empty()
        return self.pipeline.render(self.buffer, self.viewport, self.cursor,
                                    show_welcome=show_welcome,
                                    status=self._status_line())

    def draw(self):
        """Draw the current editor state to terminal."""
        self.terminal.execute(self.render_commands())

    def run(self):
        """Run the main editor loop until Ctrl-Q."""
        self.running = True
        with self.terminal.session():
            while self.running:
                self.refresh_size()
                self.draw()
                key = self.keyboard.read_key()
                self.handle_key(key)
        logger.info("editor exited")
