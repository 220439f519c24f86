"""Command pattern implementation for editor actions."""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple, TYPE_CHECKING

from .constants import EditorConstants
from .keyboard import Key, KeyType

if TYPE_CHECKING:
    from .editor import Editor


class EditorCommand(ABC):
    """Base class for editor commands."""

    @abstractmethod
    def execute(self, editor: 'Editor', key: Key) -> bool:
        """Execute the command.

        Args:
            editor: Editor instance
            key: The key that triggered this command

        Returns:
            True if the command modified the document
        """
        pass


class MovementCommand(EditorCommand):
    """Base class for cursor movement commands."""

    def execute(self, editor: 'Editor', key: Key) -> bool:
        """Movement commands don't modify the document."""
        self._move(editor, key)
        return False

    @abstractmethod
    def _move(self, editor: 'Editor', key: Key):
        """Perform the movement."""
        pass


class LeftCharCommand(MovementCommand):
    def _move(self, editor, key):
        editor.cursor.left()


class RightCharCommand(MovementCommand):
    def _move(self, editor, key):
        editor.cursor.right()


class UpLineCommand(MovementCommand):
    def _move(self, editor, key):
        editor.cursor.up()


class DownLineCommand(MovementCommand):
    def _move(self, editor, key):
        editor.cursor.down()


class BeginningOfLineCommand(MovementCommand):
    def _move(self, editor, key):
        editor.cursor.home()


class EndOfLineCommand(MovementCommand):
    def _move(self, editor, key):
        editor.cursor.end()


class PageUpCommand(MovementCommand):
    def _move(self, editor, key):
        editor.cursor.page_up(editor.viewport.screen_rows)


class PageDownCommand(MovementCommand):
    def _move(self, editor, key):
        editor.cursor.page_down(editor.viewport.screen_rows)


class EditCommand(EditorCommand):
    """Base class for editing commands.

    Subclasses return False from ``_edit`` when nothing changed, so that
    a no-op (Backspace at the top of the file) does not mark the document
    modified.
    """

    def execute(self, editor: 'Editor', key: Key) -> bool:
        changed = self._edit(editor, key)
        editor.cursor.clamp()
        return changed

    @abstractmethod
    def _edit(self, editor: 'Editor', key: Key) -> bool:
        """Perform the edit."""
        pass


class BackspaceCommand(EditCommand):
    def _edit(self, editor, key):
        before = editor.cursor.position
        if before == (0, 0):
            return False
        row, col = editor.buffer.delete_char_before(*before)
        editor.cursor.clamp()
        editor.cursor.move_to(row, col)
        return True


class DeleteCharCommand(EditCommand):
    def _edit(self, editor, key):
        row, col = editor.cursor.position
        if row == editor.buffer.line_count() - 1 and col == editor.buffer.line_length(row):
            return False
        editor.buffer.delete_char_at(row, col)
        return True


class InsertNewlineCommand(EditCommand):
    def _edit(self, editor, key):
        row, col = editor.cursor.position
        editor.buffer.split_line(row, col)
        editor.cursor.clamp()
        editor.cursor.move_to(row + 1, 0)
        return True


class InsertTextCommand(EditCommand):
    def __init__(self, text: Optional[str] = None):
        self.text = text

    def _edit(self, editor, key):
        char = self.text if self.text is not None else key.value
        # Filter out control characters
        if not char or (ord(char[0]) < 32 and char != '\t') or char == '\x7f':
            return False
        row, col = editor.cursor.position
        editor.buffer.insert_char(row, col, char)
        editor.cursor.clamp()
        editor.cursor.set_column(col + len(char))
        return True


class SystemCommand(EditorCommand):
    """Base class for system commands like save and quit."""

    def execute(self, editor: 'Editor', key: Key) -> bool:
        """System commands don't modify document content directly."""
        self._execute_system(editor, key)
        return False

    @abstractmethod
    def _execute_system(self, editor: 'Editor', key: Key):
        """Perform the system action."""
        pass


class QuitCommand(SystemCommand):
    def _execute_system(self, editor, key):
        if editor.modified and editor.settings.confirm_quit and not editor.quit_pending:
            editor.quit_pending = True
            editor.status_message = EditorConstants.QUIT_CONFIRM_MESSAGE
        else:
            editor.running = False


class SaveCommand(SystemCommand):
    def _execute_system(self, editor, key):
        editor._handle_save()


class CommandRegistry:
    """Registry for mapping keys to commands."""

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, str], EditorCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Movement commands
        self.register((KeyType.ARROW, 'left'), LeftCharCommand())
        self.register((KeyType.ARROW, 'right'), RightCharCommand())
        self.register((KeyType.ARROW, 'up'), UpLineCommand())
        self.register((KeyType.ARROW, 'down'), DownLineCommand())
        self.register((KeyType.HOME, ''), BeginningOfLineCommand())
        self.register((KeyType.END, ''), EndOfLineCommand())
        self.register((KeyType.PAGE_UP, ''), PageUpCommand())
        self.register((KeyType.PAGE_DOWN, ''), PageDownCommand())

        # Editing commands
        self.register((KeyType.CHAR, '\x7f'), BackspaceCommand())
        self.register((KeyType.CTRL, 'H'), BackspaceCommand())
        self.register((KeyType.DELETE, ''), DeleteCharCommand())
        self.register((KeyType.NEWLINE, ''), InsertNewlineCommand())
        self.register((KeyType.CTRL, 'I'), InsertTextCommand('\t'))

        # System commands
        self.register((KeyType.CTRL, 'Q'), QuitCommand())
        self.register((KeyType.CTRL, 'S'), SaveCommand())

    def register(self, key: Tuple[KeyType, str], command: EditorCommand):
        """Register a command for a key."""
        self._commands[key] = command

    def get_command(self, key_type: KeyType, value: str) -> Optional[EditorCommand]:
        """Get the command for a key."""
        return self._commands.get((key_type, value))

    def execute(self, editor: 'Editor', key: Key) -> bool:
        """Execute the command for the given key.

        Returns:
            True if the document was modified
        """
        command = self.get_command(key.key_type, key.value)
        if command:
            return command.execute(editor, key)

        # Handle regular text input
        if key.key_type == KeyType.CHAR:
            return InsertTextCommand().execute(editor, key)

        return False
