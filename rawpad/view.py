"""Viewport scrolling and frame rendering.

Rendering produces terminal command values only; writing them out is the
terminal interface's job.
"""

from dataclasses import dataclass
from typing import Optional

from .constants import EditorConstants
from .cursor import Bounds, ClampedValue, Cursor
from .model import TextBuffer
from .terminal import (
    Background,
    EraseLine,
    Foreground,
    HideCursor,
    MoveTo,
    ResetColors,
    ShowCursor,
    TerminalCommand,
    Text,
)


def _follow(offset: int, position: int, size: int) -> int:
    """Smallest scroll change that keeps ``position`` inside ``size`` cells."""
    visible = Bounds(max(0, position - size + 1), position, inclusive=True)
    return ClampedValue(visible, offset).value


class Viewport:
    """The window of buffer coordinates mapped onto the screen."""

    def __init__(self, screen_rows: int = 24, screen_cols: int = 80):
        self.row_offset = 0
        self.col_offset = 0
        self.screen_rows = screen_rows
        self.screen_cols = screen_cols

    def __repr__(self) -> str:
        return (f"Viewport(row_offset={self.row_offset}, col_offset={self.col_offset}, "
                f"screen_rows={self.screen_rows}, screen_cols={self.screen_cols})")

    @property
    def screen_rows(self) -> int:
        return self._screen_rows

    @screen_rows.setter
    def screen_rows(self, value: int) -> None:
        self._screen_rows = max(1, value)

    @property
    def screen_cols(self) -> int:
        return self._screen_cols

    @screen_cols.setter
    def screen_cols(self, value: int) -> None:
        self._screen_cols = max(1, value)

    def resize(self, screen_rows: int, screen_cols: int) -> None:
        self.screen_rows = screen_rows
        self.screen_cols = screen_cols

    def scroll(self, cursor_row: int, cursor_col: int) -> None:
        """Adjust the offsets so the cursor cell is visible.

        Offsets only move when the cursor has left the window, so calling
        this again with the same input changes nothing.
        """
        self.row_offset = _follow(self.row_offset, cursor_row, self.screen_rows)
        self.col_offset = _follow(self.col_offset, cursor_col, self.screen_cols)

    def screen_position(self, cursor_row: int, cursor_col: int) -> tuple[int, int]:
        """1-based terminal position of a buffer cell."""
        return (cursor_row - self.row_offset + 1, cursor_col - self.col_offset + 1)


def display_text(text: str) -> str:
    """Map C0, DEL and C1 control characters to single printable cells."""
    out = []
    for ch in text:
        if ch == "\t":
            out.append(EditorConstants.TAB_DISPLAY)
        elif ord(ch) < 32 or 127 <= ord(ch) <= 0x9F:
            out.append(EditorConstants.CONTROL_DISPLAY)
        else:
            out.append(ch)
    return "".join(out)


def welcome_banner(message: str, width: int) -> str:
    """Centre ``message`` in ``width`` columns behind a filler glyph."""
    message = message[:width]
    padding = (width - len(message)) // 2
    if padding:
        return EditorConstants.FILLER_GLYPH + " " * (padding - 1) + message
    return message


@dataclass
class StatusLine:
    """What the bottom status bar shows."""
    filename: Optional[str]
    modified: bool
    row: int
    column: int
    message: Optional[str] = None

    def format(self, width: int) -> str:
        name = self.filename or EditorConstants.NO_NAME
        left = f" {name}{' [+]' if self.modified else ''}"
        if self.message:
            left += f" | {self.message}"
        right = f"{self.row + 1}:{self.column + 1} "
        gap = width - len(left) - len(right)
        if gap < 1:
            return left[:width].ljust(width)
        return left + " " * gap + right


class RenderPipeline:
    """Composes buffer, viewport and cursor into terminal commands."""

    def __init__(self, welcome_message: Optional[str] = None):
        self.welcome_message = welcome_message

    def render_row(self, buffer: TextBuffer, viewport: Viewport, screen_row: int,
                   show_welcome: bool = False) -> str:
        """Text for one screen row (0-based)."""
        file_row = screen_row + viewport.row_offset
        if file_row < buffer.line_count():
            line = buffer.line(file_row)
            start = viewport.col_offset
            return display_text(line[start:start + viewport.screen_cols])
        if show_welcome and self.welcome_message and screen_row == viewport.screen_rows // 3:
            return welcome_banner(self.welcome_message, viewport.screen_cols)
        return EditorConstants.FILLER_GLYPH

    def render(self, buffer: TextBuffer, viewport: Viewport, cursor: Cursor,
               show_welcome: bool = False,
               status: Optional[StatusLine] = None) -> list[TerminalCommand]:
        """Build the command list for one frame.

        Args:
            buffer: Document to draw
            viewport: Scroll offsets and text area size; must already
                contain the cursor
            cursor: Cursor to place after drawing
            show_welcome: Draw the welcome banner on the filler rows
            status: Status bar drawn below the text area, if any

        Returns:
            Commands in the order they must be written
        """
        commands: list[TerminalCommand] = [HideCursor(), MoveTo(1, 1)]
        for screen_row in range(viewport.screen_rows):
            commands.append(Text(self.render_row(buffer, viewport, screen_row, show_welcome)))
            commands.append(EraseLine())
            if screen_row < viewport.screen_rows - 1:
                commands.append(Text("\r\n"))
        if status is not None:
            commands.extend([
                Text("\r\n"),
                Foreground(EditorConstants.STATUS_FOREGROUND),
                Background(EditorConstants.STATUS_BACKGROUND),
                Text(status.format(viewport.screen_cols)),
                ResetColors(),
                EraseLine(),
            ])
        row, col = viewport.screen_position(cursor.row, cursor.column)
        commands.append(MoveTo(row, col))
        commands.append(ShowCursor())
        return commands
