"""Terminal commands and the blessed-backed terminal interface.

The editor core never writes escape sequences itself. It builds lists of
command values which this module encodes as ANSI CSI sequences and writes
to the terminal.
"""

import logging
import os
import re
import select
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional, Union

import blessed

from .constants import EditorConstants

logger = logging.getLogger(__name__)

CSI = "\x1b["


class Erase(Enum):
    """Erase modes shared by erase-display and erase-line."""
    FROM_CURSOR = 0
    TO_CURSOR = 1
    ALL = 2


class Direction(Enum):
    """Relative cursor motion, valued by the CSI final byte."""
    UP = "A"
    DOWN = "B"
    RIGHT = "C"
    LEFT = "D"


@dataclass(frozen=True)
class CursorPositionReport:
    """Ask the terminal to report the cursor position."""


@dataclass(frozen=True)
class CursorMove:
    direction: Direction
    count: int = 1


@dataclass(frozen=True)
class MoveTo:
    """Absolute cursor position, 1-based."""
    row: int
    col: int


@dataclass(frozen=True)
class EraseDisplay:
    mode: Erase = Erase.ALL


@dataclass(frozen=True)
class EraseLine:
    mode: Erase = Erase.FROM_CURSOR


@dataclass(frozen=True)
class HideCursor:
    pass


@dataclass(frozen=True)
class ShowCursor:
    pass


@dataclass(frozen=True)
class Foreground:
    """Foreground colour, ANSI index 0-7."""
    color: int


@dataclass(frozen=True)
class Background:
    """Background colour, ANSI index 0-7."""
    color: int


@dataclass(frozen=True)
class ResetColors:
    pass


@dataclass(frozen=True)
class Text:
    text: str


TerminalCommand = Union[
    CursorPositionReport, CursorMove, MoveTo, EraseDisplay, EraseLine,
    HideCursor, ShowCursor, Foreground, Background, ResetColors, Text,
]


def encode(command: TerminalCommand) -> str:
    """Return the ANSI sequence (or literal text) for one command."""
    if isinstance(command, Text):
        return command.text
    if isinstance(command, MoveTo):
        return f"{CSI}{command.row};{command.col}H"
    if isinstance(command, EraseLine):
        return f"{CSI}{command.mode.value}K"
    if isinstance(command, EraseDisplay):
        return f"{CSI}{command.mode.value}J"
    if isinstance(command, CursorMove):
        return f"{CSI}{command.count}{command.direction.value}"
    if isinstance(command, HideCursor):
        return f"{CSI}?25l"
    if isinstance(command, ShowCursor):
        return f"{CSI}?25h"
    if isinstance(command, Foreground):
        return f"{CSI}{30 + command.color}m"
    if isinstance(command, Background):
        return f"{CSI}{40 + command.color}m"
    if isinstance(command, ResetColors):
        return f"{CSI}39;49m"
    if isinstance(command, CursorPositionReport):
        return f"{CSI}6n"
    raise TypeError(f"not a terminal command: {command!r}")


def encode_all(commands: Iterable[TerminalCommand]) -> str:
    return "".join(encode(c) for c in commands)


_CPR_RE = re.compile(r"\x1b\[(\d+);(\d+)R")


def parse_cursor_position_report(data: Union[str, bytes]) -> tuple[int, int]:
    """Parse ``ESC [ rows ; cols R`` into (rows, cols).

    Raises:
        ValueError: if the data holds no complete report.
    """
    if isinstance(data, bytes):
        data = data.decode("ascii", errors="replace")
    match = _CPR_RE.search(data)
    if not match:
        raise ValueError(f"malformed cursor position report: {data!r}")
    return int(match.group(1)), int(match.group(2))


class TerminalInterface:
    """Handles terminal I/O using Blessed.

    Acts as the command sink for rendering, as the byte source for the
    key decoder and as the owner of the raw-mode guard.
    """

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.is_active = False

    def _input_fd(self) -> int:
        fd = getattr(self.term, "_keyboard_fd", None)
        return sys.stdin.fileno() if fd is None else fd

    @contextmanager
    def session(self) -> Iterator["TerminalInterface"]:
        """Enter fullscreen raw mode for the duration of the block.

        Raw mode is entered once; the blessed context managers restore the
        saved terminal mode on every way out of the block.
        """
        if self.is_active:
            raise RuntimeError("terminal session already active")
        self.is_active = True
        logger.debug("entering raw mode")
        try:
            with self.term.fullscreen(), self.term.raw():
                try:
                    yield self
                finally:
                    self.execute([EraseDisplay(Erase.ALL), MoveTo(1, 1), ShowCursor()])
        finally:
            self.is_active = False
            logger.debug("terminal mode restored")

    # Byte source

    def read(self, n: int = 1) -> bytes:
        """Read up to ``n`` raw bytes, bypassing Python's input buffering."""
        return os.read(self._input_fd(), n)

    def poll(self, timeout: Optional[float]) -> bool:
        """True when input is ready within ``timeout`` seconds."""
        ready, _, _ = select.select([self._input_fd()], [], [], timeout)
        return bool(ready)

    # Command sink

    def write(self, data: str) -> None:
        stream = self.term.stream
        stream.write(data)
        stream.flush()

    def execute(self, commands: Iterable[TerminalCommand]) -> None:
        """Encode and write a batch of commands in one flush."""
        self.write(encode_all(commands))

    # Size discovery

    def query_cursor_position(self) -> tuple[int, int]:
        """Ask the terminal where the cursor is; reads the reply byte by byte."""
        self.execute([CursorPositionReport()])
        reply = bytearray()
        while not reply.endswith(b"R"):
            reply += self.read(1)
        return parse_cursor_position_report(bytes(reply))

    def query_size(self) -> tuple[int, int]:
        """Measure the screen by parking the cursor in the bottom-right corner."""
        distance = EditorConstants.SIZE_PROBE_DISTANCE
        self.execute([
            CursorMove(Direction.RIGHT, distance),
            CursorMove(Direction.DOWN, distance),
        ])
        return self.query_cursor_position()

    def get_size(self) -> tuple[int, int]:
        """Terminal size as (rows, cols)."""
        rows, cols = self.term.height, self.term.width
        if rows and cols:
            return rows, cols
        logger.debug("terminal reported no size, probing with cursor report")
        return self.query_size()

    @property
    def width(self) -> int:
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self) -> int:
        """Terminal height in rows."""
        return self.term.height
