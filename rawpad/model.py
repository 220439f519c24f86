"""Line-buffer document model."""

from typing import Optional, Union


def decode_text(data: Union[str, bytes]) -> str:
    """Return text for raw file contents.

    Undecodable bytes become U+FFFD so the same input always yields the
    same text.
    """
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def split_lines(text: str) -> list[str]:
    """Split text on ``\\n`` and ``\\r\\n``.

    A single trailing terminator does not produce an extra empty line and
    empty input gives one empty line.
    """
    if not text:
        return [""]
    parts = text.split("\n")
    if text.endswith("\n"):
        parts.pop()
    return [p[:-1] if p.endswith("\r") else p for p in parts]


class TextBuffer:
    """An ordered sequence of text lines.

    The buffer is never empty: a new document is a single empty line.
    Rows and columns are 0-based code point offsets. Passing a row that
    does not exist raises IndexError; the cursor is clamped before any
    call so this never happens during editing.
    """

    lines: list[str]

    def __init__(self, lines: Optional[list[str]] = None):
        self.lines = list(lines) if lines else [""]

    @classmethod
    def load(cls, data: Union[str, bytes]) -> "TextBuffer":
        """Create a buffer from file contents. Never fails."""
        return cls(split_lines(decode_text(data)))

    def __len__(self) -> int:
        return len(self.lines)

    def __repr__(self) -> str:
        return f"TextBuffer({self.lines!r})"

    def _check_row(self, row: int) -> None:
        if not 0 <= row < len(self.lines):
            raise IndexError(f"row {row} out of range (0..{len(self.lines) - 1})")

    def _check_position(self, row: int, col: int) -> None:
        self._check_row(row)
        if not 0 <= col <= len(self.lines[row]):
            raise IndexError(f"column {col} out of range for row {row}")

    def line(self, row: int) -> str:
        self._check_row(row)
        return self.lines[row]

    def line_length(self, row: int) -> int:
        """Number of code points in ``row``."""
        self._check_row(row)
        return len(self.lines[row])

    def line_count(self) -> int:
        return len(self.lines)

    def is_empty(self) -> bool:
        """True for a document made of one empty line."""
        return len(self.lines) == 1 and not self.lines[0]

    def insert_char(self, row: int, col: int, ch: str) -> None:
        """Insert ``ch`` before code point ``col`` of ``row``."""
        self._check_position(row, col)
        line = self.lines[row]
        self.lines[row] = line[:col] + ch + line[col:]

    def split_line(self, row: int, col: int) -> tuple[str, str]:
        """Break ``row`` at ``col``; the remainder becomes the next line.

        Returns:
            The (head, tail) pair now stored at ``row`` and ``row + 1``.
        """
        self._check_position(row, col)
        line = self.lines[row]
        head, tail = line[:col], line[col:]
        self.lines[row] = head
        self.lines.insert(row + 1, tail)
        return head, tail

    def join_line(self, row: int) -> int:
        """Append ``row + 1`` onto ``row`` and remove it.

        Returns:
            The length of ``row`` before the join, i.e. the seam column.
        """
        self._check_row(row)
        self._check_row(row + 1)
        seam = len(self.lines[row])
        self.lines[row] += self.lines.pop(row + 1)
        return seam

    def delete_char_before(self, row: int, col: int) -> tuple[int, int]:
        """Backspace at (row, col).

        Returns:
            The cursor position after the deletion.
        """
        self._check_position(row, col)
        if col > 0:
            line = self.lines[row]
            self.lines[row] = line[:col - 1] + line[col:]
            return row, col - 1
        if row > 0:
            return row - 1, self.join_line(row - 1)
        return row, col

    def delete_char_at(self, row: int, col: int) -> tuple[int, int]:
        """Forward delete at (row, col); joins the next line at end of line.

        Returns:
            The cursor position, which does not move.
        """
        self._check_position(row, col)
        line = self.lines[row]
        if col < len(line):
            self.lines[row] = line[:col] + line[col + 1:]
        elif row + 1 < len(self.lines):
            self.join_line(row)
        return row, col

    def serialize(self) -> list[str]:
        """Lines for persistence, each followed by a single newline."""
        return [line + "\n" for line in self.lines]
