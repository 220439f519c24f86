"""Clamped coordinates and the editing cursor."""

from dataclasses import dataclass
from typing import Optional

from .model import TextBuffer


@dataclass(frozen=True)
class Bounds:
    """A range of valid positions.

    ``[start, end)`` by default; ``[start, end]`` when ``inclusive`` is set,
    which is how columns allow a position after the last character.
    """
    start: int
    end: int
    inclusive: bool = False

    @property
    def last(self) -> int:
        """Largest valid value (never below ``start``)."""
        last = self.end if self.inclusive else self.end - 1
        return max(self.start, last)

    def clamp(self, value: int) -> int:
        if value < self.start:
            return self.start
        if value > self.last:
            return self.last
        return value

    def __contains__(self, value: int) -> bool:
        return self.start <= value <= self.last


class ClampedValue:
    """An integer that saturates into its bounds on every assignment."""

    def __init__(self, bounds: Bounds, value: Optional[int] = None):
        self._bounds = bounds
        self._value = bounds.clamp(bounds.start if value is None else value)

    @property
    def value(self) -> int:
        return self._value

    @value.setter
    def value(self, value: int) -> None:
        self._value = self._bounds.clamp(value)

    @property
    def bounds(self) -> Bounds:
        return self._bounds

    def rebind(self, bounds: Bounds) -> int:
        """Switch to new bounds and re-clamp the current value."""
        self._bounds = bounds
        self._value = bounds.clamp(self._value)
        return self._value

    def __int__(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"ClampedValue({self._value}, {self._bounds})"


class Cursor:
    """Position in a TextBuffer, 0-based on both axes.

    The row always names an existing line and the column may equal the
    line length (after the last character).
    """

    def __init__(self, buffer: TextBuffer, row: int = 0, column: int = 0):
        self.buffer = buffer
        self._row = ClampedValue(self.row_bounds(), row)
        self._column = ClampedValue(self.column_bounds(), column)

    def __repr__(self) -> str:
        return f"Cursor(row={self.row}, column={self.column})"

    @property
    def row(self) -> int:
        return self._row.value

    @property
    def column(self) -> int:
        return self._column.value

    @property
    def position(self) -> tuple[int, int]:
        return (self.row, self.column)

    def row_bounds(self) -> Bounds:
        return Bounds(0, self.buffer.line_count())

    def column_bounds(self, row: Optional[int] = None) -> Bounds:
        line_row = self.row if row is None else row
        return Bounds(0, self.buffer.line_length(line_row), inclusive=True)

    def set_row(self, y: int, bounds: Optional[Bounds] = None) -> None:
        """Move to row ``y`` and re-clamp the column to that line."""
        self._row.rebind(bounds or self.row_bounds())
        self._row.value = y
        self._column.rebind(self.column_bounds())

    def set_column(self, x: int, bounds: Optional[Bounds] = None) -> None:
        self._column.rebind(bounds or self.column_bounds())
        self._column.value = x

    def move_to(self, row: int, column: int) -> None:
        self.set_row(row)
        self.set_column(column)

    def clamp(self) -> None:
        """Re-apply both bounds after the buffer changed shape."""
        self._row.rebind(self.row_bounds())
        self._column.rebind(self.column_bounds())

    # Movements

    def left(self) -> None:
        if self.column > 0:
            self.set_column(self.column - 1)
        elif self.row > 0:
            self.set_row(self.row - 1)
            self.end()

    def right(self) -> None:
        if self.column < self.buffer.line_length(self.row):
            self.set_column(self.column + 1)
        elif self.row < self.buffer.line_count() - 1:
            self.set_row(self.row + 1)
            self.home()

    def up(self) -> None:
        self.set_row(self.row - 1)

    def down(self) -> None:
        self.set_row(self.row + 1)

    def home(self) -> None:
        self.set_column(0)

    def end(self) -> None:
        self.set_column(self.buffer.line_length(self.row))

    def page_up(self, screen_rows: int) -> None:
        # One row at a time so every step re-clamps the column
        for _ in range(screen_rows):
            self.up()

    def page_down(self, screen_rows: int) -> None:
        for _ in range(screen_rows):
            self.down()
