"""Tests for terminal command encoding and the terminal interface."""

import io
from contextlib import contextmanager
from unittest.mock import MagicMock

import pytest
from rawpad.terminal import (
    Background, CursorMove, CursorPositionReport, Direction, Erase,
    EraseDisplay, EraseLine, Foreground, HideCursor, MoveTo, ResetColors,
    ShowCursor, TerminalInterface, Text, encode, encode_all,
    parse_cursor_position_report,
)


@pytest.mark.parametrize("command, expected", [
    (CursorPositionReport(), "\x1b[6n"),
    (CursorMove(Direction.UP, 3), "\x1b[3A"),
    (CursorMove(Direction.DOWN, 1), "\x1b[1B"),
    (CursorMove(Direction.RIGHT, 999), "\x1b[999C"),
    (CursorMove(Direction.LEFT, 2), "\x1b[2D"),
    (MoveTo(4, 7), "\x1b[4;7H"),
    (EraseDisplay(Erase.ALL), "\x1b[2J"),
    (EraseDisplay(Erase.TO_CURSOR), "\x1b[1J"),
    (EraseLine(), "\x1b[0K"),
    (EraseLine(Erase.ALL), "\x1b[2K"),
    (HideCursor(), "\x1b[?25l"),
    (ShowCursor(), "\x1b[?25h"),
    (Foreground(0), "\x1b[30m"),
    (Background(6), "\x1b[46m"),
    (ResetColors(), "\x1b[39;49m"),
    (Text("héllo"), "héllo"),
])
def test_encode(command, expected):
    assert encode(command) == expected


def test_encode_rejects_other_values():
    with pytest.raises(TypeError):
        encode("not a command")


def test_encode_all_keeps_order():
    assert encode_all([HideCursor(), Text("x"), ShowCursor()]) == "\x1b[?25lx\x1b[?25h"


def test_parse_cursor_position_report():
    assert parse_cursor_position_report(b"\x1b[24;80R") == (24, 80)
    assert parse_cursor_position_report("junk\x1b[5;12R") == (5, 12)


@pytest.mark.parametrize("data", [b"", b"\x1b[24R", b"\x1b[a;bR"])
def test_parse_malformed_report(data):
    with pytest.raises(ValueError):
        parse_cursor_position_report(data)


class FakeBlessed:
    """Stands in for blessed.Terminal with recorded mode changes."""

    def __init__(self, height=24, width=80):
        self.height = height
        self.width = width
        self.stream = io.StringIO()
        self.events = []

    @contextmanager
    def fullscreen(self):
        self.events.append("fullscreen on")
        try:
            yield
        finally:
            self.events.append("fullscreen off")

    @contextmanager
    def raw(self):
        self.events.append("raw on")
        try:
            yield
        finally:
            self.events.append("raw off")


def test_execute_writes_encoded_commands():
    fake = FakeBlessed()
    term = TerminalInterface(fake)
    term.execute([MoveTo(2, 3), Text("hi")])
    assert fake.stream.getvalue() == "\x1b[2;3Hhi"


def test_session_restores_mode_once():
    fake = FakeBlessed()
    term = TerminalInterface(fake)
    with term.session():
        assert term.is_active
        assert fake.events == ["fullscreen on", "raw on"]
    assert fake.events == ["fullscreen on", "raw on", "raw off", "fullscreen off"]
    assert not term.is_active
    assert fake.stream.getvalue().endswith("\x1b[2J\x1b[1;1H\x1b[?25h")


def test_session_restores_mode_on_error():
    fake = FakeBlessed()
    term = TerminalInterface(fake)
    with pytest.raises(RuntimeError, match="boom"):
        with term.session():
            raise RuntimeError("boom")
    assert fake.events[-2:] == ["raw off", "fullscreen off"]
    assert not term.is_active


def test_session_cannot_be_entered_twice():
    term = TerminalInterface(FakeBlessed())
    with term.session():
        with pytest.raises(RuntimeError):
            with term.session():
                pass
    # Only the outer session touched the terminal mode
    assert term.term.events.count("raw on") == 1
    assert term.term.events.count("raw off") == 1


def test_get_size_uses_blessed():
    term = TerminalInterface(FakeBlessed(30, 100))
    assert term.get_size() == (30, 100)
    assert (term.height, term.width) == (30, 100)


def test_get_size_falls_back_to_cursor_report():
    fake = FakeBlessed(0, 0)
    term = TerminalInterface(fake)
    reply = iter([b"\x1b", b"[", b"", b"4", b"0", b";", b"1", b"2", b"0", b"R"])
    term.read = MagicMock(side_effect=lambda n=1: next(reply))
    assert term.get_size() == (40, 120)
    assert fake.stream.getvalue() == "\x1b[999C\x1b[999B\x1b[6n"
