"""Keyboard input decoding from raw terminal bytes."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .constants import EditorConstants

logger = logging.getLogger(__name__)

ESC = 0x1B


class KeyType(Enum):
    """Types of key events."""
    CHAR = "char"
    CTRL = "ctrl"
    ESC = "esc"
    NEWLINE = "newline"
    ARROW = "arrow"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"
    DELETE = "delete"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Key:
    """A decoded key.

    ``value`` is the character for CHAR, the upper-case letter for CTRL
    and the direction name for ARROW; empty otherwise. ``raw`` holds the
    bytes that produced the key and does not take part in equality.
    """
    key_type: KeyType
    value: str = ""
    raw: bytes = field(default=b"", compare=False)

    @classmethod
    def char(cls, ch: str) -> "Key":
        return cls(KeyType.CHAR, ch)

    @classmethod
    def ctrl(cls, letter: str) -> "Key":
        return cls(KeyType.CTRL, letter.upper())

    @classmethod
    def arrow(cls, direction: str) -> "Key":
        return cls(KeyType.ARROW, direction)

    def __str__(self) -> str:
        if self.key_type == KeyType.CHAR:
            return repr(self.value)
        if self.key_type == KeyType.CTRL:
            return f"Ctrl-{self.value}"
        if self.value:
            return f"{self.key_type.value}:{self.value}"
        return self.key_type.value


UP = Key.arrow("up")
DOWN = Key.arrow("down")
RIGHT = Key.arrow("right")
LEFT = Key.arrow("left")
HOME = Key(KeyType.HOME)
END = Key(KeyType.END)
DELETE = Key(KeyType.DELETE)
PAGE_UP = Key(KeyType.PAGE_UP)
PAGE_DOWN = Key(KeyType.PAGE_DOWN)
UNKNOWN = Key(KeyType.UNKNOWN)

# ESC [ <final>
CSI_FINAL_KEYS = {
    ord("A"): UP,
    ord("B"): DOWN,
    ord("C"): RIGHT,
    ord("D"): LEFT,
    ord("H"): HOME,
    ord("F"): END,
}

# ESC [ <param> ~
TILDE_KEYS = {
    ord("1"): HOME,
    ord("7"): HOME,
    ord("4"): END,
    ord("8"): END,
    ord("3"): DELETE,
    ord("5"): PAGE_UP,
    ord("6"): PAGE_DOWN,
}

# ESC O <final>
SS3_KEYS = {
    ord("H"): HOME,
    ord("F"): END,
}


class State(Enum):
    """Escape-sequence decoder states."""
    START = "start"
    ESCAPE1 = "escape1"  # seen ESC
    ESCAPE2 = "escape2"  # seen ESC [
    SS3 = "ss3"  # seen ESC O
    PARAMS = "params"  # seen ESC [ followed by parameter bytes


def _is_final_byte(b: int) -> bool:
    return 0x40 <= b <= 0x7E


def _utf8_length(lead: int) -> int:
    if 0xC0 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF7:
        return 4
    return 1


class KeyDecoder:
    """Turns a byte stream into Key values.

    The source needs a ``read(n)`` method returning bytes. An optional
    ``poll(timeout)`` method tells whether more input is waiting; it is
    used only to tell a lone ESC from the start of a sequence. Sources
    without it are assumed to always have input ready.

    Reads that return no data, or fail with BlockingIOError or
    InterruptedError, are retried: in raw mode a short read means the
    byte has not arrived yet. Any other OSError propagates.
    """

    def __init__(self, source, escape_timeout: Optional[float] = None):
        self.source = source
        if escape_timeout is None:
            escape_timeout = EditorConstants.ESCAPE_SEQUENCE_TIMEOUT
        self.escape_timeout = escape_timeout
        self._handlers = {
            State.START: self._start,
            State.ESCAPE1: self._escape1,
            State.ESCAPE2: self._escape2,
            State.SS3: self._ss3,
            State.PARAMS: self._params,
        }
        # A byte read past the end of a truncated UTF-8 character
        self._pending: Optional[int] = None

    def read_byte(self) -> int:
        """Block until one byte is available and return it."""
        if self._pending is not None:
            b, self._pending = self._pending, None
            return b
        while True:
            try:
                data = self.source.read(1)
            except (BlockingIOError, InterruptedError):
                continue
            if data:
                return data[0]

    def _more_input(self) -> bool:
        if self._pending is not None:
            return True
        poll = getattr(self.source, "poll", None)
        if poll is None:
            return True
        return poll(self.escape_timeout)

    def read_key(self) -> Key:
        """Decode the next key, blocking until it is complete."""
        state = State.START
        seq = bytearray()
        while True:
            result = self._handlers[state](seq)
            if isinstance(result, Key):
                key = Key(result.key_type, result.value, raw=bytes(seq))
                logger.debug("decoded %r as %s", key.raw, key)
                return key
            state = result

    # Each handler consumes bytes into ``seq`` and returns either the next
    # state or the finished Key.

    def _start(self, seq: bytearray):
        b = self.read_byte()
        seq.append(b)
        if b == ESC:
            return State.ESCAPE1
        if b in (10, 13):
            return Key(KeyType.NEWLINE)
        if 1 <= b <= 26:
            return Key.ctrl(chr(b + 64))
        if b >= 0x80:
            return self._utf8_char(seq, _utf8_length(b))
        return Key.char(chr(b))

    def _escape1(self, seq: bytearray):
        if not self._more_input():
            return Key(KeyType.ESC)
        b = self.read_byte()
        seq.append(b)
        if b == ord("["):
            return State.ESCAPE2
        if b == ord("O"):
            return State.SS3
        return UNKNOWN

    def _escape2(self, seq: bytearray):
        b = self.read_byte()
        seq.append(b)
        if b in CSI_FINAL_KEYS:
            return CSI_FINAL_KEYS[b]
        if _is_final_byte(b):
            return UNKNOWN
        return State.PARAMS

    def _ss3(self, seq: bytearray):
        b = self.read_byte()
        seq.append(b)
        return SS3_KEYS.get(b, UNKNOWN)

    def _params(self, seq: bytearray):
        # seq is ESC [ p; consume up to the final byte so nothing leaks
        # into the next decode.
        params = seq[2:]
        while len(params) <= EditorConstants.MAX_CSI_PARAMETER_BYTES:
            b = self.read_byte()
            seq.append(b)
            if _is_final_byte(b):
                if b == ord("~") and len(params) == 1:
                    return TILDE_KEYS.get(params[0], UNKNOWN)
                return UNKNOWN
            params.append(b)
        return UNKNOWN

    def _utf8_char(self, seq: bytearray, length: int) -> Key:
        while len(seq) < length:
            b = self.read_byte()
            if not 0x80 <= b <= 0xBF:
                # Not ours; it starts the next key
                self._pending = b
                break
            seq.append(b)
        return Key.char(bytes(seq).decode("utf-8", errors="replace")[0])
