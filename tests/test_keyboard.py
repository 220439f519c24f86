"""Test keyboard input decoding."""

import io

import pytest
from rawpad.keyboard import Key, KeyDecoder, KeyType


class ScriptedSource:
    """Byte source that hands out chunks, including empty short reads."""

    def __init__(self, chunks, ready=True):
        self._chunks = list(chunks)
        self.ready = ready
        self.reads = 0

    def read(self, n):
        self.reads += 1
        chunk = self._chunks.pop(0)
        if isinstance(chunk, Exception):
            raise chunk
        return chunk

    def poll(self, timeout):
        return self.ready and bool(self._chunks)


def decode(data: bytes) -> Key:
    return KeyDecoder(io.BytesIO(data)).read_key()


def decode_all(data: bytes, count: int) -> list[Key]:
    decoder = KeyDecoder(io.BytesIO(data))
    return [decoder.read_key() for _ in range(count)]


@pytest.mark.parametrize("data, expected", [
    (b"\x1b[A", Key.arrow("up")),
    (b"\x1b[B", Key.arrow("down")),
    (b"\x1b[C", Key.arrow("right")),
    (b"\x1b[D", Key.arrow("left")),
    (b"\x1b[3~", Key(KeyType.DELETE)),
    (b"\x1b[5~", Key(KeyType.PAGE_UP)),
    (b"\x1b[6~", Key(KeyType.PAGE_DOWN)),
    (b"\x1b[1~", Key(KeyType.HOME)),
    (b"\x1b[7~", Key(KeyType.HOME)),
    (b"\x1b[4~", Key(KeyType.END)),
    (b"\x1b[8~", Key(KeyType.END)),
    (b"\x1b[H", Key(KeyType.HOME)),
    (b"\x1b[F", Key(KeyType.END)),
    (b"\x1bOH", Key(KeyType.HOME)),
    (b"\x1bOF", Key(KeyType.END)),
])
def test_escape_sequences(data, expected):
    assert decode(data) == expected


@pytest.mark.parametrize("data", [
    b"\x1b[Z",
    b"\x1b[2~",
    b"\x1b[9~",
    b"\x1b[1x",
    b"\x1bOP",
    b"\x1bx",
])
def test_unrecognized_sequences_are_unknown(data):
    assert decode(data).key_type == KeyType.UNKNOWN


def test_ctrl_q():
    key = decode(b"\x11")
    assert key == Key(KeyType.CTRL, "Q")
    assert key == Key.ctrl("q")


@pytest.mark.parametrize("byte", [10, 13])
def test_newline_bytes(byte):
    assert decode(bytes([byte])) == Key(KeyType.NEWLINE)


def test_control_range_maps_to_letters():
    assert decode(b"\x01") == Key.ctrl("A")
    assert decode(b"\x09") == Key.ctrl("I")
    assert decode(b"\x1a") == Key.ctrl("Z")


def test_printable_bytes_are_chars():
    assert decode(b"a") == Key.char("a")
    assert decode(b"~") == Key.char("~")
    assert decode(b"\x7f") == Key.char("\x7f")


def test_utf8_character_is_one_key():
    assert decode_all("é日".encode("utf-8"), 2) == [Key.char("é"), Key.char("日")]


def test_invalid_utf8_is_replaced():
    assert decode(b"\xff") == Key.char("\ufffd")


def test_truncated_utf8_keeps_the_following_byte():
    keys = decode_all(b"\xc3Azz", 3)
    assert keys == [Key.char("\ufffd"), Key.char("A"), Key.char("z")]
    assert keys[0].raw == b"\xc3"


def test_truncated_utf8_before_escape_sequence():
    keys = decode_all(b"\xc3\x1b[Az", 3)
    assert keys == [Key.char("\ufffd"), Key.arrow("up"), Key.char("z")]
    assert keys[1].raw == b"\x1b[A"


def test_truncated_utf8_before_lone_escape():
    source = ScriptedSource([b"\xe6", b"\x1b"], ready=False)
    decoder = KeyDecoder(source)
    assert decoder.read_key() == Key.char("\ufffd")
    assert decoder.read_key() == Key(KeyType.ESC)


def test_raw_bytes_are_recorded_but_not_compared():
    key = decode(b"\x1b[3~")
    assert key.raw == b"\x1b[3~"
    assert key == Key(KeyType.DELETE, raw=b"")


def test_long_parameter_sequence_is_consumed_whole():
    """F5 and modified arrows must not leave bytes for the next key."""
    keys = decode_all(b"\x1b[15~\x1b[1;5Ca", 3)
    assert [k.key_type for k in keys] == [KeyType.UNKNOWN, KeyType.UNKNOWN, KeyType.CHAR]
    assert keys[2].value == "a"


def test_sequence_followed_by_text():
    keys = decode_all(b"\x1b[Ahi\r", 4)
    assert keys == [Key.arrow("up"), Key.char("h"), Key.char("i"), Key(KeyType.NEWLINE)]


def test_lone_escape():
    source = ScriptedSource([b"\x1b"], ready=False)
    assert KeyDecoder(source).read_key() == Key(KeyType.ESC)


def test_escape_then_sequence_when_input_ready():
    source = ScriptedSource([b"\x1b", b"[", b"B"])
    assert KeyDecoder(source).read_key() == Key.arrow("down")


def test_zero_byte_reads_are_retried():
    source = ScriptedSource([b"", b"", b"\x1b", b"", b"[", b"", b"A"])
    assert KeyDecoder(source).read_key() == Key.arrow("up")
    assert source.reads == 7


def test_transient_errors_are_retried():
    source = ScriptedSource([BlockingIOError(), InterruptedError(), b"x"])
    assert KeyDecoder(source).read_key() == Key.char("x")


def test_io_errors_propagate():
    source = ScriptedSource([OSError(5, "Input/output error")])
    with pytest.raises(OSError):
        KeyDecoder(source).read_key()


def test_escape_timeout_is_passed_to_poll():
    seen = []

    class Source(ScriptedSource):
        def poll(self, timeout):
            seen.append(timeout)
            return False

    KeyDecoder(Source([b"\x1b"]), escape_timeout=0.2).read_key()
    assert seen == [0.2]
