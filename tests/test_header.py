import struct

import pytest

from up2_core import (
    BadLength,
    InvalidEncoding,
    InvalidMagic,
    OversizedRecord,
    RecordHeader,
    SequenceMismatch,
    TruncatedStream,
    decode_header,
    decode_record_header,
)
from up2_core.errors import ERRORS


def test_header_fields():
    h = decode_header(bytes.fromhex("534d413a01020304"))
    assert h.magic == 0x3A414D53
    assert (h.major, h.minor, h.build, h.revision) == (1, 2, 3, 4)
    assert h.version == "1.2.3.4"


@pytest.mark.parametrize("prefix", [b"SMA;", b"AMS:", b"\x00\x00\x00\x00", b":AMS", b"sma:"])
@pytest.mark.parametrize("tail", [b"\x01\x02\x03\x04", b"\xff\xff\xff\xff"])
def test_bad_magic_rejected(prefix, tail):
    with pytest.raises(InvalidMagic) as ei:
        decode_header(prefix + tail)
    assert ei.value.code == "E_INVALID_MAGIC"
    assert ei.value.actual == struct.unpack("<I", prefix)[0]


def test_version_bytes_not_validated():
    h = decode_header(b"SMA:\xff\x00\xff\x00")
    assert (h.major, h.minor, h.build, h.revision) == (255, 0, 255, 0)


def test_short_header():
    with pytest.raises(TruncatedStream) as ei:
        decode_header(b"SMA:\x01")
    assert ei.value.expected == 8
    assert ei.value.actual == 5


def test_record_header():
    raw = struct.pack("<IIII", 0xDEADBEEF, 0x2003, 0x7D, 4242)
    assert decode_record_header(raw) == RecordHeader(0xDEADBEEF, 0x2003, 0x7D, 4242)


def test_every_error_code_has_a_message():
    errors = [
        InvalidMagic(0x12345678),
        TruncatedStream("record body", 10, 3),
        OversizedRecord(100, 10),
        BadLength("pause", 4, 3),
        InvalidEncoding("text", "invalid start byte at byte 0"),
        SequenceMismatch(1, 2),
    ]
    assert {e.code for e in errors} == set(ERRORS)
    assert str(errors[0]) == "Container header magic is not 'SMA:' (found 0x12345678)"
    assert str(errors[1]) == "Truncated record body: expected 10 bytes, got 3"
    assert str(errors[3]) == "Bad pause length: expected 4, got 3"
    assert str(BadLength("firmware", 32, 5, exact=False)) == "Bad firmware length: expected at least 32, got 5"
