import struct

import pytest

SMA_MAGIC = b"SMA:"


def container(*records: bytes, version=(1, 2, 3, 4)) -> bytes:
    return SMA_MAGIC + bytes(version) + b"".join(records)


def record(tag: int, body: bytes = b"", checksum: int = 0, susy: int = 0) -> bytes:
    return struct.pack("<IIII", checksum, tag, susy, len(body)) + body


def envelope(**kw) -> bytes:
    fields = dict(
        ctrl=0xA0, dst_susy=0xFFFF, dst_ser=0xFFFFFFFF, dst_dev=0, dst_fkt=0,
        src_susy=0x7D, src_ser=0x3A28BE5B, src_dev=0, src_fkt=0,
        cmd=0, pcnt=0, obj_num=0, dat_len=0, p0=0,
    )
    fields.update(kw)
    return struct.pack("<HHIBBHIBBBBHHI", *fields.values())


def blocks(*sequences: int, fill=None) -> bytes:
    out = b""
    for i, seq in enumerate(sequences):
        data = bytes([fill if fill is not None else i]) * 128
        out += struct.pack("<I", seq) + data
    return out


@pytest.fixture
def sample_container() -> bytes:
    """A small, well-formed container touching most record types."""
    return container(
        record(0x1000, bytes([2, 7, 1, 0])),
        record(0x0000, struct.pack("<I", 1)),
        record(0x1001, "Sunny Boy 5.0".encode("utf-8")),
        record(0x2000, envelope(cmd=0x0C) + struct.pack("<III12sI", 1, 2, 3, b"0000\0\0\0\0\0\0\0\0", 7)),
        record(0x0002, struct.pack("<I", 16)),
        record(0x2003, envelope(dat_len=264) + struct.pack("<I", 500) + blocks(0, 1)),
        record(0x2004, envelope()),
        record(0x0001, struct.pack("<I", 1)),
    )
