import io
import struct

import pytest
from conftest import blocks

from up2_core import BadLength, SequenceMismatch
from up2_core.models import Firmware
from up2_decode import Up2Decoder, iter_blocks, reassemble
from up2_decode.blocks import block_count


def test_two_blocks_reassemble():
    payload = blocks(0, 1)
    assert len(payload) == 264
    image = reassemble(payload)
    assert image == b"\x00" * 128 + b"\x01" * 128


def test_sequence_mismatch():
    payload = bytearray(blocks(0, 1))
    payload[132:136] = bytes.fromhex("02000000")
    with pytest.raises(SequenceMismatch) as ei:
        reassemble(bytes(payload))
    assert (ei.value.expected, ei.value.actual) == (1, 2)
    assert ei.value.index == 1
    assert ei.value.offset == 132
    assert "block 1" in str(ei.value)


def test_swapped_blocks_are_not_reordered():
    a, b, c = (blocks(0, 1, 2)[i * 132 : (i + 1) * 132] for i in range(3))
    with pytest.raises(SequenceMismatch) as ei:
        reassemble(a + c + b)
    assert (ei.value.expected, ei.value.actual) == (1, 2)


def test_first_block_must_be_zero():
    with pytest.raises(SequenceMismatch) as ei:
        reassemble(blocks(1, 2))
    assert ei.value.index == 0


@pytest.mark.parametrize("size", [1, 131, 133, 263, 265])
def test_partial_block(size):
    payload = (blocks(0, 1, 2) + b"\0")[:size]
    with pytest.raises(BadLength) as ei:
        iter_blocks(payload)
    assert ei.value.actual == size


def test_empty_payload():
    assert reassemble(b"") == b""
    assert list(iter_blocks(b"")) == []


def test_blocks_carry_sequence_and_data():
    out = list(iter_blocks(blocks(0, 1, 2, fill=0xAB)))
    assert [b.sequence for b in out] == [0, 1, 2]
    assert all(b.data == b"\xab" * 128 for b in out)
    assert block_count(blocks(0, 1, 2)) == 3


def test_many_blocks():
    payload = b"".join(struct.pack("<I", i) + bytes([i % 256]) * 128 for i in range(300))
    image = reassemble(payload)
    assert len(image) == 300 * 128
    assert image[128 * 299 :] == bytes([299 % 256]) * 128


def test_applied_to_decoded_firmware(sample_container):
    fw = next(r for r in Up2Decoder(io.BytesIO(sample_container)) if isinstance(r.content, Firmware))
    assert fw.content.delay == 500
    assert reassemble(fw.content.data) == b"\x00" * 128 + b"\x01" * 128


def test_bad_sequence_raises_before_any_block():
    payload = blocks(0, 1, 2, 4)
    with pytest.raises(SequenceMismatch) as ei:
        iter_blocks(payload)
    assert ei.value.index == 3
