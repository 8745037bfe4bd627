"""Firmware payload sub-framing.

Block-structured firmware images are a run of 132-byte units, each a
little-endian sequence number followed by 128 data bytes. Block N must carry
sequence N. Applied by the caller to ``Firmware.data``; the stream decoder
never does this on its own.
"""
from __future__ import annotations

import struct
from typing import Iterator

from up2_core.errors import BadLength, SequenceMismatch
from up2_core.models import Block
from up2_core.protocol import BLOCK_DATA_LEN, BLOCK_HEADER_FMT, BLOCK_LEN


def iter_blocks(payload: bytes) -> Iterator[Block]:
    """Validate the whole payload, then return an iterator over its blocks.

    Length and every sequence number are checked before the first block is
    produced, so a caller never sees part of a bad payload.
    """
    if len(payload) % BLOCK_LEN:
        padded = (len(payload) // BLOCK_LEN + 1) * BLOCK_LEN
        raise BadLength(f"block payload (multiple of {BLOCK_LEN})", padded, len(payload))

    view = memoryview(payload)
    for i, off in enumerate(range(0, len(view), BLOCK_LEN)):
        (seq,) = struct.unpack_from(BLOCK_HEADER_FMT, view, off)
        if seq != i:
            raise SequenceMismatch(i, seq, index=i, offset=off)
    return _blocks(view)


def _blocks(view: memoryview) -> Iterator[Block]:
    for i, off in enumerate(range(0, len(view), BLOCK_LEN)):
        yield Block(sequence=i, data=bytes(view[off + 4 : off + 4 + BLOCK_DATA_LEN]))


def reassemble(payload: bytes) -> bytes:
    """Return the concatenated block data. Any error aborts with no partial image."""
    return b"".join(block.data for block in iter_blocks(payload))


def block_count(payload: bytes) -> int:
    return len(payload) // BLOCK_LEN
