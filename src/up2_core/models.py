"""UP2 data model: container/record headers and decoded record bodies."""
from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Union

from .errors import InvalidMagic, TruncatedStream
from .protocol import (
    CONTAINER_HEADER_FMT,
    CONTAINER_HEADER_LEN,
    MAGIC_CONTAINER,
    RECORD_HEADER_FMT,
    RECORD_HEADER_LEN,
)
from .tags import ModuleType


@dataclass(frozen=True)
class ContainerHeader:
    magic: int
    major: int
    minor: int
    build: int
    revision: int

    @property
    def version(self) -> str:
        return f"{self.major}.{self.minor}.{self.build}.{self.revision}"


@dataclass(frozen=True)
class RecordHeader:
    checksum: int  # opaque, never verified here
    type_tag: int
    system_id: int
    body_length: int


def decode_header(data: bytes) -> ContainerHeader:
    """Decode the 8-byte container prologue. Magic is checked, versions are not."""
    if len(data) < CONTAINER_HEADER_LEN:
        raise TruncatedStream("container header", CONTAINER_HEADER_LEN, len(data), offset=0)
    magic, major, minor, build, rev = struct.unpack_from(CONTAINER_HEADER_FMT, data)
    if magic != MAGIC_CONTAINER:
        raise InvalidMagic(magic, offset=0)
    return ContainerHeader(magic, major, minor, build, rev)


def decode_record_header(data: bytes) -> RecordHeader:
    if len(data) < RECORD_HEADER_LEN:
        raise TruncatedStream("record header", RECORD_HEADER_LEN, len(data))
    return RecordHeader(*struct.unpack_from(RECORD_HEADER_FMT, data))


# --- Record bodies -----------------------------------------------------------

@dataclass(frozen=True)
class LevelStart:
    label: int


@dataclass(frozen=True)
class LevelEnd:
    label: int


@dataclass(frozen=True)
class Pause:
    delay: int


@dataclass(frozen=True)
class LoopStart:
    label: int


@dataclass(frozen=True)
class LoopEnd:
    label: int
    loops: int


@dataclass(frozen=True)
class FirmwareVersion:
    major: int
    minor: int
    build: int
    revision: int


@dataclass(frozen=True)
class Text:
    data: str


@dataclass(frozen=True)
class CommandEnvelope:
    """28-byte addressing prefix shared by the command records."""

    ctrl: int
    dst_susy: int
    dst_ser: int
    dst_dev: int
    dst_fkt: int
    src_susy: int
    src_ser: int
    src_dev: int
    src_fkt: int
    cmd: int
    pcnt: int
    obj_num: int
    dat_len: int  # independent of RecordHeader.body_length
    p0: int


@dataclass(frozen=True)
class Login(CommandEnvelope):
    p1: int
    p2: int
    p3: int
    password: str
    mode: int


@dataclass(frozen=True)
class FwCheck(CommandEnvelope):
    blk_first: int
    blk_last: int
    cond_cnt: int
    crc: int
    adler32: int
    md4: bytes


@dataclass(frozen=True)
class CondCheck(CommandEnvelope):
    obj_nr: int
    rec_dw_first: int
    idx_first: int
    bitmask: int
    lo_bound: int
    hi_bound: int
    no_obj: int
    dat_valid: int
    res_1: int
    res_2: int


@dataclass(frozen=True)
class Firmware(CommandEnvelope):
    delay: int
    data: bytes = field(repr=False)


@dataclass(frozen=True)
class Logout(CommandEnvelope):
    pass


@dataclass(frozen=True)
class UpFmt10:
    data: bytes


@dataclass(frozen=True)
class Unknown:
    data: bytes


RecordContent = Union[
    LevelStart,
    LevelEnd,
    Pause,
    LoopStart,
    LoopEnd,
    FirmwareVersion,
    Text,
    Login,
    FwCheck,
    CondCheck,
    Firmware,
    Logout,
    UpFmt10,
    Unknown,
]


@dataclass(frozen=True)
class Record:
    header: RecordHeader
    module_type: ModuleType
    content: RecordContent
    offset: int  # of the record header, from the start of the container
    index: int

    @property
    def length(self) -> int:
        return RECORD_HEADER_LEN + self.header.body_length


@dataclass(frozen=True)
class Block:
    sequence: int
    data: bytes


@dataclass(frozen=True)
class Up2File:
    header: ContainerHeader
    records: list[Record]
