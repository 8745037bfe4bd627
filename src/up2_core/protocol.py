"""UP2 container format constants.

Single source of truth for on-disk magic values, tag numbers and record layouts.
All integers are little-endian.
"""
import struct

# Container header: [Magic(4) | Major(1) | Minor(1) | Build(1) | Rev(1)] = 8 bytes
MAGIC_CONTAINER = 0x3A414D53  # b"SMA:" read little-endian
CONTAINER_HEADER_FMT = "<IBBBB"
CONTAINER_HEADER_LEN = 8

# Record header: [Checksum(4) | Type(4) | SusyID(4) | Length(4)] = 16 bytes
RECORD_HEADER_FMT = "<IIII"
RECORD_HEADER_LEN = 16

# Canonical tag numbers (later format revision)
TAG_LEVEL_START = 0x0000
TAG_LEVEL_END = 0x0001
TAG_PAUSE = 0x0002
TAG_LOOP_START = 0x0003
TAG_LOOP_END = 0x0004
TAG_FIRMWARE_VERSION = 0x1000
TAG_TEXT = 0x1001
TAG_LOGIN = 0x2000
TAG_FW_CHECK = 0x2001
TAG_COND_CHECK = 0x2002
TAG_FIRMWARE = 0x2003
TAG_LOGOUT = 0x2004
TAG_UP_FMT10 = 0x3000

# Simple bodies
LABEL_FMT = "<I"  # LevelStart, LevelEnd, LoopStart
DELAY_FMT = "<I"  # Pause
LOOP_END_FMT = "<II"
FIRMWARE_VERSION_FMT = "<BBBB"

# Command envelope shared by Login, FwCheck, CondCheck, Firmware, Logout:
# ctrl, dst_susy, dst_ser, dst_dev, dst_fkt, src_susy, src_ser, src_dev,
# src_fkt, cmd, pcnt, obj_num, dat_len, p0
ENVELOPE_FMT = "<HHIBBHIBBBBHHI"
ENVELOPE_LEN = 28

# Trailing fields appended to the envelope
LOGIN_TRAILER_FMT = "<III12sI"  # p1, p2, p3, password, mode
FW_CHECK_TRAILER_FMT = "<IIHHI16s"  # blk_first, blk_last, cond_cnt, crc, adler32, md4
COND_CHECK_TRAILER_FMT = "<HHIIIIBBBB"  # obj_nr .. res_2
FIRMWARE_TRAILER_FMT = "<I"  # delay, followed by the opaque payload
LOGOUT_TRAILER_FMT = "<"

LOGIN_LEN = 56
FW_CHECK_LEN = 60
COND_CHECK_LEN = 52
FIRMWARE_MIN_LEN = 32
LOGOUT_LEN = 28

# Firmware payload sub-framing: [Sequence(4) | Data(128)] = 132 bytes
BLOCK_HEADER_FMT = "<I"
BLOCK_DATA_LEN = 128
BLOCK_LEN = 4 + BLOCK_DATA_LEN

# Default safety bounds
DEFAULT_MAX_BODY_SIZE = 256 * 1024 * 1024  # 256 MiB per record body


def command_fmt(trailer_fmt: str) -> str:
    """Join the shared envelope with a variant's trailing fields."""
    return ENVELOPE_FMT + trailer_fmt.lstrip("<")


# Layout sizes are format constants; fail at import if a format drifts.
assert struct.calcsize(CONTAINER_HEADER_FMT) == CONTAINER_HEADER_LEN
assert struct.calcsize(RECORD_HEADER_FMT) == RECORD_HEADER_LEN
assert struct.calcsize(ENVELOPE_FMT) == ENVELOPE_LEN
assert struct.calcsize(command_fmt(LOGIN_TRAILER_FMT)) == LOGIN_LEN
assert struct.calcsize(command_fmt(FW_CHECK_TRAILER_FMT)) == FW_CHECK_LEN
assert struct.calcsize(command_fmt(COND_CHECK_TRAILER_FMT)) == COND_CHECK_LEN
assert struct.calcsize(command_fmt(FIRMWARE_TRAILER_FMT)) == FIRMWARE_MIN_LEN
assert struct.calcsize(command_fmt(LOGOUT_TRAILER_FMT)) == LOGOUT_LEN
