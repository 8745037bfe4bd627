"""Body decoders, one per ModuleType.

Each decoder takes the raw body (record header already stripped) and returns a
content dataclass or raises a LayoutError. Decoders are pure; they never look
at other records or at RecordHeader fields.
"""
from __future__ import annotations

import struct
from typing import Callable

from up2_core import models as m
from up2_core.errors import BadLength, InvalidEncoding
from up2_core.protocol import (
    COND_CHECK_TRAILER_FMT,
    DELAY_FMT,
    FIRMWARE_TRAILER_FMT,
    FIRMWARE_VERSION_FMT,
    FW_CHECK_TRAILER_FMT,
    LABEL_FMT,
    LOGIN_TRAILER_FMT,
    LOGOUT_TRAILER_FMT,
    LOOP_END_FMT,
    command_fmt,
)
from up2_core.tags import ModuleType

BodyDecoder = Callable[[bytes], "m.RecordContent"]


def _require_length(body: bytes, expected: int, what: str) -> None:
    if len(body) != expected:
        raise BadLength(what, expected, len(body))


def _utf8(raw: bytes, what: str) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidEncoding(what, f"{e.reason} at byte {e.start}") from e


def _fixed(fmt: str, cls, what: str) -> BodyDecoder:
    size = struct.calcsize(fmt)

    def decode(body: bytes):
        _require_length(body, size, what)
        return cls(*struct.unpack(fmt, body))

    decode.__name__ = f"decode_{what.replace(' ', '_')}"
    return decode


def unpack_command(body: bytes, trailer_fmt: str, what: str, *, variable: bool = False):
    """Unpack envelope + trailing fields.

    Returns (fields, rest). Fixed layouts must match exactly; with
    variable=True the layout is a minimum and `rest` holds the remainder.
    """
    fmt = command_fmt(trailer_fmt)
    size = struct.calcsize(fmt)
    if variable:
        if len(body) < size:
            raise BadLength(what, size, len(body), exact=False)
    else:
        _require_length(body, size, what)
    return struct.unpack_from(fmt, body), body[size:]


decode_level_start = _fixed(LABEL_FMT, m.LevelStart, "level start")
decode_level_end = _fixed(LABEL_FMT, m.LevelEnd, "level end")
decode_pause = _fixed(DELAY_FMT, m.Pause, "pause")
decode_loop_start = _fixed(LABEL_FMT, m.LoopStart, "loop start")
decode_loop_end = _fixed(LOOP_END_FMT, m.LoopEnd, "loop end")
decode_firmware_version = _fixed(FIRMWARE_VERSION_FMT, m.FirmwareVersion, "firmware version")


def decode_text(body: bytes) -> m.Text:
    return m.Text(_utf8(body, "text"))


def decode_login(body: bytes) -> m.Login:
    fields, _ = unpack_command(body, LOGIN_TRAILER_FMT, "login")
    *head, password, mode = fields
    return m.Login(*head, _utf8(password, "login password"), mode)


def decode_fw_check(body: bytes) -> m.FwCheck:
    fields, _ = unpack_command(body, FW_CHECK_TRAILER_FMT, "firmware check")
    return m.FwCheck(*fields)


def decode_cond_check(body: bytes) -> m.CondCheck:
    fields, _ = unpack_command(body, COND_CHECK_TRAILER_FMT, "condition check")
    return m.CondCheck(*fields)


def decode_firmware(body: bytes) -> m.Firmware:
    fields, payload = unpack_command(body, FIRMWARE_TRAILER_FMT, "firmware", variable=True)
    return m.Firmware(*fields, data=bytes(payload))


def decode_logout(body: bytes) -> m.Logout:
    fields, _ = unpack_command(body, LOGOUT_TRAILER_FMT, "logout")
    return m.Logout(*fields)


def decode_up_fmt10(body: bytes) -> m.UpFmt10:
    return m.UpFmt10(bytes(body))


def decode_unknown(body: bytes) -> m.Unknown:
    return m.Unknown(bytes(body))


DECODERS: dict[ModuleType, BodyDecoder] = {
    ModuleType.LEVEL_START: decode_level_start,
    ModuleType.LEVEL_END: decode_level_end,
    ModuleType.PAUSE: decode_pause,
    ModuleType.LOOP_START: decode_loop_start,
    ModuleType.LOOP_END: decode_loop_end,
    ModuleType.FIRMWARE_VERSION: decode_firmware_version,
    ModuleType.TEXT: decode_text,
    ModuleType.LOGIN: decode_login,
    ModuleType.FW_CHECK: decode_fw_check,
    ModuleType.COND_CHECK: decode_cond_check,
    ModuleType.FIRMWARE: decode_firmware,
    ModuleType.LOGOUT: decode_logout,
    ModuleType.UP_FMT10: decode_up_fmt10,
    ModuleType.UNKNOWN: decode_unknown,
}


def decode_body(module_type: ModuleType, body: bytes) -> m.RecordContent:
    return DECODERS[module_type](body)
