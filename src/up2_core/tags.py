"""Record type tags and the numbering schemes that map them."""
from __future__ import annotations

import enum
from typing import Mapping

from . import protocol as p


class ModuleType(enum.Enum):
    LEVEL_START = "level_start"
    LEVEL_END = "level_end"
    PAUSE = "pause"
    LOOP_START = "loop_start"
    LOOP_END = "loop_end"
    FIRMWARE_VERSION = "firmware_version"
    TEXT = "text"
    LOGIN = "login"
    FW_CHECK = "fw_check"
    COND_CHECK = "cond_check"
    FIRMWARE = "firmware"
    LOGOUT = "logout"
    UP_FMT10 = "up_fmt10"
    UNKNOWN = "unknown"


class TagScheme:
    """Exact tag value -> ModuleType table for one format revision.

    Nothing in a container says which numbering it uses, so the scheme is
    chosen by the caller. Tags absent from the table resolve to UNKNOWN.
    """

    def __init__(self, name: str, tags: Mapping[ModuleType, int]):
        if ModuleType.UNKNOWN in tags:
            raise ValueError("UNKNOWN is the catch-all and cannot be assigned a tag")
        by_tag: dict[int, ModuleType] = {}
        for module_type, tag in tags.items():
            tag = int(tag)
            if not 0 <= tag <= 0xFFFFFFFF:
                raise ValueError(f"Tag {tag} for {module_type.name} is not a u32")
            if tag in by_tag:
                raise ValueError(
                    f"Tag 0x{tag:x} assigned to both {by_tag[tag].name} and {module_type.name}"
                )
            by_tag[tag] = module_type
        self.name = name
        self._by_tag = by_tag
        self._by_type = {mt: tag for tag, mt in by_tag.items()}

    @classmethod
    def from_names(cls, name: str, tags: Mapping[str, int]) -> "TagScheme":
        """Build a scheme from {"TEXT": 4097, ...} as loaded from JSON."""
        try:
            resolved = {ModuleType[key.upper()]: value for key, value in tags.items()}
        except KeyError as e:
            raise ValueError(f"Unknown module type name {e.args[0]!r}") from None
        return cls(name, resolved)

    def resolve(self, tag: int) -> ModuleType:
        return self._by_tag.get(tag, ModuleType.UNKNOWN)

    def tag_for(self, module_type: ModuleType) -> int | None:
        return self._by_type.get(module_type)

    def __repr__(self) -> str:
        return f"TagScheme({self.name!r}, {len(self._by_tag)} tags)"


CANONICAL_SCHEME = TagScheme(
    "canonical",
    {
        ModuleType.LEVEL_START: p.TAG_LEVEL_START,
        ModuleType.LEVEL_END: p.TAG_LEVEL_END,
        ModuleType.PAUSE: p.TAG_PAUSE,
        ModuleType.LOOP_START: p.TAG_LOOP_START,
        ModuleType.LOOP_END: p.TAG_LOOP_END,
        ModuleType.FIRMWARE_VERSION: p.TAG_FIRMWARE_VERSION,
        ModuleType.TEXT: p.TAG_TEXT,
        ModuleType.LOGIN: p.TAG_LOGIN,
        ModuleType.FW_CHECK: p.TAG_FW_CHECK,
        ModuleType.COND_CHECK: p.TAG_COND_CHECK,
        ModuleType.FIRMWARE: p.TAG_FIRMWARE,
        ModuleType.LOGOUT: p.TAG_LOGOUT,
        ModuleType.UP_FMT10: p.TAG_UP_FMT10,
    },
)
