"""UP2 Core - Format constants, tag schemes, data model and errors."""
from .errors import (
    BadLength,
    InvalidEncoding,
    InvalidMagic,
    LayoutError,
    OversizedRecord,
    SequenceMismatch,
    StreamError,
    TruncatedStream,
    Up2Error,
)
from .models import ContainerHeader, Record, RecordHeader, decode_header, decode_record_header
from .tags import CANONICAL_SCHEME, ModuleType, TagScheme

__all__ = [
    "BadLength",
    "CANONICAL_SCHEME",
    "ContainerHeader",
    "InvalidEncoding",
    "InvalidMagic",
    "LayoutError",
    "ModuleType",
    "OversizedRecord",
    "Record",
    "RecordHeader",
    "SequenceMismatch",
    "StreamError",
    "TagScheme",
    "TruncatedStream",
    "Up2Error",
    "decode_header",
    "decode_record_header",
]
