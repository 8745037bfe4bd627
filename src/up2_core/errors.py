"""UP2 decode errors.

Stream errors end decoding of the whole container. Layout errors are scoped to
one record (or one firmware block) and carry enough context to find the bytes.
"""
from __future__ import annotations

ERRORS = {
    "E_INVALID_MAGIC": "Container header magic is not 'SMA:' (found 0x{actual:08x})",
    "E_TRUNCATED": "Truncated {what}: expected {expected} bytes, got {actual}",
    "E_OVERSIZED": "Record body size {length} exceeds limit {limit}",
    "E_BAD_LENGTH": "Bad {what} length: expected {bound}{expected}, got {actual}",
    "E_INVALID_ENCODING": "Invalid UTF-8 in {what}: {reason}",
    "E_SEQUENCE": "Block sequence mismatch: expected {expected}, got {actual}",
}


class Up2Error(ValueError):
    code = "E_UP2"

    def __init__(self, detail: str, *, offset: int | None = None, index: int | None = None):
        self.detail = detail
        self.offset = offset
        self.index = index
        self.header = None
        super().__init__(detail)

    def locate(self, *, offset: int | None = None, index: int | None = None, header=None) -> "Up2Error":
        """Attach position context and return self (for `raise err.locate(...)`)."""
        if offset is not None:
            self.offset = offset
        if index is not None:
            self.index = index
        if header is not None:
            self.header = header
        return self

    def __str__(self) -> str:
        where = []
        if self.index is not None:
            where.append(f"{self._unit} {self.index}")
        if self.offset is not None:
            where.append(f"offset {self.offset}")
        prefix = f"{', '.join(where)}: " if where else ""
        return f"{prefix}{self.detail}"

    _unit = "record"


class StreamError(Up2Error):
    """Unrecoverable for the container; no later record can be trusted."""


class LayoutError(Up2Error):
    """Scoped to a single record body or firmware block."""


class InvalidMagic(StreamError):
    code = "E_INVALID_MAGIC"

    def __init__(self, actual: int, **kw):
        self.actual = actual
        super().__init__(ERRORS[self.code].format(actual=actual), **kw)


class TruncatedStream(StreamError):
    code = "E_TRUNCATED"

    def __init__(self, what: str, expected: int, actual: int, **kw):
        self.what = what
        self.expected = expected
        self.actual = actual
        super().__init__(ERRORS[self.code].format(what=what, expected=expected, actual=actual), **kw)


class OversizedRecord(StreamError):
    code = "E_OVERSIZED"

    def __init__(self, length: int, limit: int, **kw):
        self.length = length
        self.limit = limit
        super().__init__(ERRORS[self.code].format(length=length, limit=limit), **kw)


class BadLength(LayoutError):
    code = "E_BAD_LENGTH"

    def __init__(self, what: str, expected: int, actual: int, *, exact: bool = True, **kw):
        self.what = what
        self.expected = expected
        self.actual = actual
        self.exact = exact
        bound = "" if exact else "at least "
        super().__init__(ERRORS[self.code].format(what=what, bound=bound, expected=expected, actual=actual), **kw)


class InvalidEncoding(LayoutError):
    code = "E_INVALID_ENCODING"

    def __init__(self, what: str, reason: str, **kw):
        self.what = what
        self.reason = reason
        super().__init__(ERRORS[self.code].format(what=what, reason=reason), **kw)


class SequenceMismatch(LayoutError):
    code = "E_SEQUENCE"
    _unit = "block"

    def __init__(self, expected: int, actual: int, **kw):
        self.expected = expected
        self.actual = actual
        super().__init__(ERRORS[self.code].format(expected=expected, actual=actual), **kw)
