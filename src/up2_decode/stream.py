"""Streaming record decoder for UP2 containers."""
from __future__ import annotations

import io
from typing import BinaryIO, Iterator

from up2_core.errors import LayoutError, OversizedRecord, TruncatedStream
from up2_core.models import Record, Up2File, decode_header, decode_record_header
from up2_core.protocol import CONTAINER_HEADER_LEN, DEFAULT_MAX_BODY_SIZE, RECORD_HEADER_LEN
from up2_core.tags import CANONICAL_SCHEME, TagScheme

from .bodies import decode_body


class Up2Decoder:
    """Forward-only record iterator over a UP2 byte source.

    The container header is read and validated on construction. Each
    ``next()`` frames one record. Layout errors are raised for that record
    only; the stream has already advanced past it, so calling ``next()``
    again continues with the following record. Stream errors end iteration.
    """

    def __init__(
        self,
        source: BinaryIO,
        scheme: TagScheme = CANONICAL_SCHEME,
        max_body_size: int | None = DEFAULT_MAX_BODY_SIZE,
    ):
        self.source = source
        self.scheme = scheme
        self.max_body_size = max_body_size
        self.offset = 0
        self.index = 0
        self._done = False

        self.header = decode_header(self._read_exact(CONTAINER_HEADER_LEN, "container header"))

    def _read_exact(self, size: int, what: str, *, index: int | None = None, eof_ok: bool = False) -> bytes | None:
        start = self.offset
        chunks = []
        got = 0
        # Raw sockets and pipes may return short reads before EOF.
        while got < size:
            chunk = self.source.read(size - got)
            if not chunk:
                break
            chunks.append(chunk)
            got += len(chunk)
        self.offset += got

        if got == 0 and eof_ok:
            return None
        if got < size:
            self._done = True
            raise TruncatedStream(what, size, got, offset=start, index=index)
        return b"".join(chunks)

    def __iter__(self) -> "Up2Decoder":
        return self

    def __next__(self) -> Record:
        if self._done:
            raise StopIteration

        start = self.offset
        raw = self._read_exact(RECORD_HEADER_LEN, "record header", index=self.index, eof_ok=True)

        # Clean EOF
        if raw is None:
            self._done = True
            raise StopIteration

        header = decode_record_header(raw)
        index = self.index

        # Bound allocation before trusting the declared length
        if self.max_body_size is not None and header.body_length > self.max_body_size:
            self._done = True
            err = OversizedRecord(header.body_length, self.max_body_size, offset=start, index=index)
            raise err.locate(header=header)

        try:
            body = self._read_exact(header.body_length, "record body", index=index)
        except TruncatedStream as e:
            raise e.locate(header=header)
        self.index += 1

        module_type = self.scheme.resolve(header.type_tag)
        try:
            content = decode_body(module_type, body)
        except LayoutError as e:
            raise e.locate(offset=start, index=index, header=header)

        return Record(header=header, module_type=module_type, content=content, offset=start, index=index)

    def results(self) -> Iterator[Record | LayoutError]:
        """Yield every record in order, with layout errors yielded in place of bad records."""
        while True:
            try:
                yield next(self)
            except StopIteration:
                return
            except LayoutError as e:
                yield e

    @property
    def exhausted(self) -> bool:
        return self._done


def parse_up2(data: bytes, scheme: TagScheme = CANONICAL_SCHEME) -> Up2File:
    """Decode a whole in-memory container, raising on the first error."""
    decoder = Up2Decoder(io.BytesIO(data), scheme=scheme, max_body_size=None)
    return Up2File(header=decoder.header, records=list(decoder))
