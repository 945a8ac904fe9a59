"""Fixed-layout value reading and record decoding."""

from __future__ import annotations

import gzip
import logging
import zlib
from typing import Any, BinaryIO, Iterator

import numpy as np

from .errors import CorruptInput, ShortRead, Truncated
from .layout import Array, FieldType, Struct, U64, dtype_of, size_of

logger = logging.getLogger(__name__)

# One decoded record: top-level field name -> numpy value
Record = dict[str, Any]


def _read_chunk(stream: BinaryIO, n: int) -> bytes:
    """One read of at most *n* bytes; a cut-off gzip stream reads as EOF."""
    read = getattr(stream, "read1", stream.read)
    try:
        return read(n)
    except EOFError as e:
        # recorder killed before the gzip trailer was written
        logger.warning("compressed stream ended early: %s", e)
        return b""
    except (zlib.error, gzip.BadGzipFile) as e:
        raise CorruptInput(str(e)) from e


def read_exact(stream: BinaryIO, n: int) -> bytes:
    """Read up to *n* bytes, retrying short reads until EOF."""
    buf = bytearray()
    while len(buf) < n:
        chunk = _read_chunk(stream, n - len(buf))
        if not chunk:
            break
        buf.extend(chunk)
    return bytes(buf)


def read_all(stream: BinaryIO, chunk_size: int = 1 << 16) -> bytes:
    """Read to end of data, with the same EOF handling as read_exact."""
    buf = bytearray()
    while True:
        chunk = _read_chunk(stream, chunk_size)
        if not chunk:
            return bytes(buf)
        buf.extend(chunk)


def read_value(stream: BinaryIO, t: FieldType) -> Any:
    """Consume exactly ``size_of(t)`` bytes and reinterpret them as *t*.

    Leaves come back as numpy scalars, structs as ``numpy.void`` and arrays
    as ndarrays.  Raises ShortRead if the stream ends first.
    """
    dt = dtype_of(t)
    buf = read_exact(stream, dt.itemsize)
    if len(buf) < dt.itemsize:
        raise ShortRead(dt.itemsize, len(buf))
    if isinstance(t, Array):
        return np.frombuffer(buf, dtype=dt.base).reshape(dt.shape)
    return np.frombuffer(buf, dtype=dt)[0]


def read_version(stream: BinaryIO) -> int:
    """Read the 8-byte interface version at the start of a stream."""
    return int(read_value(stream, U64))


def read_record(stream: BinaryIO, schema: Struct,
                record_index: int = 0) -> Record | None:
    """Decode one record, field by field in declaration order.

    Returns None when the stream is exhausted exactly at a record boundary.
    A record cut short anywhere else raises Truncated; no partial record is
    ever returned.
    """
    record: Record = {}
    consumed = 0
    for f in schema.fields:
        try:
            value = read_value(stream, f.type)
        except ShortRead as e:
            got = consumed + e.got
            if got == 0:
                return None
            raise Truncated(record_index, schema.size, got) from e
        consumed += size_of(f.type)
        record[f.name] = value
    return record


class RecordDecoder:
    """Iterates the records of a stream positioned just after its version.

    With ``allow_truncated`` a trailing partial record is logged and dropped
    instead of raising Truncated.
    """

    def __init__(self, stream: BinaryIO, schema: Struct,
                 allow_truncated: bool = False):
        self.stream = stream
        self.schema = schema
        self.allow_truncated = allow_truncated
        self.count: int = 0
        self.truncated: Truncated | None = None

    def __iter__(self) -> Iterator[Record]:
        while True:
            try:
                record = read_record(self.stream, self.schema, self.count)
            except Truncated as e:
                if not self.allow_truncated:
                    raise
                logger.warning("%s; ignoring trailing bytes", e)
                self.truncated = e
                return
            if record is None:
                return
            self.count += 1
            yield record
