"""Recorder file read/write.

File format (optionally wrapped in a gzip envelope):
  [interface version: uint64 LE]
  [record 0]
  [record 1]
  ...
  [record N]

Records are packed back-to-back with no framing; their size is fixed by the
record layout the file was written against.
"""

from __future__ import annotations

import gzip
import logging
from pathlib import Path
from typing import Any, BinaryIO, Iterator, TextIO

import numpy as np

from .decoder import Record, RecordDecoder, read_version
from .errors import OpenFailure, VersionMismatch
from .layout import Array, BitWord, FieldType, LeafType, Struct
from .records import FDR_RECORD, INTERFACE_VERSION

logger = logging.getLogger(__name__)

VERSION_FMT = "<u8"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def open_input(path: str | Path, compressed: bool = True) -> BinaryIO:
    """Open a recorder file for reading, decompressing if asked to."""
    try:
        if compressed:
            return gzip.open(path, "rb")
        return open(path, "rb")
    except OSError as e:
        raise OpenFailure(str(path), e.strerror or str(e)) from e


def open_output(path: str | Path) -> TextIO:
    """Create (or truncate) a UTF-8 text file for delimited output."""
    try:
        return open(path, "w", encoding="utf-8", newline="")
    except OSError as e:
        raise OpenFailure(str(path), e.strerror or str(e)) from e


def _check_keys(value: dict[str, Any], names: list[str], where: str) -> None:
    unknown = [k for k in value if k not in names]
    if unknown:
        raise ValueError(f"{where}: unknown field(s) {', '.join(map(repr, unknown))}")


def _to_tuple(t: FieldType, value: Any) -> Any:
    """Convert nested dict/sequence values into numpy assignment form."""
    if isinstance(value, np.void):
        return value.item()
    if isinstance(t, Struct):
        value = value or {}
        _check_keys(value, [f.name for f in t.fields], t.name)
        return tuple(_to_tuple(f.type, value.get(f.name)) for f in t.fields)
    if isinstance(t, Array):
        if value is None:
            value = [None] * t.count
        if len(value) != t.count:
            raise ValueError(f"expected {t.count} elements, got {len(value)}")
        return [_to_tuple(t.element, v) for v in value]
    if isinstance(t, BitWord):
        if isinstance(value, dict):
            _check_keys(value, [b.name for b in t.bits], "bit word")
            raw = 0
            for b in t.bits:
                raw |= (int(value.get(b.name, 0)) & ((1 << b.width) - 1)) << b.start
            return raw
        return int(value or 0)
    if t == LeafType.FLAG:
        return 1 if value else 0
    return 0 if value is None else value


def pack_record(schema: Struct, values: dict[str, Any]) -> bytes:
    """Pack one record; missing fields are written as zero."""
    arr = np.zeros(1, dtype=schema.dtype)
    arr[0] = _to_tuple(schema, values)
    return arr.tobytes()


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------

class FdrWriter:
    """Writes a recorder file: version header, then packed records."""

    def __init__(self, path: str | Path, schema: Struct = FDR_RECORD,
                 version: int = INTERFACE_VERSION, compressed: bool = True):
        self._schema = schema
        self._f: BinaryIO = gzip.open(path, "wb") if compressed else open(path, "wb")
        self._f.write(np.array([version], dtype=VERSION_FMT).tobytes())
        self._bytes = 0

    @property
    def count(self) -> int:
        """Complete records written so far, fragments included."""
        return self._bytes // self._schema.size

    def write_record(self, values: dict[str, Any]) -> None:
        self.write_raw(pack_record(self._schema, values))

    def write_raw(self, data: bytes) -> None:
        """Write pre-packed bytes (whole records, or a deliberate fragment)."""
        self._f.write(data)
        self._bytes += len(data)

    def flush(self) -> None:
        self._f.flush()

    def close(self) -> None:
        self._f.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


# ---------------------------------------------------------------------------
# Reader
# ---------------------------------------------------------------------------

class FdrReader:
    """Reads a recorder file record by record."""

    def __init__(self, path: str | Path, schema: Struct = FDR_RECORD,
                 compressed: bool = True):
        self._path = Path(path)
        self._schema = schema
        self._compressed = compressed
        self._f: BinaryIO | None = None
        self._version: int | None = None

    def open(self) -> int:
        """Open the file and read its interface version."""
        self._f = open_input(self._path, self._compressed)
        try:
            self._version = read_version(self._f)
        except BaseException:
            self.close()
            raise
        return self._version

    @property
    def version(self) -> int:
        if self._version is None:
            raise RuntimeError("Call open() first")
        return self._version

    @property
    def schema(self) -> Struct:
        return self._schema

    def check_version(self, expected: int = INTERFACE_VERSION) -> None:
        if self.version != expected:
            logger.error("interface version %d does not match %d",
                         self.version, expected)
            raise VersionMismatch(expected, self.version)

    def records(self, allow_truncated: bool = False) -> Iterator[Record]:
        if self._f is None:
            self.open()
        assert self._f is not None
        yield from RecordDecoder(self._f, self._schema, allow_truncated)

    def close(self) -> None:
        if self._f:
            self._f.close()
            self._f = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *exc):
        self.close()
