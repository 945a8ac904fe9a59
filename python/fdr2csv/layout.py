"""Fixed-layout type declarations for recorder records.

A record is declared as a tree: ``Struct`` nodes hold ordered, named fields,
``Array`` repeats one type a fixed number of times, ``BitWord`` splits an
unsigned storage word into named bit ranges and leaves are ``LeafType``
members.  Every node maps onto a packed little-endian numpy dtype, so the
byte size of a declaration is known before any data is read.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence, Tuple, Union

import numpy as np

from .errors import HeaderGenerationFailure

# Joins field names into a column path
SEPARATOR = "."


class LeafType(IntEnum):
    U8 = 0
    U16 = 1
    U32 = 2
    U64 = 3
    I8 = 4
    I16 = 5
    I32 = 6
    I64 = 7
    F32 = 8
    F64 = 9
    FLAG = 10  # one byte, non-zero means set


# numpy dtype strings indexed by LeafType (packed, little-endian)
_TYPE_FMT = {
    LeafType.U8: "u1",
    LeafType.U16: "<u2",
    LeafType.U32: "<u4",
    LeafType.U64: "<u8",
    LeafType.I8: "i1",
    LeafType.I16: "<i2",
    LeafType.I32: "<i4",
    LeafType.I64: "<i8",
    LeafType.F32: "<f4",
    LeafType.F64: "<f8",
    LeafType.FLAG: "u1",
}

_UNSIGNED = (LeafType.U8, LeafType.U16, LeafType.U32, LeafType.U64)

U8 = LeafType.U8
U16 = LeafType.U16
U32 = LeafType.U32
U64 = LeafType.U64
I8 = LeafType.I8
I16 = LeafType.I16
I32 = LeafType.I32
I64 = LeafType.I64
F32 = LeafType.F32
F64 = LeafType.F64
FLAG = LeafType.FLAG


def _check_name(name: str, where: str) -> None:
    if not isinstance(name, str) or not name:
        raise HeaderGenerationFailure(f"{where}: field name must be a non-empty string")
    if SEPARATOR in name:
        raise HeaderGenerationFailure(
            f"{where}: field name {name!r} contains separator {SEPARATOR!r}")


def _check_unique(names: Sequence[str], where: str) -> None:
    seen: set[str] = set()
    for name in names:
        _check_name(name, where)
        if name in seen:
            raise HeaderGenerationFailure(f"{where}: duplicate field name {name!r}")
        seen.add(name)


@dataclass(frozen=True)
class BitDef:
    name: str
    start: int = 0
    width: int = 1


@dataclass(frozen=True)
class BitWord:
    """Unsigned discrete word flattened into one column per bit range."""

    storage: LeafType
    bits: Tuple[BitDef, ...]

    def __post_init__(self):
        object.__setattr__(self, "bits", tuple(self.bits))
        if self.storage not in _UNSIGNED:
            raise HeaderGenerationFailure(
                f"bit word storage must be unsigned, got {self.storage.name}")
        if not self.bits:
            raise HeaderGenerationFailure("bit word declares no bits")
        _check_unique([b.name for b in self.bits], "bit word")
        nbits = np.dtype(_TYPE_FMT[self.storage]).itemsize * 8
        for b in self.bits:
            if b.width < 1 or b.start < 0 or b.start + b.width > nbits:
                raise HeaderGenerationFailure(
                    f"bit {b.name!r} ({b.start}+{b.width}) does not fit "
                    f"in a {nbits}-bit word")


@dataclass(frozen=True)
class Array:
    element: "FieldType"
    count: int

    def __post_init__(self):
        if self.count < 1:
            raise HeaderGenerationFailure(f"array count must be >= 1, got {self.count}")


@dataclass(frozen=True)
class Field:
    name: str
    type: "FieldType"


class Struct:
    """Ordered composite of named fields, packed with no padding."""

    def __init__(self, name: str, fields: Sequence[Field | tuple[str, FieldType]]):
        self.name = name
        self.fields: list[Field] = [
            f if isinstance(f, Field) else Field(*f) for f in fields]
        if not self.fields:
            raise HeaderGenerationFailure(f"struct {name!r} declares no fields")
        _check_unique([f.name for f in self.fields], f"struct {name!r}")
        self._dtype = np.dtype([(f.name, dtype_of(f.type)) for f in self.fields])

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def size(self) -> int:
        return self._dtype.itemsize

    def __repr__(self) -> str:
        return f"Struct({self.name!r}, {len(self.fields)} fields, {self.size} bytes)"


FieldType = Union[LeafType, Struct, Array, BitWord]


def dtype_of(t: FieldType) -> np.dtype:
    """Packed numpy dtype for a declared type."""
    if isinstance(t, LeafType):
        return np.dtype(_TYPE_FMT[t])
    if isinstance(t, Struct):
        return t.dtype
    if isinstance(t, Array):
        return np.dtype((dtype_of(t.element), (t.count,)))
    if isinstance(t, BitWord):
        return np.dtype(_TYPE_FMT[t.storage])
    raise TypeError(f"not a layout type: {t!r}")


def size_of(t: FieldType) -> int:
    return dtype_of(t).itemsize


def type_name(t: FieldType) -> str:
    if isinstance(t, LeafType):
        return t.name
    if isinstance(t, Struct):
        return t.name
    if isinstance(t, Array):
        return f"{type_name(t.element)}[{t.count}]"
    return f"bits<{t.storage.name}>"
