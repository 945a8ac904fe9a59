"""Flatten nested record layouts into named columns and text rows.

Header names and row values come from the same precomputed column list, so
every row has exactly one token per header column.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping, Union

import numpy as np

from .errors import HeaderGenerationFailure
from .layout import (
    SEPARATOR, Array, BitDef, BitWord, FieldType, LeafType, Struct,
)

Key = Union[str, int]


def _render_flag(value: Any) -> str:
    return "true" if value else "false"


def _render_int(value: Any) -> str:
    return str(int(value))


# magnitudes outside this range switch to exponent form, as repr() does
_POSITIONAL_MIN = 1e-4
_POSITIONAL_MAX = 1e16


def _render_float(value: Any) -> str:
    # shortest repr for the stored width
    magnitude = abs(float(value))
    if np.isfinite(magnitude) and magnitude != 0.0 and \
            not _POSITIONAL_MIN <= magnitude < _POSITIONAL_MAX:
        return np.format_float_scientific(value, unique=True, trim="-")
    return np.format_float_positional(value, unique=True, trim="0")


_FLOATS = (LeafType.F32, LeafType.F64)


def _renderer(t: LeafType) -> Callable[[Any], str]:
    if t == LeafType.FLAG:
        return _render_flag
    if t in _FLOATS:
        return _render_float
    return _render_int


@dataclass(frozen=True)
class Column:
    """One leaf of the layout: its column name and how to reach it."""

    name: str
    path: tuple[Key, ...]
    render: Callable[[Any], str]
    bit: BitDef | None = None

    def get(self, record: Mapping[str, Any]) -> Any:
        """Raw leaf value from a decoded record (dict or numpy.void)."""
        value: Any = record
        for key in self.path:
            value = value[key]
        if self.bit is not None:
            value = (int(value) >> self.bit.start) & ((1 << self.bit.width) - 1)
        return value

    def text(self, record: Mapping[str, Any]) -> str:
        return self.render(self.get(record))

    def series(self, records: np.ndarray) -> np.ndarray:
        """Leaf values across a structured array of records."""
        values = records
        for key in self.path:
            if isinstance(key, int):
                values = values[:, key]
            else:
                values = values[key]
        if self.bit is not None:
            values = (values >> self.bit.start) & ((1 << self.bit.width) - 1)
        return values


def _walk(t: FieldType, names: tuple[str, ...], path: tuple[Key, ...],
          sep: str) -> Iterator[Column]:
    """Depth-first pre-order traversal in declaration order."""
    if isinstance(t, LeafType):
        yield Column(sep.join(names), path, _renderer(t))
    elif isinstance(t, Struct):
        for f in t.fields:
            yield from _walk(f.type, names + (f.name,), path + (f.name,), sep)
    elif isinstance(t, Array):
        for i in range(t.count):
            yield from _walk(t.element, names + (str(i),), path + (i,), sep)
    elif isinstance(t, BitWord):
        for b in t.bits:
            yield Column(sep.join(names + (b.name,)), path, _render_int, b)
    else:
        raise HeaderGenerationFailure(
            f"{sep.join(names) or '<root>'}: cannot flatten {t!r}")


def columns_of(schema: Struct, separator: str = SEPARATOR) -> list[Column]:
    columns = list(_walk(schema, (), (), separator))
    seen: set[str] = set()
    for c in columns:
        if c.name in seen:
            raise HeaderGenerationFailure(f"duplicate column name {c.name!r}")
        seen.add(c.name)
    return columns


class Flattener:
    """Column names and row tokens for one record layout."""

    def __init__(self, schema: Struct, separator: str = SEPARATOR):
        self.schema = schema
        self.separator = separator
        self.columns = columns_of(schema, separator)
        self._by_name = {c.name: c for c in self.columns}

    def __len__(self) -> int:
        return len(self.columns)

    def header(self) -> list[str]:
        return [c.name for c in self.columns]

    def row(self, record: Mapping[str, Any]) -> list[str]:
        return [c.text(record) for c in self.columns]

    def column(self, name: str) -> Column:
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"no column named {name!r}") from None
