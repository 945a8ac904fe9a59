"""Whole-file numpy access to recorder data.

Capture loads every complete record of a file into one structured array so
single columns can be pulled out as typed numpy series without going
through text.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from .decoder import read_all, read_version
from .errors import Truncated, VersionMismatch
from .flatten import Flattener
from .layout import Struct
from .records import FDR_RECORD, INTERFACE_VERSION
from .storage import open_input

logger = logging.getLogger(__name__)

__all__ = ["Capture"]


class Capture:
    def __init__(self, path: str | Path, schema: Struct = FDR_RECORD,
                 compressed: bool = True,
                 expected_version: int = INTERFACE_VERSION,
                 allow_truncated: bool = False):
        self.schema = schema
        with open_input(path, compressed) as f:
            self.version = read_version(f)
            if self.version != expected_version:
                raise VersionMismatch(expected_version, self.version)
            body = read_all(f)

        count, rem = divmod(len(body), schema.size)
        if rem:
            err = Truncated(count, schema.size, rem)
            if not allow_truncated:
                raise err
            logger.warning("%s; ignoring trailing bytes", err)

        if count:
            self.records = np.frombuffer(body, dtype=schema.dtype, count=count)
        else:
            self.records = np.zeros(0, dtype=schema.dtype)
        self._flattener = Flattener(schema)

    def __len__(self) -> int:
        return len(self.records)

    def columns(self) -> list[str]:
        return self._flattener.header()

    def series(self, column: str) -> np.ndarray:
        """All values of one flattened column, in record order."""
        return self._flattener.column(column).series(self.records)
