"""Recorder stream to delimited text conversion.

A run moves through AWAITING_VERSION -> STREAMING -> DONE.  Any error moves
it to FAILED and is re-raised unchanged; nothing is retried.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import BinaryIO, Callable, TextIO

from .decoder import RecordDecoder, read_version
from .errors import Truncated, VersionMismatch, WriteFailure
from .flatten import Flattener
from .layout import Struct
from .records import FDR_RECORD, INTERFACE_VERSION
from .storage import open_input, open_output

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 1000


class State(IntEnum):
    AWAITING_VERSION = 0
    STREAMING = 1
    DONE = 2
    FAILED = 3


@dataclass
class ConversionResult:
    state: State
    version: int
    count: int
    truncated: Truncated | None = None


class Converter:
    """Drives one conversion of a recorder stream into delimited rows.

    The header is generated up front so a layout that cannot be flattened
    fails before anything is written.  ``progress`` is called with the
    running record count every PROGRESS_INTERVAL records.
    """

    def __init__(self, schema: Struct = FDR_RECORD,
                 expected_version: int = INTERFACE_VERSION,
                 delimiter: str = ",",
                 allow_truncated: bool = False,
                 progress: Callable[[int], None] | None = None):
        if not isinstance(delimiter, str) or len(delimiter) != 1:
            raise ValueError(f"delimiter must be a single character, got {delimiter!r}")
        self.schema = schema
        self.expected_version = expected_version
        self.delimiter = delimiter
        self.allow_truncated = allow_truncated
        self.progress = progress
        self.flattener = Flattener(schema)
        self.state = State.AWAITING_VERSION
        self.version: int | None = None
        self.count = 0

    def check_version(self, source: BinaryIO) -> int:
        """Read and validate the stream's interface version."""
        if self.state != State.AWAITING_VERSION:
            raise RuntimeError(f"version already read (state {self.state.name})")
        try:
            self.version = read_version(source)
            if self.version != self.expected_version:
                logger.error("interface version %d does not match %d",
                             self.version, self.expected_version)
                raise VersionMismatch(self.expected_version, self.version)
        except BaseException:
            self.state = State.FAILED
            raise
        self.state = State.STREAMING
        return self.version

    def stream(self, source: BinaryIO, sink: TextIO) -> ConversionResult:
        """Write the header, then one row per record until end of stream."""
        if self.state != State.STREAMING:
            raise RuntimeError(f"cannot stream in state {self.state.name}")
        assert self.version is not None

        writer = csv.writer(sink, delimiter=self.delimiter, lineterminator="\n")
        decoder = RecordDecoder(source, self.schema, self.allow_truncated)
        try:
            self._write(writer, self.flattener.header())
            for record in decoder:
                self._write(writer, self.flattener.row(record))
                self.count += 1
                if self.progress and self.count % PROGRESS_INTERVAL == 0:
                    self.progress(self.count)
        except BaseException:
            self.state = State.FAILED
            raise

        self.state = State.DONE
        logger.info("converted %d records", self.count)
        return ConversionResult(self.state, self.version, self.count,
                                decoder.truncated)

    def run_file(self, input_path: str | Path, output_path: str | Path,
                 compressed: bool = True,
                 on_start: Callable[[int], None] | None = None) -> ConversionResult:
        """Convert a recorder file; the output is only created once the version matches."""
        with open_input(input_path, compressed) as source:
            version = self.check_version(source)
            if on_start:
                on_start(version)
            try:
                sink = open_output(output_path)
            except BaseException:
                self.state = State.FAILED
                raise
            with sink:
                return self.stream(source, sink)

    @staticmethod
    def _write(writer, tokens: list[str]) -> None:
        try:
            writer.writerow(tokens)
        except OSError as e:
            raise WriteFailure(e.strerror or str(e)) from e


def convert(source: BinaryIO, sink: TextIO, schema: Struct = FDR_RECORD,
            expected_version: int = INTERFACE_VERSION, delimiter: str = ",",
            allow_truncated: bool = False,
            progress: Callable[[int], None] | None = None) -> ConversionResult:
    """Convert an already-open recorder stream into delimited text."""
    converter = Converter(schema, expected_version, delimiter,
                          allow_truncated, progress)
    converter.check_version(source)
    return converter.stream(source, sink)


def convert_file(input_path: str | Path, output_path: str | Path,
                 compressed: bool = True, schema: Struct = FDR_RECORD,
                 expected_version: int = INTERFACE_VERSION,
                 delimiter: str = ",", allow_truncated: bool = False,
                 progress: Callable[[int], None] | None = None,
                 on_start: Callable[[int], None] | None = None) -> ConversionResult:
    """Convert a recorder file on disk, gzip-compressed unless told otherwise."""
    converter = Converter(schema, expected_version, delimiter,
                          allow_truncated, progress)
    return converter.run_file(input_path, output_path, compressed, on_start)
