"""Error kinds raised while converting flight data recorder streams."""

from __future__ import annotations


class FdrError(Exception):
    """Base class for every failure the converter reports."""


class OpenFailure(FdrError):
    """Input or output path could not be opened."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to open {path!r}: {reason}")
        self.path = path
        self.reason = reason


class VersionMismatch(FdrError):
    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Mismatch between converter and file version "
            f"(expected {expected}, got {actual})")
        self.expected = expected
        self.actual = actual


class ShortRead(FdrError):
    """Byte source ran out before a fixed-size value was complete."""

    def __init__(self, expected: int, got: int):
        super().__init__(f"Short read: expected {expected} bytes, got {got}")
        self.expected = expected
        self.got = got


class Truncated(ShortRead):
    """Stream ended part-way through a record."""

    def __init__(self, record_index: int, expected: int, got: int):
        FdrError.__init__(
            self,
            f"Record {record_index} truncated: expected {expected} bytes, got {got}")
        self.record_index = record_index
        self.expected = expected
        self.got = got


class HeaderGenerationFailure(FdrError):
    """Schema cannot produce a unique name for every leaf."""


class WriteFailure(FdrError):
    def __init__(self, reason: str):
        super().__init__(f"Failed to write output: {reason}")
        self.reason = reason


class CorruptInput(FdrError):
    """Compressed input could not be decoded."""

    def __init__(self, reason: str):
        super().__init__(f"Corrupt compressed input: {reason}")
        self.reason = reason
