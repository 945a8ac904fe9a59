"""Test fixed-layout value reading and record decoding.

Run from the repo root:
    python3 tests/test_decoder.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "python"))

import io
import struct

import numpy as np

from fdr2csv.decoder import RecordDecoder, read_record, read_value, read_version
from fdr2csv.errors import ShortRead, Truncated
from fdr2csv.flatten import Flattener
from fdr2csv.layout import Array, Struct, F32, F64, FLAG, I16, U32, U64
from fdr2csv.records import FDR_RECORD
from fdr2csv.storage import pack_record


def make_test_schema():
    word = Struct("word", [("SSM", U32), ("Data", F32)])
    return Struct("test_record", [
        ("bus", Struct("bus", [("alt", word), ("speed", word)])),
        ("discrete", Struct("discrete", [("ok", FLAG), ("failed", FLAG)])),
        ("analog", Struct("analog", [("order_deg", F64), ("count", I16)])),
    ])


def make_record_bytes(alt=1000.0, speed=250.0, ok=1, failed=0,
                      order=1.5, count=-5, ssm=3):
    return struct.pack("<IfIfBBdh", ssm, alt, ssm, speed, ok, failed, order, count)


class TrickleStream(io.RawIOBase):
    """Returns at most one byte per read, like a slow pipe."""

    def __init__(self, data: bytes):
        self._data = data
        self._pos = 0

    def readable(self):
        return True

    def read(self, n=-1):
        if self._pos >= len(self._data):
            return b""
        chunk = self._data[self._pos:self._pos + 1]
        self._pos += 1
        return chunk


def test_read_value_leaf():
    print("test_read_value_leaf...", end="")

    stream = io.BytesIO(struct.pack("<Qf", 3200001, 3.5) + b"\xff")
    assert read_value(stream, U64) == 3200001
    assert read_value(stream, F32) == np.float32(3.5)
    assert stream.tell() == 12

    try:
        read_value(stream, U32)
    except ShortRead as e:
        assert e.expected == 4
        assert e.got == 1
    else:
        raise AssertionError("ShortRead not raised")

    print(" OK")


def test_read_value_struct_and_array():
    print("test_read_value_struct_and_array...", end="")

    schema = make_test_schema()
    value = read_value(io.BytesIO(make_record_bytes()), schema)
    assert value["bus"]["alt"]["SSM"] == 3
    assert value["bus"]["speed"]["Data"] == np.float32(250.0)
    assert value["discrete"]["ok"] == 1
    assert value["analog"]["count"] == -5

    arr = read_value(io.BytesIO(struct.pack("<3d", 1.0, 2.0, 3.0)), Array(F64, 3))
    np.testing.assert_array_equal(arr, [1.0, 2.0, 3.0])

    print(" OK")


def test_read_value_retries_short_reads():
    """A source that trickles bytes still yields whole values."""
    print("test_read_value_retries_short_reads...", end="")

    stream = TrickleStream(struct.pack("<Q", 42) + make_record_bytes(order=9.25))
    assert read_version(stream) == 42
    record = read_record(stream, make_test_schema())
    assert record is not None
    assert record["analog"]["order_deg"] == 9.25

    print(" OK")


def test_read_record_boundaries():
    """None at a clean boundary, Truncated for a partial record."""
    print("test_read_record_boundaries...", end="")

    schema = make_test_schema()
    assert read_record(io.BytesIO(b""), schema) is None

    # 16 bytes of bus + 2 of discrete + 2 of analog
    partial = make_record_bytes()[:20]
    try:
        read_record(io.BytesIO(partial), schema, record_index=7)
    except Truncated as e:
        assert e.record_index == 7
        assert e.expected == schema.size
        assert e.got == 20
        assert isinstance(e, ShortRead)
    else:
        raise AssertionError("Truncated not raised")

    print(" OK")


def test_record_decoder_counts():
    print("test_record_decoder_counts...", end="")

    schema = make_test_schema()
    data = b"".join(make_record_bytes(count=i) for i in range(5))
    decoder = RecordDecoder(io.BytesIO(data), schema)
    records = list(decoder)
    assert len(records) == 5
    assert decoder.count == 5
    assert [int(r["analog"]["count"]) for r in records] == [0, 1, 2, 3, 4]
    assert decoder.truncated is None

    print(" OK")


def test_record_decoder_truncation_policy():
    """Partial trailing records fail by default and are dropped when allowed."""
    print("test_record_decoder_truncation_policy...", end="")

    schema = make_test_schema()
    data = make_record_bytes() * 2 + b"\x00" * 5

    seen = []
    try:
        for record in RecordDecoder(io.BytesIO(data), schema):
            seen.append(record)
    except Truncated as e:
        assert e.record_index == 2
        assert e.got == 5
    else:
        raise AssertionError("Truncated not raised")
    assert len(seen) == 2

    decoder = RecordDecoder(io.BytesIO(data), schema, allow_truncated=True)
    assert len(list(decoder)) == 2
    assert decoder.truncated is not None
    assert decoder.truncated.got == 5

    print(" OK")


def test_decode_is_deterministic():
    """Decoding the same bytes twice gives identical rows."""
    print("test_decode_is_deterministic...", end="")

    data = b"".join(pack_record(FDR_RECORD, {
        "engine": {"engineEngine1N1": 20.0 + i, "engineEngine2N1": 21.5},
        "data": {"fcu_discrete_word": {"ap_1_push": i % 2},
                 "wheel_speed_kn": [i, i, i, i]},
    }) for i in range(3))

    flattener = Flattener(FDR_RECORD)

    def rows():
        return [flattener.row(r)
                for r in RecordDecoder(io.BytesIO(data), FDR_RECORD)]

    first = rows()
    second = rows()
    assert len(first) == 3
    assert first == second
    for row in first:
        assert len(row) == len(flattener.header())

    print(" OK")


if __name__ == "__main__":
    print("fdr2csv decoder tests")
    print("=====================\n")

    test_read_value_leaf()
    test_read_value_struct_and_array()
    test_read_value_retries_short_reads()
    test_read_record_boundaries()
    test_record_decoder_counts()
    test_record_decoder_truncation_policy()
    test_decode_is_deterministic()

    print("\nAll tests passed.")
