"""Test layout declarations, dtypes and column flattening.

Run from the repo root:
    python3 tests/test_layout.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "python"))

import numpy as np

from fdr2csv.errors import HeaderGenerationFailure
from fdr2csv.flatten import Flattener
from fdr2csv.layout import (
    Array, BitDef, BitWord, Struct, dtype_of, size_of, type_name,
    F32, F64, FLAG, I16, U8, U16, U32,
)
from fdr2csv.records import (
    ARINC429, ELAC_DISCRETE_OUTPUTS, FDR_RECORD, FCU_DISCRETE_WORD,
)


def make_test_schema():
    word = Struct("word", [("SSM", U32), ("Data", F32)])
    return Struct("test_record", [
        ("bus", Struct("bus", [("alt", word), ("speed", word)])),
        ("discrete", Struct("discrete", [("ok", FLAG), ("failed", FLAG)])),
        ("analog", Struct("analog", [("order_deg", F64), ("count", I16)])),
    ])


def _raises(exc, fn, *args):
    try:
        fn(*args)
    except exc:
        return
    raise AssertionError(f"{exc.__name__} not raised")


def test_sizes_are_packed():
    """Struct sizes are the plain sum of their fields, no padding."""
    print("test_sizes_are_packed...", end="")

    schema = make_test_schema()
    assert size_of(U8) == 1
    assert size_of(U16) == 2
    assert size_of(F64) == 8
    assert size_of(FLAG) == 1
    assert schema.size == 16 + 2 + 10
    assert size_of(Array(F32, 3)) == 12
    assert size_of(ARINC429) == 8
    assert ELAC_DISCRETE_OUTPUTS.size == len(ELAC_DISCRETE_OUTPUTS.fields)
    assert FDR_RECORD.size == sum(size_of(f.type) for f in FDR_RECORD.fields)

    print(" OK")


def test_dtype_is_little_endian():
    """Multi-byte leaves decode as little-endian regardless of host."""
    print("test_dtype_is_little_endian...", end="")

    dt = dtype_of(U32)
    assert dt.byteorder in ("<", "=") and dt.str == "<u4"
    value = np.frombuffer(bytes([1, 0, 0, 0]), dtype=dt)[0]
    assert value == 1

    schema = make_test_schema()
    assert schema.dtype.names == ("bus", "discrete", "analog")
    assert schema.dtype.fields["analog"][1] == 18

    print(" OK")


def test_duplicate_sibling_rejected():
    print("test_duplicate_sibling_rejected...", end="")

    _raises(HeaderGenerationFailure, Struct, "dup", [("a", U8), ("a", U16)])
    _raises(HeaderGenerationFailure, Struct, "dotted", [("a.b", U8)])
    _raises(HeaderGenerationFailure, Struct, "empty", [])
    _raises(HeaderGenerationFailure, Struct, "blank", [("", U8)])

    # Same name at different levels is fine
    inner = Struct("inner", [("a", U8)])
    Struct("outer", [("a", inner)])

    print(" OK")


def test_bitword_validation():
    print("test_bitword_validation...", end="")

    _raises(HeaderGenerationFailure, BitWord, F32, [BitDef("x")])
    _raises(HeaderGenerationFailure, BitWord, U8, [BitDef("x", 7, 2)])
    _raises(HeaderGenerationFailure, BitWord, U8, [])
    _raises(HeaderGenerationFailure, BitWord, U8, [BitDef("x"), BitDef("x", 1)])
    _raises(HeaderGenerationFailure, Array, U8, 0)

    # start defaults to bit 0, width to a single bit
    assert BitDef("x") == BitDef("x", 0, 1)
    assert FCU_DISCRETE_WORD.bits[0] == BitDef("ap_1_push", 0, 1)

    word = BitWord(U16, [BitDef("low", 0, 8), BitDef("high", 8, 8)])
    assert size_of(word) == 2
    assert type_name(word) == "bits<U16>"
    assert type_name(Array(ARINC429, 2)) == "base_arinc_429[2]"

    print(" OK")


def test_header_preorder():
    """Column names follow declaration order, joined by the separator."""
    print("test_header_preorder...", end="")

    header = Flattener(make_test_schema()).header()
    assert header == [
        "bus.alt.SSM", "bus.alt.Data",
        "bus.speed.SSM", "bus.speed.Data",
        "discrete.ok", "discrete.failed",
        "analog.order_deg", "analog.count",
    ]

    print(" OK")


def test_array_and_bit_columns():
    print("test_array_and_bit_columns...", end="")

    schema = Struct("r", [
        ("speeds", Array(F64, 3)),
        ("fcu", FCU_DISCRETE_WORD),
        ("tail", U8),
    ])
    header = Flattener(schema).header()
    assert header[:3] == ["speeds.0", "speeds.1", "speeds.2"]
    assert header[3] == "fcu.ap_1_push"
    assert "fcu.baro_mode_right" in header
    assert header[-1] == "tail"
    assert len(header) == 3 + len(FCU_DISCRETE_WORD.bits) + 1

    print(" OK")


def test_custom_separator_collision():
    """A separator that appears in field names can collide; that is reported."""
    print("test_custom_separator_collision...", end="")

    schema = Struct("r", [
        ("a", Struct("a", [("b", U8)])),
        ("a_b", U8),
    ])
    assert Flattener(schema).header() == ["a.b", "a_b"]
    _raises(HeaderGenerationFailure, Flattener, schema, "_")

    print(" OK")


def test_fdr_record_columns_unique():
    """The A32NX record flattens to pairwise-distinct column names."""
    print("test_fdr_record_columns_unique...", end="")

    header = Flattener(FDR_RECORD).header()
    assert len(header) == len(set(header))
    assert header[0] == "elac_1_bus.left_aileron_position_deg.SSM"
    assert header[1] == "elac_1_bus.left_aileron_position_deg.Data"
    assert "sec_3_discrete.sec_failed" in header
    assert "ap_sm.output.autothrust_mode" in header
    assert "athr.time.simulation_time" in header
    assert header[-1] == "data.wheel_speed_kn.3"

    top = [f.name for f in FDR_RECORD.fields]
    assert top[:3] == ["elac_1_bus", "elac_1_discrete", "elac_1_analog"]
    assert top[-5:] == ["ap_sm", "ap_law", "athr", "engine", "data"]

    print(" OK")


if __name__ == "__main__":
    print("fdr2csv layout tests")
    print("====================\n")

    test_sizes_are_packed()
    test_dtype_is_little_endian()
    test_duplicate_sibling_rejected()
    test_bitword_validation()
    test_header_preorder()
    test_array_and_bit_columns()
    test_custom_separator_collision()
    test_fdr_record_columns_unique()

    print("\nAll tests passed.")
