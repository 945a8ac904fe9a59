"""fdr2csv - Flight data recorder to delimited text converter."""

from .layout import (
    LeafType, Struct, Field, Array, BitWord, BitDef, SEPARATOR, dtype_of, size_of,
)
from .errors import (
    FdrError, CorruptInput, OpenFailure, VersionMismatch, ShortRead,
    Truncated, HeaderGenerationFailure, WriteFailure,
)
from .decoder import Record, RecordDecoder, read_value, read_version, read_record
from .flatten import Column, Flattener
from .records import FDR_RECORD, INTERFACE_VERSION
from .storage import FdrReader, FdrWriter, pack_record
from .converter import State, ConversionResult, Converter, convert, convert_file
from .capture import Capture

__all__ = [
    "LeafType", "Struct", "Field", "Array", "BitWord", "BitDef", "SEPARATOR",
    "dtype_of", "size_of",
    "FdrError", "CorruptInput", "OpenFailure", "VersionMismatch", "ShortRead",
    "Truncated", "HeaderGenerationFailure", "WriteFailure",
    "Record", "RecordDecoder", "read_value", "read_version", "read_record",
    "Column", "Flattener",
    "FDR_RECORD", "INTERFACE_VERSION",
    "FdrReader", "FdrWriter", "pack_record",
    "State", "ConversionResult", "Converter", "convert", "convert_file",
    "Capture",
]
