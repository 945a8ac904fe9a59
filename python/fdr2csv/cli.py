"""fdr2csv command-line tool."""

from __future__ import annotations

import argparse
import logging
import sys

from .converter import convert_file
from .decoder import read_version
from .errors import FdrError
from .layout import Struct, size_of, type_name
from .records import FDR_RECORD, INTERFACE_VERSION
from .storage import open_input


def _print_struct_size(schema: Struct) -> None:
    """Print the byte size of each top-level record field."""
    print(f"{schema.name}:")
    for f in schema.fields:
        print(f"  {f.name:20s} {type_name(f.type):28s} {size_of(f.type):6d} B")
    print(f"  {'total':20s} {'':28s} {schema.size:6d} B")


def _print_version(args: argparse.Namespace) -> None:
    with open_input(args.input.strip(), not args.no_compression) as f:
        print(f"Interface version is {read_version(f)}")


def _progress(count: int) -> None:
    print(f"Processed {count} entries...", end="\r", flush=True)


def _convert(args: argparse.Namespace) -> None:
    input_path = args.input.strip()
    output_path = args.output.strip()

    def on_start(version: int) -> None:
        print(f"Converting from '{args.input}' to '{args.output}' with "
              f"interface version '{version}' and delimiter '{args.delimiter}'")

    result = convert_file(
        input_path, output_path,
        compressed=not args.no_compression,
        schema=FDR_RECORD,
        expected_version=INTERFACE_VERSION,
        delimiter=args.delimiter,
        allow_truncated=args.allow_truncated,
        progress=_progress,
        on_start=on_start,
    )
    print(f"Processed {result.count} entries...")


def _delimiter(value: str) -> str:
    if len(value) != 1:
        raise argparse.ArgumentTypeError("delimiter must be a single character")
    return value


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="fdr2csv",
        description="Convert A32NX flight data recorder files to delimited text")
    parser.add_argument("-i", "--input", required=True, help="Input file")
    parser.add_argument("-o", "--output", help="Output file")
    parser.add_argument("-d", "--delimiter", type=_delimiter, default=",",
                        help="Delimiter (default: ',')")
    parser.add_argument("-n", "--no-compression", action="store_true",
                        help="Input file is not compressed")
    parser.add_argument("-p", "--print-struct-size", action="store_true",
                        help="Print record struct sizes")
    parser.add_argument("-g", "--get-input-file-version", action="store_true",
                        help="Print interface version of input file")
    parser.add_argument("--allow-truncated", action="store_true",
                        help="Stop quietly at a partial trailing record "
                             "instead of failing")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not (args.output or args.get_input_file_version or args.print_struct_size):
        parser.error("the following arguments are required: -o/--output")

    try:
        if args.print_struct_size:
            _print_struct_size(FDR_RECORD)
        if args.get_input_file_version:
            _print_version(args)
        elif args.output:
            _convert(args)
    except (FdrError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
