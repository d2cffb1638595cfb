"""``pgcell-decode``: decode raw cell values from the command line.

Examples:
    pgcell-decode --type 869 0x022000040a000001
    pgcell-decode --base64 aGVsbG8=
    pgcell-decode --dsn postgres://localhost/db --query "SELECT * FROM hosts"
"""

import argparse
import base64
import binascii
import logging
import sys
from typing import List, Optional

from .config import DecoderThresholds
from .decoder import ValueDecoder
from .exceptions import PgCellError
from .mapper import ResultMapper

NULL_ARGUMENT = "NULL"


def parse_value(text: str, use_base64: bool = False) -> Optional[bytes]:
    """Turn one command-line argument into cell bytes.

    Raises:
        ValueError: If the argument is not valid hex (or base64).
    """
    if text == NULL_ARGUMENT:
        return None
    if use_base64:
        try:
            return base64.b64decode(text, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 value: {text!r}") from e
    if text[:2].lower() == "0x":
        text = text[2:]
    try:
        return bytes.fromhex(text)
    except ValueError as e:
        raise ValueError(f"Invalid hex value: {text!r}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pgcell-decode",
        description="Decode PostgreSQL wire values into display text",
    )
    parser.add_argument("values", nargs="*", help="Hex (0x...) or base64 values; NULL for SQL NULL")
    parser.add_argument("--type", dest="type_id", type=int, default=None, help="Declared type OID")
    parser.add_argument("--base64", action="store_true", help="Values are base64, not hex")
    parser.add_argument("--dsn", help="Connection string (requires the pg extra)")
    parser.add_argument("--query", help="Statement to run against --dsn")
    parser.add_argument("--text", action="store_true", help="Request text-format results with --query")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log decoder decisions")
    return parser


def _print_value(value: Optional[str]) -> None:
    print(NULL_ARGUMENT if value is None else value)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if bool(args.dsn) != bool(args.query):
        parser.error("--dsn and --query must be given together")
    if not args.query and not args.values:
        parser.error("nothing to decode")

    try:
        decoder = ValueDecoder(DecoderThresholds.from_env())
    except PgCellError as e:
        print(f"error: {e.message}: {e.detail}", file=sys.stderr)
        return 2

    if args.query:
        from .source import fetch_cells

        try:
            rows = fetch_cells(args.dsn, args.query, binary=not args.text)
        except PgCellError as e:
            print(f"error: {e.message}", file=sys.stderr)
            return 1
        for row in ResultMapper(decoder).map_rows(rows):
            print("\t".join(NULL_ARGUMENT if v is None else v for v in row.values()))
        return 0

    try:
        values = [parse_value(v, args.base64) for v in args.values]
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    for data in values:
        _print_value(decoder.decode_bytes(data, args.type_id))
    return 0


if __name__ == "__main__":
    sys.exit(main())
