# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Command-line interface for DNStore

Prints a readable report of a .DS_Store file: one line per file name
followed by its tab-indented fields. Warnings go to stderr.

Copyright 2025 DNAi inc.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dnstore.diagnostics import Diagnostics
from dnstore.ds_store_parser import DSStore, DSStoreParser
from dnstore.exceptions import MetadataReadError
from dnstore.field_interpreter import FieldInterpreter
from dnstore.value_decoder import DecodedValue

DEFAULT_PATH = Path('.DS_Store')


def _json_value(value: DecodedValue) -> Any:
    if isinstance(value.value, bytes):
        return value.value.hex()
    return value.value


def format_output(store: DSStore, format_type: str = "text") -> str:
    """
    Format a parsed store based on format type.

    Args:
        store: Parsed DS_Store
        format_type: Output format ('text' or 'json')

    Returns:
        Formatted output string
    """
    interpreter = FieldInterpreter(store.diagnostics)

    if format_type == "json":
        records: List[Dict[str, Any]] = []
        for record in store.records:
            fields = {}
            for code, value in record.fields.items():
                fields[code] = {
                    'type': value.type_code,
                    'value': _json_value(value),
                    'description': interpreter.interpret_field(record.name, code, value),
                }
            records.append({'name': record.name, 'fields': fields})
        document = {
            'metadata': store.to_metadata(),
            'records': records,
            'warnings': store.diagnostics.messages,
        }
        return json.dumps(document, indent=2, ensure_ascii=False)

    return "\n".join(interpreter.report(store.records))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='dnstore',
        description="DNStore - Print the metadata stored in a macOS .DS_Store file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Read .DS_Store in the current directory
  dnstore

  # Read a specific file as JSON
  dnstore -j ~/Desktop/.DS_Store
        """
    )
    parser.add_argument('paths', nargs='*', metavar='FILE',
                        help='.DS_Store file to read (default: ./.DS_Store)')
    parser.add_argument('-j', '--json', action='store_true', help='Output records in JSON format')
    parser.add_argument('-q', '--quiet', action='store_true', help='Do not print warnings')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Returns:
        Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if len(args.paths) > 1:
        parser.print_usage(sys.stderr)
        return 1

    if args.paths:
        path = Path(args.paths[0])
    else:
        print("File unspecified. Using .DS_Store in the current directory...", file=sys.stderr)
        path = DEFAULT_PATH

    diagnostics = Diagnostics(None if args.quiet else sys.stderr)
    try:
        store = DSStoreParser(file_path=str(path), diagnostics=diagnostics).parse()
    except MetadataReadError as exc:
        print(f"Error parsing DS_Store: {exc.message}", file=sys.stderr)
        return 1

    output = format_output(store, "json" if args.json else "text")
    if output:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
