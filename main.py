"""CLI utility to build a JSON Schema from a directory of field-list CSV files."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict

import yaml

from schema_builder import BUILD_ERRORS, NOTHING_TO_BUILD, SchemaConstructor

FORMATS = ("json", "yaml")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build a JSON Schema document from a directory of CSV field lists."
    )
    parser.add_argument(
        "root_dir",
        type=Path,
        help="Directory holding the CSV files (searched recursively).",
    )
    parser.add_argument(
        "schema_name",
        type=str,
        help="Name (path suffix) of the root CSV file, e.g. 'Vessel.csv'.",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Destination path for the schema (defaults to stdout).",
    )
    parser.add_argument(
        "--format",
        "-f",
        choices=FORMATS,
        default="json",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every file read and reference resolved.",
    )
    return parser.parse_args()


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def derive_schema_path(csv_path: Path, fmt: str = "json") -> Path:
    """``Vessel.csv`` -> ``Vessel.schema.json`` (or ``.schema.yaml``)."""
    return csv_path.with_name(f"{csv_path.stem}.schema.{fmt}")


def dump_schema(schema: Dict[str, object], fmt: str = "json") -> str:
    if fmt == "yaml":
        return yaml.safe_dump(schema, sort_keys=False)
    return json.dumps(schema, indent=2) + "\n"


def write_schema(schema: Dict[str, object], schema_path: Path, fmt: str = "json") -> None:
    schema_path.parent.mkdir(parents=True, exist_ok=True)
    schema_path.write_text(dump_schema(schema, fmt), encoding="utf-8")


def main() -> None:
    args = parse_args()
    configure_logging(args.verbose)

    try:
        constructor = SchemaConstructor(args.root_dir)
        schema = constructor.build(args.schema_name)
    except BUILD_ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if schema == NOTHING_TO_BUILD:
        print(schema, file=sys.stderr)
        return

    if args.output:
        try:
            write_schema(schema, args.output, args.format)
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"Schema written to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(dump_schema(schema, args.format))


if __name__ == "__main__":
    main()
