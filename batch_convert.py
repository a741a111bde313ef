"""Batch build a JSON Schema for every model CSV under a directory."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from main import FORMATS, configure_logging, derive_schema_path, write_schema
from schema_builder import BUILD_ERRORS, CATALOG_SEGMENT, SchemaConstructor


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build a schema for every model CSV under a directory."
    )
    parser.add_argument(
        "root_dir",
        type=Path,
        help="Directory holding the CSV files (searched recursively).",
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        type=Path,
        default=Path("schemas"),
        help="Output directory for schema files (default: ./schemas).",
    )
    parser.add_argument(
        "--format",
        "-f",
        choices=FORMATS,
        default="json",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Overwrite existing output files.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be built without writing anything.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every file read and reference resolved.",
    )
    return parser.parse_args()


def find_model_files(constructor: SchemaConstructor) -> list[str]:
    """Indexed CSV files that are not catalogs, in index order."""
    return [
        path
        for path in constructor.file_index
        if path.lower().endswith(".csv") and CATALOG_SEGMENT not in path
    ]


def convert_file(
    constructor: SchemaConstructor,
    relative_path: str,
    output_dir: Path,
    fmt: str = "json",
    overwrite: bool = False,
    dry_run: bool = False,
) -> bool:
    """Build and write the schema for one model CSV.

    Args:
        constructor: Constructor for the root directory (shares its file index)
        relative_path: Project-relative path of the model CSV
        output_dir: Directory for output files, mirroring the source layout
        fmt: Output format, ``json`` or ``yaml``
        overwrite: Whether to overwrite existing files
        dry_run: If True, only print what would be done

    Returns:
        True if the schema was written (or skipped, or would be in dry-run mode),
        False if building or writing it failed
    """
    schema_file = derive_schema_path(output_dir / relative_path, fmt)

    if schema_file.exists() and not overwrite:
        print(f"  Skipped (schema already exists): {schema_file}")
        return True

    if dry_run:
        print(f"  Would build: {relative_path} -> {schema_file}")
        return True

    try:
        schema = constructor.build_file(relative_path)
        write_schema(schema, schema_file, fmt)
    except BUILD_ERRORS as e:
        print(f"  Error: {e}", file=sys.stderr)
        return False

    print(f"  Built: {schema_file} ({len(schema['properties'])} properties)")
    return True


def batch_convert(
    root_dir: Path,
    output_dir: Path = Path("schemas"),
    fmt: str = "json",
    overwrite: bool = False,
    dry_run: bool = False,
) -> tuple[int, int]:
    """Build schemas for every model CSV under ``root_dir``.

    Returns:
        Tuple of (success_count, total_count)
    """
    constructor = SchemaConstructor(root_dir)
    files = find_model_files(constructor)

    if not files:
        print(f"No model CSV files found in {root_dir}")
        return 0, 0

    print(f"Found {len(files)} model CSV file(s) to process")
    if dry_run:
        print("DRY RUN MODE - No files will be written")
    print()

    success_count = 0
    total_count = len(files)

    for i, relative_path in enumerate(files, 1):
        print(f"[{i}/{total_count}] Processing: {relative_path}")
        if convert_file(constructor, relative_path, output_dir, fmt, overwrite, dry_run):
            success_count += 1
        print()

    return success_count, total_count


def main() -> None:
    args = parse_args()
    configure_logging(args.verbose)

    try:
        success_count, total_count = batch_convert(
            root_dir=args.root_dir,
            output_dir=args.output_dir,
            fmt=args.format,
            overwrite=args.overwrite,
            dry_run=args.dry_run,
        )
    except NotADirectoryError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print("=" * 60)
    print(f"Summary: {success_count}/{total_count} files processed successfully")

    if success_count < total_count:
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    main()
