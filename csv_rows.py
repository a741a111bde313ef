"""Parse field-list CSV files into rows keyed by normalized column names."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Dict, List

logger = logging.getLogger(__name__)

Row = Dict[str, str]


def normalize_name(text: str) -> str:
    """Trim, replace spaces with underscores and lowercase."""
    return text.strip().replace(" ", "_").lower()


def parse_rows(text: str) -> List[Row]:
    """Turn raw CSV text into a list of rows.

    The first line is the header. Values are matched to headers by column
    position and trimmed; missing trailing columns become ``""``. Quoting is
    not supported, a comma always separates two values.
    """
    lines = [line.rstrip("\r") for line in text.strip().split("\n")]
    reader = csv.reader(lines, quoting=csv.QUOTE_NONE)

    header = next(reader, [])
    headers = [normalize_name(column) for column in header]

    rows: List[Row] = []
    for record in reader:
        values = [value.strip() for value in record]
        rows.append(
            {
                column: values[index] if index < len(values) else ""
                for index, column in enumerate(headers)
            }
        )
    return rows


def read_rows(root: Path, relative_path: str) -> List[Row]:
    """Read and parse the CSV file at ``root / relative_path``.

    Read failures are logged and re-raised. A field longer than
    ``csv.field_size_limit()`` raises ``csv.Error``.
    """
    full_path = (root / relative_path).resolve()
    try:
        if not full_path.is_file():
            raise FileNotFoundError(f"File not found: {full_path}")
        logger.debug(f"Reading {full_path}")
        return parse_rows(full_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        logger.error(f"Error reading CSV file {full_path}: {exc}")
        raise
