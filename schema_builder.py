"""Build a JSON Schema document from a directory of field-list CSV files.

Every CSV describes the fields of one shape with the columns
``Name, Type, Min, Max, Required, Repeat, Notes``. A ``Type`` that is not a
primitive (``number``/``text``) names another CSV in the same tree: files
under a ``Catalog/`` path become string enums built from their ``value``
column, every other file becomes a nested object schema.
"""

from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple, Union

from csv_rows import Row, normalize_name, read_rows
from file_index import build_file_index, load_ignore_spec

logger = logging.getLogger(__name__)

SCHEMA_DRAFT = "http://json-schema.org/draft-07/schema#"
NOTHING_TO_BUILD = "No Schema to Build"
CATALOG_SEGMENT = "Catalog/"

PRIMITIVE_TYPES = {"number": "number", "text": "string"}
# Inside a nested model only these references are followed.
NESTED_REFERENCE_TYPES = frozenset({"mode", "crew"})

SchemaNode = Dict[str, Any]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class SchemaNotFoundError(FileNotFoundError):
    """No indexed file matches the requested root schema name."""


class CyclicReferenceError(RecursionError):
    """A type reference was reached again while it was still being resolved."""

    def __init__(self, chain: Tuple[str, ...]):
        self.chain = chain
        super().__init__("Cyclic type reference: " + " -> ".join(chain))


@dataclass(frozen=True)
class ResolutionContext:
    """Which reference tokens may be resolved, and which are in progress."""

    allowed: Optional[FrozenSet[str]] = None  # None: any token
    chain: Tuple[str, ...] = ()

    def allows(self, token: str) -> bool:
        return self.allowed is None or token in self.allowed

    def enter(self, token: str) -> "ResolutionContext":
        """Return the context for the fields of the model named by ``token``."""
        if token in self.chain:
            raise CyclicReferenceError(self.chain + (token,))
        return ResolutionContext(NESTED_REFERENCE_TYPES, self.chain + (token,))


ROOT_CONTEXT = ResolutionContext()

# Failures that abort one build and are reported by the command-line tools.
BUILD_ERRORS = (OSError, UnicodeDecodeError, csv.Error, CyclicReferenceError)


def primitive_schema(token: str) -> Optional[SchemaNode]:
    json_type = PRIMITIVE_TYPES.get(token)
    if json_type is None:
        return None
    return {"type": json_type}


def parse_length(value: str) -> Optional[int]:
    """Parse the leading integer of ``value`` (``"10 chars"`` -> 10)."""
    match = _LEADING_INT.match(value)
    if match is None:
        return None
    return int(match.group(1))


class RawAttributes:
    """Root-level columns, copied onto the property as raw strings."""

    KEYS = {
        "min": "minLength",
        "max": "maxLength",
        "required": "required",
        "repeat": "repeat",
        "notes": "description",
    }

    def apply(self, node: SchemaNode, column: str, value: str) -> SchemaNode:
        key = self.KEYS.get(column)
        if key is None:
            return node
        return {**node, key: value}


class TypedAttributes:
    """Nested-level columns: integer lengths, required flags collected by the model."""

    LENGTH_KEYS = (("min", "minLength"), ("max", "maxLength"))

    def apply(self, node: SchemaNode, row: Row) -> SchemaNode:
        node = dict(node)
        for column, key in self.LENGTH_KEYS:
            value = row.get(column, "")
            if not value:
                continue
            length = parse_length(value)
            if length is None:
                logger.warning(f"Ignoring non-integer {column} value {value!r}")
                continue
            node[key] = length
        if row.get("notes"):
            node["description"] = row["notes"]
        return node

    def is_required(self, row: Row) -> bool:
        return row.get("required") == "Y"


class TypeResolver:
    """Resolve type tokens to enum or object schemas using a file index."""

    def __init__(self, root: Path, file_index: Sequence[str]):
        self.root = root
        self.file_index = file_index
        self.attributes = TypedAttributes()

    def find_file(self, token: str) -> Optional[str]:
        """First indexed path containing ``token``, ignoring case."""
        needle = token.lower()
        for path in self.file_index:
            if needle in path.lower():
                return path
        return None

    def resolve(self, token: str, context: ResolutionContext = ROOT_CONTEXT) -> Optional[SchemaNode]:
        """Build the schema for ``token``.

        Returns ``None`` when ``context`` does not allow the token. A token
        that matches no file degrades to ``{"type": "string"}``.
        """
        token = token.strip().lower()
        if not context.allows(token):
            return None

        path = self.find_file(token)
        if path is None:
            logger.warning(f"CSV file for type {token} not found")
            return {"type": "string"}

        logger.debug(f"Resolved type {token} to {path}")
        if CATALOG_SEGMENT in path:
            return self._catalog_schema(path)
        return self._model_schema(path, context.enter(token))

    def _catalog_schema(self, path: str) -> SchemaNode:
        values = [row["value"] for row in read_rows(self.root, path) if row.get("value")]
        return {"type": "string", "enum": values}

    def _model_schema(self, path: str, context: ResolutionContext) -> SchemaNode:
        properties: Dict[str, SchemaNode] = {}
        required: List[str] = []

        for row in read_rows(self.root, path):
            if not row.get("name"):
                continue
            name = normalize_name(row["name"])
            node = self._field_type(row.get("type", ""), context)
            properties[name] = self.attributes.apply(node, row)
            if self.attributes.is_required(row):
                required.append(name)

        schema: SchemaNode = {"type": "object", "properties": properties}
        if required:
            schema["required"] = required
        return schema

    def _field_type(self, value: str, context: ResolutionContext) -> SchemaNode:
        token = value.strip().lower()
        if not token:
            return {}
        primitive = primitive_schema(token)
        if primitive is not None:
            return primitive
        resolved = self.resolve(token, context)
        if resolved is None:
            logger.debug(f"Leaving field of type {token} untyped")
            return {}
        return resolved


class SchemaConstructor:
    """Builds schemas for CSV files found under one root directory.

    The file index is computed on first use and kept for the lifetime of
    the instance.
    """

    def __init__(self, root_dir: Union[str, Path]):
        if not root_dir or not Path(root_dir).is_dir():
            raise NotADirectoryError(f"Invalid Path: {root_dir}")
        self.root = Path(root_dir)
        self.ignore_spec = load_ignore_spec(self.root)
        self.attributes = RawAttributes()
        self._file_index: Optional[List[str]] = None

    @property
    def file_index(self) -> List[str]:
        if self._file_index is None:
            self._file_index = build_file_index(self.root, self.ignore_spec)
            logger.debug(f"Indexed {len(self._file_index)} file(s) under {self.root}")
        return self._file_index

    def find_schema_file(self, schema_to_build: str) -> Optional[str]:
        for path in self.file_index:
            if path.endswith(schema_to_build):
                return path
        return None

    def build(self, schema_to_build: str = "") -> Union[SchemaNode, str]:
        """Build the schema document rooted at the CSV ending in ``schema_to_build``.

        Returns ``NOTHING_TO_BUILD`` when no name is given.

        Raises:
            SchemaNotFoundError: no indexed file ends with the name
            FileNotFoundError: a CSV disappeared or could not be read
            CyclicReferenceError: the model references form a cycle
        """
        if not schema_to_build:
            return NOTHING_TO_BUILD

        schema_file = self.find_schema_file(schema_to_build)
        if schema_file is None:
            raise SchemaNotFoundError(f"Schema file {schema_to_build} not found")

        return self.build_file(schema_file)

    def build_file(self, schema_file: str) -> SchemaNode:
        """Build the schema document for the indexed path ``schema_file`` itself."""
        resolver = TypeResolver(self.root, self.file_index)
        properties = self._build_properties(read_rows(self.root, schema_file), resolver)
        return {"$schema": SCHEMA_DRAFT, "properties": properties}

    def _build_properties(self, rows: Sequence[Row], resolver: TypeResolver) -> Dict[str, SchemaNode]:
        # Columns are applied in header order; a later row with the same
        # name replaces the earlier property.
        properties: Dict[str, SchemaNode] = {}
        for row in rows:
            current: Optional[str] = None
            for column, value in row.items():
                if not value:
                    continue
                if column == "name":
                    current = normalize_name(value)
                    properties[current] = {}
                elif current is None:
                    logger.debug(f"Skipping {column} column before a name")
                elif column == "type":
                    properties[current] = self._root_type(properties[current], value, resolver)
                else:
                    properties[current] = self.attributes.apply(properties[current], column, value)
        return properties

    def _root_type(self, node: SchemaNode, value: str, resolver: TypeResolver) -> SchemaNode:
        token = value.strip().lower()
        primitive = primitive_schema(token)
        if primitive is not None:
            return {**node, **primitive}
        return resolver.resolve(token, ROOT_CONTEXT)
