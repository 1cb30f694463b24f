# src/szoracle/fixtures/files.py
"""Fixture data files in the three formats the loader accepts.

Writers produce temporary files from a header row plus value rows; the
reader yields one record dict per entry regardless of format.
"""

from __future__ import annotations

import csv
import json
import tempfile
from collections.abc import Iterator, Sequence
from enum import StrEnum
from pathlib import Path
from typing import Any

from szoracle.contracts.errors import FixtureError


class DataFormat(StrEnum):
    """On-disk record file formats."""

    CSV = "csv"
    JSON = "json"
    JSON_LINES = "jsonl"

    @property
    def suffix(self) -> str:
        return f".{self.value}"

    @classmethod
    def from_path(cls, path: Path) -> DataFormat:
        suffix = path.suffix.lower().lstrip(".")
        try:
            return cls(suffix)
        except ValueError:
            raise FixtureError(f"Unrecognized fixture file extension: {path.name}") from None


def _rows_as_dicts(headers: Sequence[str], records: Sequence[Sequence[str]]) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for index, record in enumerate(records):
        if len(record) != len(headers):
            raise FixtureError(
                f"Record {index} has {len(record)} values but there are {len(headers)} headers: {list(record)!r}"
            )
        rows.append(dict(zip(headers, record, strict=True)))
    return rows


def prepare_data_file(
    data_format: DataFormat,
    prefix: str,
    headers: Sequence[str],
    records: Sequence[Sequence[str]],
    directory: Path | None = None,
) -> Path:
    """Write records to a new temporary file and return its path.

    Args:
        data_format: Output format; also determines the file suffix
        prefix: File name prefix, e.g. ``"test-passengers-"``
        headers: Column names, shared by every record
        records: Value rows; each must have exactly ``len(headers)`` values
        directory: Where to create the file (system temp dir when None)

    Raises:
        FixtureError: If a record's width differs from the header width.
    """
    rows = _rows_as_dicts(headers, records)

    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        newline="",
        prefix=prefix,
        suffix=data_format.suffix,
        dir=directory,
        delete=False,
    ) as handle:
        if data_format is DataFormat.CSV:
            writer = csv.DictWriter(handle, fieldnames=list(headers))
            writer.writeheader()
            writer.writerows(rows)
        elif data_format is DataFormat.JSON:
            json.dump(rows, handle, indent=2)
            handle.write("\n")
        else:
            for row in rows:
                handle.write(json.dumps(row))
                handle.write("\n")

    return Path(handle.name)


def _iter_json_lines(path: Path, encoding: str) -> Iterator[dict[str, Any]]:
    with path.open(encoding=encoding) as handle:
        for line_number, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                value = json.loads(line)
            except ValueError as exc:
                raise FixtureError(f"{path.name}:{line_number}: invalid JSON: {exc}") from exc
            if not isinstance(value, dict):
                raise FixtureError(f"{path.name}:{line_number}: record is not a JSON object")
            yield value


def read_records(
    path: Path,
    data_source: str | None = None,
    encoding: str | None = None,
) -> list[dict[str, Any]]:
    """Read every record in a fixture file.

    When ``data_source`` is given it overrides any ``DATA_SOURCE`` value
    present in the file.

    Raises:
        FixtureError: If the file cannot be parsed or a record is not an object.
    """
    encoding = encoding or "utf-8"
    data_format = DataFormat.from_path(path)

    if data_format is DataFormat.CSV:
        with path.open(encoding=encoding, newline="") as handle:
            records: list[dict[str, Any]] = [dict(row) for row in csv.DictReader(handle)]
    elif data_format is DataFormat.JSON:
        try:
            document = json.loads(path.read_text(encoding=encoding))
        except ValueError as exc:
            raise FixtureError(f"{path.name}: invalid JSON: {exc}") from exc
        if not isinstance(document, list) or not all(isinstance(item, dict) for item in document):
            raise FixtureError(f"{path.name}: expected a JSON array of objects")
        records = document
    else:
        records = list(_iter_json_lines(path, encoding))

    if data_source is not None:
        for record in records:
            record["DATA_SOURCE"] = data_source
    return records
