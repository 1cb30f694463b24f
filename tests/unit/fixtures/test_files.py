# tests/unit/fixtures/test_files.py
"""Tests for fixture file writers and the record reader."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from szoracle.contracts.errors import FixtureError
from szoracle.fixtures.files import DataFormat, prepare_data_file, read_records

HEADERS = ("RECORD_ID", "NAME_FIRST", "ADDR_FULL")
ROWS = (
    ("1", "Ann", "1 Main St, Springfield"),
    ("2", "Bob", '2 "Quoted" Ave'),
)


class TestDataFormat:
    def test_suffix(self) -> None:
        assert DataFormat.JSON_LINES.suffix == ".jsonl"

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("a.csv", DataFormat.CSV), ("a.JSON", DataFormat.JSON), ("a.jsonl", DataFormat.JSON_LINES)],
    )
    def test_from_path(self, name: str, expected: DataFormat) -> None:
        assert DataFormat.from_path(Path(name)) is expected

    def test_unknown_extension(self) -> None:
        with pytest.raises(FixtureError, match="Unrecognized"):
            DataFormat.from_path(Path("records.xml"))


class TestPrepareAndRead:
    @pytest.mark.parametrize("data_format", list(DataFormat))
    def test_written_records_read_back(self, data_format: DataFormat, tmp_path: Path) -> None:
        path = prepare_data_file(data_format, "test-people-", HEADERS, ROWS, tmp_path)

        assert path.parent == tmp_path
        assert path.name.startswith("test-people-")
        assert path.suffix == data_format.suffix
        assert read_records(path) == [dict(zip(HEADERS, row, strict=True)) for row in ROWS]

    def test_json_is_an_array(self, tmp_path: Path) -> None:
        path = prepare_data_file(DataFormat.JSON, "p-", HEADERS, ROWS, tmp_path)
        assert isinstance(json.loads(path.read_text()), list)

    def test_json_lines_one_object_per_line(self, tmp_path: Path) -> None:
        path = prepare_data_file(DataFormat.JSON_LINES, "p-", HEADERS, ROWS, tmp_path)
        assert len(path.read_text().splitlines()) == 2

    def test_width_mismatch_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(FixtureError, match="Record 1 has 2 values"):
            prepare_data_file(DataFormat.CSV, "p-", HEADERS, (ROWS[0], ("3", "Cy")), tmp_path)

    def test_data_source_override(self, tmp_path: Path) -> None:
        path = tmp_path / "people.jsonl"
        path.write_text('{"RECORD_ID": "1", "DATA_SOURCE": "OLD"}\n\n{"RECORD_ID": "2"}\n')
        records = read_records(path, data_source="NEW")
        assert [r["DATA_SOURCE"] for r in records] == ["NEW", "NEW"]

    def test_bad_json_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "people.jsonl"
        path.write_text('{"RECORD_ID": "1"}\n[1, 2]\n')
        with pytest.raises(FixtureError, match="people.jsonl:2"):
            read_records(path)

    def test_json_document_must_be_array_of_objects(self, tmp_path: Path) -> None:
        path = tmp_path / "people.json"
        path.write_text('{"RECORD_ID": "1"}')
        with pytest.raises(FixtureError, match="array of objects"):
            read_records(path)

    def test_encoding(self, tmp_path: Path) -> None:
        path = tmp_path / "people.csv"
        path.write_bytes("RECORD_ID,NAME_FIRST\n1,Zoë\n".encode("latin-1"))
        assert read_records(path, encoding="latin-1") == [{"RECORD_ID": "1", "NAME_FIRST": "Zoë"}]
