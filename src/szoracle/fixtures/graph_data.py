# src/szoracle/fixtures/graph_data.py
"""The graph scenario dataset: twelve people across three data sources.

No two records describe the same person, so each resolves to its own
entity. Records relate only through a shared phone number or address:

    ABC123 - DEF456   mobile 213-555-1212
    ABC123 - MNO345   101 Main Street
    DEF456 - GHI789   101 Fifth Ave
    DEF456 - PQR678   home 818-888-3939
    GHI789 - JKL012   mobile 818-555-1313
    JKL012 - XYZ234   400 River Street
    MNO345 - DEF890   mobile 818-444-2121
    PQR678 - ABC567   451 Dover Street
    DEF890 - JKL456   707 Seventh Ave
    XYZ234 - JKL456   mobile 818-333-7171
    XYZ234 - GHI123   home 818-123-9876
    GHI123 - STU901   888 Sepulveda Blvd
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from szoracle.contracts.records import RecordKey
from szoracle.core.logging import get_logger
from szoracle.core.lookup import RecordEntityLookup
from szoracle.fixtures.files import DataFormat, prepare_data_file
from szoracle.fixtures.loader import FixtureLoader

logger = get_logger(__name__)

PASSENGERS = "PASSENGERS"
EMPLOYEES = "EMPLOYEES"
VIPS = "VIPS"
UNKNOWN_DATA_SOURCE = "UNKNOWN"

DATA_SOURCES: tuple[str, ...] = (PASSENGERS, EMPLOYEES, VIPS)

PASSENGER_ABC123 = RecordKey(PASSENGERS, "ABC123")
PASSENGER_DEF456 = RecordKey(PASSENGERS, "DEF456")
PASSENGER_GHI789 = RecordKey(PASSENGERS, "GHI789")
PASSENGER_JKL012 = RecordKey(PASSENGERS, "JKL012")
EMPLOYEE_MNO345 = RecordKey(EMPLOYEES, "MNO345")
EMPLOYEE_PQR678 = RecordKey(EMPLOYEES, "PQR678")
EMPLOYEE_ABC567 = RecordKey(EMPLOYEES, "ABC567")
EMPLOYEE_DEF890 = RecordKey(EMPLOYEES, "DEF890")
VIP_STU901 = RecordKey(VIPS, "STU901")
VIP_XYZ234 = RecordKey(VIPS, "XYZ234")
VIP_GHI123 = RecordKey(VIPS, "GHI123")
VIP_JKL456 = RecordKey(VIPS, "JKL456")

RECORD_KEYS: tuple[RecordKey, ...] = (
    PASSENGER_ABC123,
    PASSENGER_DEF456,
    PASSENGER_GHI789,
    PASSENGER_JKL012,
    EMPLOYEE_MNO345,
    EMPLOYEE_PQR678,
    EMPLOYEE_ABC567,
    EMPLOYEE_DEF890,
    VIP_STU901,
    VIP_XYZ234,
    VIP_GHI123,
    VIP_JKL456,
)

HEADERS: tuple[str, ...] = (
    "RECORD_ID",
    "NAME_FIRST",
    "NAME_LAST",
    "MOBILE_PHONE_NUMBER",
    "HOME_PHONE_NUMBER",
    "ADDR_FULL",
    "DATE_OF_BIRTH",
)

PASSENGER_ROWS: tuple[tuple[str, ...], ...] = (
    ("ABC123", "Joseph", "Schmidt", "213-555-1212", "818-777-2424",
     "101 Main Street, Los Angeles, CA 90011", "12-JAN-1981"),
    ("DEF456", "Joann", "Smith", "213-555-1212", "818-888-3939",
     "101 Fifth Ave, Los Angeles, CA 90018", "15-MAR-1982"),
    ("GHI789", "John", "Parker", "818-555-1313", "818-999-2121",
     "101 Fifth Ave, Los Angeles, CA 90018", "17-DEC-1977"),
    ("JKL012", "Jane", "Donaldson", "818-555-1313", "818-222-3131",
     "400 River Street, Pasadena, CA 90034", "23-MAY-1973"),
)  # fmt: skip

EMPLOYEE_ROWS: tuple[tuple[str, ...], ...] = (
    ("MNO345", "Bill", "Bandley", "818-444-2121", "818-123-4567",
     "101 Main Street, Los Angeles, CA 90011", "22-AUG-1981"),
    ("PQR678", "Craig", "Smith", "818-555-1212", "818-888-3939",
     "451 Dover Street, Los Angeles, CA 90018", "17-OCT-1983"),
    ("ABC567", "Kim", "Long", "818-246-8024", "818-135-7913",
     "451 Dover Street, Los Angeles, CA 90018", "24-NOV-1975"),
    ("DEF890", "Katrina", "Osmond", "818-444-2121", "818-111-2222",
     "707 Seventh Ave, Los Angeles, CA 90043", "27-JUN-1980"),
)  # fmt: skip

VIP_ROWS: tuple[tuple[str, ...], ...] = (
    ("STU901", "Martha", "Wayne", "818-891-9292", "818-987-1234",
     "888 Sepulveda Blvd, Los Angeles, CA 90034", "27-NOV-1973"),
    ("XYZ234", "Jane", "Johnson", "818-333-7171", "818-123-9876",
     "400 River Street, Pasadena, CA 90034", "6-SEP-1975"),
    ("GHI123", "Martha", "Kent", "818-333-5757", "818-123-9876",
     "888 Sepulveda Blvd, Los Angeles, CA 90034", "17-AUG-1978"),
    ("JKL456", "Kelly", "Rogers", "818-333-7171", "818-789-6543",
     "707 Seventh Ave, Los Angeles, CA 90043", "15-JAN-1979"),
)  # fmt: skip


@dataclass(frozen=True, slots=True)
class FixtureFile:
    """One data source's rows and the format they are written in."""

    data_source: str
    data_format: DataFormat
    prefix: str
    rows: Sequence[Sequence[str]]

    def write(self, directory: Path | None = None) -> Path:
        return prepare_data_file(self.data_format, self.prefix, HEADERS, self.rows, directory)


FIXTURE_FILES: tuple[FixtureFile, ...] = (
    FixtureFile(PASSENGERS, DataFormat.CSV, "test-passengers-", PASSENGER_ROWS),
    FixtureFile(EMPLOYEES, DataFormat.JSON, "test-employees-", EMPLOYEE_ROWS),
    FixtureFile(VIPS, DataFormat.JSON_LINES, "test-vips-", VIP_ROWS),
)


@dataclass(slots=True)
class GraphTestData:
    """Owns the loaded dataset and its entity snapshot.

    ``lookup`` is None until load() has run.
    """

    lookup: RecordEntityLookup | None = None
    records: dict[RecordKey, str] = field(default_factory=dict)

    def load(self, loader: FixtureLoader, directory: Path | None = None) -> RecordEntityLookup:
        """Register the data sources, write and load every fixture file.

        Temporary fixture files are removed once loaded.
        """
        loader.configure_data_sources(*DATA_SOURCES)

        records: dict[RecordKey, str] = {}
        for fixture in FIXTURE_FILES:
            path = fixture.write(directory)
            try:
                records.update(loader.load_records(fixture.data_source, path))
            finally:
                path.unlink(missing_ok=True)

        self.records = records
        self.lookup = loader.get_entity_lookup(records)
        logger.info("graph_data_loaded", records=len(records), entities=len(self.lookup.by_entity_id))
        return self.lookup

    def require_lookup(self) -> RecordEntityLookup:
        if self.lookup is None:
            raise RuntimeError("GraphTestData.load() must run before cases are generated")
        return self.lookup

    def entity_id(self, key: RecordKey) -> int | None:
        return self.require_lookup().entity_id_of(key)
