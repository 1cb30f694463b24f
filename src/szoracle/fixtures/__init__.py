"""Fixture data: file formats, the loader, and the graph scenario dataset."""

from szoracle.fixtures.files import DataFormat, prepare_data_file, read_records
from szoracle.fixtures.graph_data import GraphTestData
from szoracle.fixtures.loader import FixtureLoader, StandardFixtureLoader, process_redos

__all__ = [
    "DataFormat",
    "FixtureLoader",
    "GraphTestData",
    "StandardFixtureLoader",
    "prepare_data_file",
    "process_redos",
    "read_records",
]
