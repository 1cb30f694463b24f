"""Result validators, the case driver and the generated scenario suite."""

from szoracle.oracle.analysis import validate_how_entity, validate_why_entities, validate_why_records
from szoracle.oracle.driver import CaseFailure, OracleCounts, OracleDriver, SuiteReport, case_id
from szoracle.oracle.network import validate_network
from szoracle.oracle.path import validate_path
from szoracle.oracle.scenarios import FIND_NETWORK_FLAG_SET, FIND_PATH_FLAG_SET, network_cases, path_cases

__all__ = [
    "FIND_NETWORK_FLAG_SET",
    "FIND_PATH_FLAG_SET",
    "CaseFailure",
    "OracleCounts",
    "OracleDriver",
    "SuiteReport",
    "case_id",
    "network_cases",
    "path_cases",
    "validate_how_entity",
    "validate_network",
    "validate_path",
    "validate_why_entities",
    "validate_why_records",
]
