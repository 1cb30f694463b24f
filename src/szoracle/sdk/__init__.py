"""SDK contract layer: exception taxonomy, flag registry, protocols, export scoping.

Import patterns:
    from szoracle.sdk import SzNotFoundError, SzEngine
    from szoracle.sdk.flags import SZ_FIND_PATH_DEFAULT_FLAGS, flags_with
"""

from szoracle.sdk.errors import (
    SzBadInputError,
    SzConfigurationError,
    SzDatabaseConnectionLostError,
    SzDatabaseError,
    SzDatabaseTransientError,
    SzEnvironmentDestroyedError,
    SzError,
    SzLicenseError,
    SzNotFoundError,
    SzNotInitializedError,
    SzReplaceConflictError,
    SzRetryableError,
    SzRetryTimeoutExceededError,
    SzUnhandledError,
    SzUnknownDataSourceError,
    SzUnrecoverableError,
    error_code_of,
)
from szoracle.sdk.export import export_report, iter_export
from szoracle.sdk.protocols import SzConfig, SzConfigManager, SzEngine, SzEnvironment

__all__ = [
    "SzBadInputError",
    "SzConfig",
    "SzConfigManager",
    "SzConfigurationError",
    "SzDatabaseConnectionLostError",
    "SzDatabaseError",
    "SzDatabaseTransientError",
    "SzEngine",
    "SzEnvironment",
    "SzEnvironmentDestroyedError",
    "SzError",
    "SzLicenseError",
    "SzNotFoundError",
    "SzNotInitializedError",
    "SzReplaceConflictError",
    "SzRetryTimeoutExceededError",
    "SzRetryableError",
    "SzUnhandledError",
    "SzUnknownDataSourceError",
    "SzUnrecoverableError",
    "error_code_of",
    "export_report",
    "iter_export",
]
