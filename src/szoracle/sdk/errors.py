# src/szoracle/sdk/errors.py
"""Exception taxonomy raised by an entity-resolution SDK.

The oracle never raises these for its own failures; it asserts that the
engine raises the documented kind for a given malformed input.

Hierarchy:
    SzError
    ├── SzBadInputError
    │   ├── SzNotFoundError
    │   └── SzUnknownDataSourceError
    ├── SzConfigurationError
    ├── SzReplaceConflictError
    ├── SzRetryableError
    │   ├── SzDatabaseConnectionLostError
    │   ├── SzDatabaseTransientError
    │   └── SzRetryTimeoutExceededError
    └── SzUnrecoverableError
        ├── SzDatabaseError
        ├── SzLicenseError
        ├── SzNotInitializedError
        ├── SzUnhandledError
        └── SzEnvironmentDestroyedError
"""

from __future__ import annotations


class SzError(Exception):
    """Base class for every SDK failure.

    Attributes:
        error_code: Engine error code, when the failure came from the engine
    """

    def __init__(self, message: str, *, error_code: int | None = None) -> None:
        self.error_code = error_code
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if self.error_code is None:
            return message
        return f"SENZ{self.error_code:04d}|{message}"


class SzBadInputError(SzError):
    """Malformed input: bad JSON, invalid export column, unknown handle, ..."""


class SzNotFoundError(SzBadInputError):
    """No record or entity exists for the given identifier."""


class SzUnknownDataSourceError(SzBadInputError):
    """The data source code is not registered in the active configuration."""


class SzConfigurationError(SzError):
    """The engine configuration is invalid or inconsistent."""


class SzReplaceConflictError(SzError):
    """Optimistic-concurrency failure swapping the default configuration.

    Raised when the current default configuration id no longer matches the
    id the caller expected to replace. Not a retryable error: the caller
    must re-read the default id before trying again.
    """


class SzRetryableError(SzError):
    """The operation failed but may succeed if retried."""


class SzDatabaseConnectionLostError(SzRetryableError):
    """The database connection dropped mid-operation."""


class SzDatabaseTransientError(SzRetryableError):
    """A transient database condition, such as a lock timeout."""


class SzRetryTimeoutExceededError(SzRetryableError):
    """A timeout was exceeded; a retry with a longer timeout may succeed."""


class SzUnrecoverableError(SzError):
    """The environment is no longer usable."""


class SzDatabaseError(SzUnrecoverableError):
    """Database failure that cannot be recovered from (e.g. missing schema)."""


class SzLicenseError(SzUnrecoverableError):
    """Invalid, expired or exhausted engine license."""


class SzNotInitializedError(SzUnrecoverableError):
    """The engine was used before it was initialized."""


class SzUnhandledError(SzUnrecoverableError):
    """Otherwise unhandled failure inside the SDK."""


class SzEnvironmentDestroyedError(SzUnrecoverableError):
    """An operation was attempted after the environment was destroyed."""


def error_code_of(exc: BaseException) -> int | None:
    """Engine error code of ``exc`` when it is an SDK error, else None."""
    if isinstance(exc, SzError):
        return exc.error_code
    return None
