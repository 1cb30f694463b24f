"""Exceptions owned by the oracle itself.

The SDK's own taxonomy (not-found, unknown data source, ...) lives in
szoracle.sdk.errors; the oracle asserts those, it never raises them.
"""

from typing import Any


class OracleAssertionError(AssertionError):
    """Raised when an actual SDK result contradicts its expectation.

    Subclasses AssertionError so pytest renders it as a test failure
    rather than an error.

    Attributes:
        description: Human-readable description of the case under test
        context: Expected/actual details rendered into the message
    """

    def __init__(
        self,
        message: str,
        *,
        description: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize OracleAssertionError.

        Args:
            message: What went wrong
            description: Test case description, if known
            context: Expected/actual values to aid diagnosis
        """
        self.description = description
        self.context = dict(context) if context else {}
        parts = [message]
        if description:
            parts.append(f"case=[ {description} ]")
        parts.extend(f"{name}=[ {value!r} ]" for name, value in self.context.items())
        super().__init__(", ".join(parts))


class FixtureError(ValueError):
    """Raised when fixture data or a fixture file violates its preconditions."""

    pass
